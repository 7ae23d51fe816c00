# memegen/core/logging.py
import logging
import sys

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%y/%m/%d %H:%M:%S"

_configured = False


def setup_logging(level: str | int = "INFO") -> None:
    """
    앱 로거 초기화 (한 번만)
    - 터미널 stream handler 하나
    - uvicorn 로거는 건드리지 않음
    """
    global _configured
    root = logging.getLogger("memegen")
    root.setLevel(level)
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
