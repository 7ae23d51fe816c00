# memegen/services/community/health.py

import threading

from memegen.core.errors import StoreUnavailableError
from memegen.core.logging import get_logger
from memegen.services.community.stores import SupabaseStore

logger = get_logger(__name__)


class HealthChecker:
    """원격 저장소 주기 점검 (명시적으로 start/stop)"""

    def __init__(self, store: SupabaseStore | None, interval: float = 300.0):
        self.store = store
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def check(self) -> bool:
        if self.store is None:
            logger.info("Supabase not configured, skipping health check")
            return False
        try:
            self.store.ping()
        except StoreUnavailableError as e:
            logger.warning("Supabase health check failed: %s", e)
            return False
        logger.debug("Supabase health check passed")
        return True

    def _run(self) -> None:
        self.check()
        while not self._stop.wait(self.interval):
            self.check()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="supabase-health", daemon=True)
        self._thread.start()
        logger.info("Started Supabase health checks (every %.0fs)", self.interval)

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=5)
        self._thread = None
        logger.info("Stopped Supabase health checks")
