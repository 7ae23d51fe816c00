# memegen/services/compositor/text_layout.py

import math
from functools import lru_cache
from pathlib import Path
from typing import Callable

from PIL import ImageFont

from memegen.core.config import settings
from memegen.core.logging import get_logger

logger = get_logger(__name__)

# Impact 계열 굵은 폰트 → sans-serif fallback
FONT_STACK = (
    "Impact.ttf",
    "impact.ttf",
    "Arial Black.ttf",
    "ariblk.ttf",
    "DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "FreeSansBold.ttf",
)

MIN_FONT_SIZE = 10
LINE_SPACING = 1.2


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """
    픽셀 폭 기준 greedy 줄바꿈
    - 단어 중간에서 자르지 않음 (max_width보다 긴 단어는 혼자 한 줄)
    - 빈 문자열이면 빈 리스트
    """
    words = text.split()
    if not words:
        return []

    lines = []
    line = words[0]
    for word in words[1:]:
        test_line = f"{line} {word}"
        if measure(test_line) < max_width:
            line = test_line
        else:
            lines.append(line)
            line = word
    lines.append(line)
    return lines


def font_size_for(image_width: int, font_scale: float = 1.0) -> int:
    return max(MIN_FONT_SIZE, int(math.floor(image_width / 15) * font_scale))


def line_height(font_size: int) -> float:
    return font_size * LINE_SPACING


def _font_candidates() -> list[str]:
    candidates = list(FONT_STACK)
    if settings.caption_font_path and Path(settings.caption_font_path).exists():
        candidates.insert(0, str(settings.caption_font_path))
    return candidates


@lru_cache(maxsize=64)
def load_caption_font(size: int) -> ImageFont.FreeTypeFont:
    for name in _font_candidates():
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.warning("caption font not found, using Pillow default (size=%d)", size)
    return ImageFont.load_default(size=size)
