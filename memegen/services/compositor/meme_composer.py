# memegen/services/compositor/meme_composer.py

import base64
import binascii
import math
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path

import requests
from PIL import Image, ImageDraw, ImageFilter, UnidentifiedImageError

from memegen.core.config import settings
from memegen.core.errors import ImageLoadError, SurfaceUnavailableError
from memegen.core.logging import get_logger
from memegen.data.templates import Anchor, MemeTemplate
from memegen.services.compositor.position import CaptionPositions, resolve_positions
from memegen.services.compositor.style import ResolvedStyle, StyleOptions, resolve_style
from memegen.services.compositor.text_layout import font_size_for, line_height, load_caption_font, wrap_text

logger = get_logger(__name__)

SHADOW_COLOR = (0, 0, 0, 160)
SHADOW_BLUR = 4
SHADOW_OFFSET = (3, 3)

_ALIGN_ANCHORS = {"left": "la", "center": "ma", "right": "ra"}


# =====================
# 소스 이미지 로딩
# =====================

def _read_source_bytes(source) -> bytes:
    if isinstance(source, MemeTemplate):
        source = source.image_url

    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if hasattr(source, "read"):
        if hasattr(source, "seek"):
            source.seek(0)
        return source.read()
    if isinstance(source, Path):
        return source.read_bytes()
    if isinstance(source, str):
        if source.startswith(("http://", "https://")):
            resp = requests.get(source, timeout=settings.http_timeout)
            resp.raise_for_status()
            return resp.content
        if source.startswith("data:"):
            _, _, payload = source.partition(",")
            return base64.b64decode(payload, validate=True)
        return Path(source).read_bytes()
    raise TypeError(f"unsupported image source: {type(source).__name__}")


def load_source(source) -> Image.Image:
    """
    템플릿 / 업로드 파일 / URL → 디코딩된 RGBA 이미지
    - 실패는 전부 ImageLoadError (재시도 없음)
    - 읽은 버퍼는 디코딩 직후 닫음 (성공/실패 모두)
    """
    if isinstance(source, Image.Image):
        return source.convert("RGBA")

    try:
        data = _read_source_bytes(source)
        with BytesIO(data) as buf:
            with Image.open(buf) as img:
                img.load()
                decoded = img.convert("RGBA")
    except (requests.RequestException, UnidentifiedImageError, OSError, ValueError,
            TypeError, binascii.Error, Image.DecompressionBombError) as e:
        raise ImageLoadError(f"Failed to load image: {e}") from e

    logger.debug("loaded source image %dx%d", *decoded.size)
    return decoded


# =====================
# 캡션 페인팅
# =====================

@contextmanager
def drop_shadow(canvas: Image.Image, box: tuple[int, int, int, int], blur: float = SHADOW_BLUR):
    """
    한 줄 단위 그림자 스코프
    - box(그림자 글자 영역) + blur 여백 크기의 레이어에 그린 뒤 blur 해서 canvas에 합성
    - yield: (draw, origin) → 레이어 좌표 = canvas 좌표 - origin
    - 레이어는 항상 버려짐 → 다음 줄로 그림자 상태가 새지 않음
    """
    pad = math.ceil(blur * 4)
    left, top = max(0, int(box[0]) - pad), max(0, int(box[1]) - pad)
    right = min(canvas.width, math.ceil(box[2]) + pad)
    bottom = min(canvas.height, math.ceil(box[3]) + pad)
    size = (max(1, right - left), max(1, bottom - top))

    layer = Image.new("RGBA", size, (0, 0, 0, 0))
    try:
        yield ImageDraw.Draw(layer), (left, top)
        canvas.alpha_composite(layer.filter(ImageFilter.GaussianBlur(blur)), dest=(left, top))
    finally:
        layer.close()


def _paint_line(canvas, draw, xy, line, font, style: ResolvedStyle) -> None:
    anchor = _ALIGN_ANCHORS.get(style.align, "ma")
    stroke = math.ceil(style.stroke_width / 2) if style.stroke_width > 0 else 0

    if style.shadow:
        dx, dy = SHADOW_OFFSET
        shadow_xy = (xy[0] + dx, xy[1] + dy)
        box = draw.textbbox(shadow_xy, line, font=font, anchor=anchor, stroke_width=stroke)
        with drop_shadow(canvas, box) as (shadow_draw, (ox, oy)):
            shadow_draw.text(
                (shadow_xy[0] - ox, shadow_xy[1] - oy), line, font=font, fill=SHADOW_COLOR,
                anchor=anchor, stroke_width=stroke, stroke_fill=SHADOW_COLOR,
            )

    # 외곽선 먼저, 그 위에 채움
    if stroke:
        draw.text(xy, line, font=font, fill=style.stroke_color, anchor=anchor,
                  stroke_width=stroke, stroke_fill=style.stroke_color)
    draw.text(xy, line, font=font, fill=style.fill_color, anchor=anchor)


def paint_captions(
    canvas: Image.Image,
    captions: dict[str, str],
    anchors: dict[str, Anchor],
    style: ResolvedStyle,
) -> dict[str, list[str]]:
    """
    canvas 위에 슬롯별 캡션을 그린다. 빈 캡션은 건너뜀.
    반환: 슬롯별 줄바꿈 결과
    """
    draw = ImageDraw.Draw(canvas)
    font_size = font_size_for(canvas.width, style.font_scale)
    font = load_caption_font(font_size)
    step = line_height(font_size)

    def measure(s: str) -> float:
        return draw.textlength(s, font=font)

    painted = {}
    for slot, text in captions.items():
        if not text:
            continue
        anchor = anchors[slot]
        lines = wrap_text(text.upper(), anchor.max_width, measure)
        for i, line in enumerate(lines):
            _paint_line(canvas, draw, (anchor.x, anchor.y + i * step), line, font, style)
        painted[slot] = lines
    return painted


def new_surface(size: tuple[int, int], color=(0, 0, 0, 0)) -> Image.Image:
    try:
        return Image.new("RGBA", size, color)
    except (ValueError, MemoryError) as e:
        raise SurfaceUnavailableError(f"Cannot allocate {size[0]}x{size[1]} surface: {e}") from e


def _compose(image: Image.Image, top_text: str, bottom_text: str, style: ResolvedStyle, anchors) -> Image.Image:
    canvas = new_surface(image.size)
    canvas.paste(image, (0, 0))

    painted = paint_captions(canvas, {"top": top_text, "bottom": bottom_text}, anchors, style)
    logger.info(
        "composed meme %dx%d (top=%d lines, bottom=%d lines)",
        canvas.width, canvas.height,
        len(painted.get("top", [])), len(painted.get("bottom", [])),
    )
    return canvas


# =====================
# 렌더 진입점
# =====================

def render_captioned_template(
    template: MemeTemplate,
    top_text: str,
    bottom_text: str,
    style: StyleOptions | None = None,
    positions: CaptionPositions | None = None,
) -> Image.Image:
    image = load_source(template)
    anchors = resolve_positions(image.size, template=template, positions=positions)
    return _compose(image, top_text, bottom_text, resolve_style(style), anchors)


def render_captioned_source(
    source,
    top_text: str,
    bottom_text: str,
    style: StyleOptions | None = None,
    positions: CaptionPositions | None = None,
) -> Image.Image:
    """업로드 파일 / URL 렌더 (템플릿 좌표 없음 → override 또는 기본 배치)"""
    if isinstance(source, MemeTemplate):
        return render_captioned_template(source, top_text, bottom_text, style, positions)

    image = load_source(source)
    anchors = resolve_positions(image.size, positions=positions)
    return _compose(image, top_text, bottom_text, resolve_style(style), anchors)
