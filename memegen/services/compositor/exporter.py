# memegen/services/compositor/exporter.py

import base64
from io import BytesIO

from PIL import Image

from memegen.core.errors import EncodingError
from memegen.core.logging import get_logger
from memegen.data.templates import Anchor
from memegen.services.compositor.meme_composer import load_source, new_surface, paint_captions
from memegen.services.compositor.style import StyleOptions, resolve_style

logger = get_logger(__name__)

STORY_SIZE = (1080, 1920)
STORY_TOP_Y_PCT = 0.05
STORY_BOTTOM_Y_PCT = 0.80
STORY_MAX_WIDTH_PCT = 0.9

_PIL_FORMATS = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/webp": "WEBP",
}


def to_buffer(image: Image.Image, mime_type: str = "image/png", quality: float = 0.92) -> BytesIO:
    fmt = _PIL_FORMATS.get(mime_type)
    if fmt is None:
        raise EncodingError(f"Unsupported export type: {mime_type}")

    params = {}
    if fmt != "PNG":
        # PNG는 quality 무시
        params["quality"] = int(round(quality * 100))
    out = image.convert("RGB") if fmt == "JPEG" else image

    buf = BytesIO()
    try:
        out.save(buf, format=fmt, **params)
    except (OSError, ValueError, KeyError) as e:
        raise EncodingError(f"Failed to encode {mime_type}: {e}") from e
    buf.seek(0)
    return buf


def to_blob(image: Image.Image, mime_type: str = "image/png", quality: float = 0.92) -> bytes:
    return to_buffer(image, mime_type, quality).getvalue()


def to_data_uri(image: Image.Image, mime_type: str = "image/png") -> str:
    """미리보기용 data URI (네트워크/파일 I/O 없음)"""
    payload = base64.b64encode(to_blob(image, mime_type)).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def compose_story(source, top_text: str, bottom_text: str, style: StyleOptions | None = None) -> Image.Image:
    """
    1080x1920 세로 스토리 캔버스
    - 원본은 비율 유지 contain fit, 가운데 배치, 남는 영역은 검정
    - 캡션은 템플릿 좌표와 무관하게 상단 5% / 하단 80% 위치
    """
    W, H = STORY_SIZE
    image = load_source(source)

    canvas = new_surface(STORY_SIZE, (0, 0, 0, 255))

    sw, sh = image.size
    scale = min(W / sw, H / sh)
    new_w, new_h = max(1, round(sw * scale)), max(1, round(sh * scale))
    fitted = image.resize((new_w, new_h), Image.LANCZOS)
    canvas.alpha_composite(fitted, dest=((W - new_w) // 2, (H - new_h) // 2))

    anchors = {
        "top": Anchor(x=W / 2, y=H * STORY_TOP_Y_PCT, max_width=W * STORY_MAX_WIDTH_PCT),
        "bottom": Anchor(x=W / 2, y=H * STORY_BOTTOM_Y_PCT, max_width=W * STORY_MAX_WIDTH_PCT),
    }
    paint_captions(canvas, {"top": top_text, "bottom": bottom_text}, anchors, resolve_style(style, story=True))
    logger.info("composed story %dx%d from %dx%d source", W, H, sw, sh)
    return canvas


def render_story(
    source,
    top_text: str,
    bottom_text: str,
    style: StyleOptions | None = None,
    *,
    mime_type: str = "image/png",
) -> bytes:
    return to_blob(compose_story(source, top_text, bottom_text, style), mime_type)
