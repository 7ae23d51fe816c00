import base64
from io import BytesIO
from unittest.mock import patch

import pytest
from PIL import Image

from memegen.core.errors import EncodingError, ImageLoadError
from memegen.services.compositor.exporter import compose_story, render_story, to_blob, to_buffer, to_data_uri
from tests.conftest import make_png


@pytest.fixture
def composed():
    return Image.new("RGBA", (320, 200), (200, 50, 50, 255))


def test_to_data_uri_is_decodable_png(composed):
    uri = to_data_uri(composed)
    assert uri.startswith("data:image/png;base64,")
    decoded = Image.open(BytesIO(base64.b64decode(uri.split(",", 1)[1])))
    assert decoded.format == "PNG"
    assert decoded.size == (320, 200)


def test_to_blob_png_signature(composed):
    assert to_blob(composed).startswith(b"\x89PNG\r\n\x1a\n")


def test_to_blob_jpeg_from_rgba(composed):
    blob = to_blob(composed, "image/jpeg", 0.5)
    assert Image.open(BytesIO(blob)).format == "JPEG"


def test_to_buffer_is_rewound(composed):
    assert to_buffer(composed).tell() == 0


def test_unsupported_mime_is_encoding_error(composed):
    with pytest.raises(EncodingError):
        to_blob(composed, "image/tiff")


def test_save_failure_is_encoding_error(composed):
    with patch.object(Image.Image, "save", side_effect=OSError("disk gone")):
        with pytest.raises(EncodingError):
            to_blob(composed)


# --- story ---

@pytest.mark.parametrize("size", [(400, 100), (100, 400), (1080, 1920), (50, 50), (3000, 1000)])
def test_story_is_always_1080x1920(size):
    blob = render_story(make_png(size), "top", "bottom")
    assert Image.open(BytesIO(blob)).size == (1080, 1920)


def test_story_letterbox_bars_are_black_and_source_fully_visible():
    story = compose_story(make_png((400, 100), (255, 0, 0)), "", "")
    # 1080x270 영역이 세로 가운데 → 위아래는 검정 bar
    assert story.getpixel((5, 5)) == (0, 0, 0, 255)
    assert story.getpixel((1075, 1915)) == (0, 0, 0, 255)
    assert story.getpixel((540, 960)) == (255, 0, 0, 255)
    # 좌우 끝까지 원본이 보임 (crop 없음)
    assert story.getpixel((1, 960)) == (255, 0, 0, 255)
    assert story.getpixel((1078, 960)) == (255, 0, 0, 255)


def test_story_tall_source_gets_side_bars():
    story = compose_story(make_png((100, 400), (0, 0, 255)), "", "")
    assert story.getpixel((5, 960)) == (0, 0, 0, 255)
    assert story.getpixel((540, 960)) == (0, 0, 255, 255)


@patch("memegen.services.compositor.exporter.paint_captions")
def test_story_caption_positions_ignore_template(mock_paint):
    compose_story(make_png((500, 500)), "top", "bottom")
    _, captions, anchors, style = mock_paint.call_args.args
    assert captions == {"top": "top", "bottom": "bottom"}
    assert (anchors["top"].x, anchors["top"].y) == (540, 96)
    assert anchors["bottom"].y == pytest.approx(1536)
    assert anchors["top"].max_width == pytest.approx(972)
    assert style.font_scale == 1.2 and style.shadow is True


def test_story_bad_source():
    with pytest.raises(ImageLoadError):
        render_story(b"garbage", "a", "b")
