from io import BytesIO

import pytest
from PIL import Image


def make_png(size=(700, 600), color=(40, 120, 200)) -> bytes:
    img = Image.new("RGB", size, color)
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def gradient_image() -> Image.Image:
    # 영역 비교용: 픽셀마다 값이 다른 이미지
    img = Image.new("RGBA", (600, 600))
    img.putdata([(x % 256, y % 256, (x + y) % 256, 255) for y in range(600) for x in range(600)])
    return img
