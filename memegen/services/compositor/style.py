# memegen/services/compositor/style.py
from typing import Literal

from pydantic import BaseModel, ConfigDict

Align = Literal["left", "center", "right"]


class StyleOptions(BaseModel):
    """호출자가 넘기는 부분 스타일 (None = 기본값 사용)"""

    model_config = ConfigDict(frozen=True)

    font_scale: float | None = None
    stroke_width: float | None = None
    fill_color: str | None = None
    stroke_color: str | None = None
    align: Align | None = None
    shadow: bool | None = None


class ResolvedStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    font_scale: float
    stroke_width: float
    fill_color: str
    stroke_color: str
    align: Align
    shadow: bool


DEFAULT_STYLE = ResolvedStyle(
    font_scale=1.0,
    stroke_width=3,
    fill_color="white",
    stroke_color="black",
    align="center",
    shadow=False,
)

# 1080x1920 스토리용: 글자 키우고 그림자 켬
STORY_STYLE = DEFAULT_STYLE.model_copy(update={"font_scale": 1.2, "shadow": True})


def resolve_style(style: StyleOptions | None = None, *, story: bool = False) -> ResolvedStyle:
    base = STORY_STYLE if story else DEFAULT_STYLE
    if style is None:
        return base
    overrides = style.model_dump(exclude_none=True)
    return base.model_copy(update=overrides)
