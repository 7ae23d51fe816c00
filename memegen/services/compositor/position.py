# memegen/services/compositor/position.py
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from memegen.data.templates import Anchor, MemeTemplate

Slot = Literal["top", "bottom"]
SLOTS: tuple[Slot, ...] = ("top", "bottom")

DEFAULT_OVERRIDE_MAX_WIDTH_PCT = 0.8

# 업로드 이미지 (템플릿/오버라이드 없음) 기본 배치
HEURISTIC_Y_PCT = {"top": 0.05, "bottom": 0.85}
HEURISTIC_MAX_WIDTH_PCT = 0.9


class PositionOverride(BaseModel):
    """드래그로 옮긴 캡션 위치 (이미지 크기 대비 0..1)"""

    model_config = ConfigDict(frozen=True)

    x_pct: float | None = Field(default=None, ge=0, le=1)
    y_pct: float | None = Field(default=None, ge=0, le=1)
    max_width_pct: float | None = Field(default=None, ge=0, le=1)


class CaptionPositions(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: PositionOverride | None = None
    bottom: PositionOverride | None = None

    def for_slot(self, slot: Slot) -> PositionOverride | None:
        return self.top if slot == "top" else self.bottom


def _heuristic_anchor(slot: Slot, image_size: tuple[int, int]) -> Anchor:
    W, H = image_size
    return Anchor(x=W / 2, y=H * HEURISTIC_Y_PCT[slot], max_width=W * HEURISTIC_MAX_WIDTH_PCT)


def resolve_anchor(
    slot: Slot,
    image_size: tuple[int, int],
    template: MemeTemplate | None = None,
    override: PositionOverride | None = None,
) -> Anchor:
    """
    override → template 고정 좌표 → 이미지 비율 기본값 순서로 결정
    - 템플릿 좌표는 참조 이미지 기준으로 작성된 값이라 스케일하지 않음
    """
    base = template.anchor_for(slot) if template is not None else _heuristic_anchor(slot, image_size)
    if override is None:
        return base

    W, H = image_size
    max_width_pct = override.max_width_pct if override.max_width_pct is not None else DEFAULT_OVERRIDE_MAX_WIDTH_PCT
    return Anchor(
        x=override.x_pct * W if override.x_pct is not None else base.x,
        y=override.y_pct * H if override.y_pct is not None else base.y,
        max_width=max_width_pct * W,
    )


def resolve_positions(
    image_size: tuple[int, int],
    template: MemeTemplate | None = None,
    positions: CaptionPositions | None = None,
) -> dict[Slot, Anchor]:
    return {
        slot: resolve_anchor(
            slot,
            image_size,
            template=template,
            override=positions.for_slot(slot) if positions is not None else None,
        )
        for slot in SLOTS
    }
