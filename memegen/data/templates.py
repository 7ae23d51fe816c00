# memegen/data/templates.py
import random

from pydantic import BaseModel, ConfigDict

from memegen.core.errors import TemplateNotFoundError


class Anchor(BaseModel):
    """캡션 기준점 (템플릿 원본 픽셀 좌표계)"""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    max_width: float


class MemeTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image_url: str
    top_text: Anchor
    bottom_text: Anchor

    def anchor_for(self, slot: str) -> Anchor:
        return self.top_text if slot == "top" else self.bottom_text


def _tpl(id: str, name: str, image_url: str, top: tuple, bottom: tuple) -> MemeTemplate:
    return MemeTemplate(
        id=id,
        name=name,
        image_url=image_url,
        top_text=Anchor(x=top[0], y=top[1], max_width=top[2]),
        bottom_text=Anchor(x=bottom[0], y=bottom[1], max_width=bottom[2]),
    )


MEME_TEMPLATES: list[MemeTemplate] = [
    _tpl("drake", "Drake Hotline Bling", "https://i.imgflip.com/30b1gx.jpg", (350, 100, 300), (350, 400, 300)),
    _tpl("distracted", "Distracted Boyfriend", "https://i.imgflip.com/1ur9b0.jpg", (250, 50, 400), (250, 450, 400)),
    _tpl("expanding-brain", "Expanding Brain", "https://i.imgflip.com/1jwhww.jpg", (300, 50, 300), (300, 550, 300)),
    _tpl("two-buttons", "Two Buttons", "https://i.imgflip.com/1g8my4.jpg", (250, 50, 300), (250, 450, 300)),
    _tpl("change-my-mind", "Change My Mind", "https://i.imgflip.com/24y43o.jpg", (250, 350, 400), (250, 450, 400)),
    _tpl("success-kid", "Success Kid", "https://i.imgflip.com/1bhk.jpg", (250, 30, 400), (250, 450, 400)),
    _tpl("one-does-not-simply", "One Does Not Simply", "https://i.imgflip.com/1bij.jpg", (250, 50, 400), (250, 400, 400)),
    _tpl("batman-slap", "Batman Slapping Robin", "https://i.imgflip.com/9vct.jpg", (200, 50, 300), (500, 50, 300)),
    _tpl("is-this", "Is This A Pigeon", "https://i.imgflip.com/1o00in.jpg", (250, 50, 400), (250, 450, 400)),
    _tpl("doge", "Doge", "https://i.imgflip.com/4t0m5.jpg", (100, 50, 300), (400, 400, 300)),
]

_BY_ID = {t.id: t for t in MEME_TEMPLATES}


def list_templates() -> list[MemeTemplate]:
    return list(MEME_TEMPLATES)


def get_template(template_id: str) -> MemeTemplate:
    try:
        return _BY_ID[template_id]
    except KeyError:
        raise TemplateNotFoundError(f"unknown template: {template_id}") from None


def get_random_template(rng: random.Random | None = None) -> MemeTemplate:
    return (rng or random).choice(MEME_TEMPLATES)
