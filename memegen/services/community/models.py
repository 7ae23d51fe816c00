# memegen/services/community/models.py
from datetime import datetime

from pydantic import BaseModel

REACTIONS = ("laugh", "fire", "heart", "wow")


class MemeRecord(BaseModel):
    id: str
    image_url: str
    top_text: str = ""
    bottom_text: str = ""
    author_id: str | None = None
    created_at: datetime
    reactions_count: int = 0


class FeedPage(BaseModel):
    items: list[MemeRecord]
    page: int
    has_more: bool
    source: str = "remote"


class ReactionResult(BaseModel):
    meme_id: str
    selection: str  # "" = 반응 없음
    reactions_count: int
    persisted: bool
