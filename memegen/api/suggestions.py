# memegen/api/suggestions.py
from fastapi import APIRouter
from pydantic import BaseModel

from memegen.data.templates import get_template
from memegen.services.compositor.exporter import to_blob
from memegen.services.compositor.meme_composer import load_source
from memegen.services.llm.suggestions import Suggestion, get_suggestion

router = APIRouter()


class SuggestionRequest(BaseModel):
    template_id: str
    current_top: str | None = None
    current_bottom: str | None = None
    # http(s) URL 또는 data URI. 있으면 이미지 분석 기반 추천
    image_url: str | None = None


@router.post("/v1/suggestions", response_model=Suggestion)
def suggest(req: SuggestionRequest):
    template = get_template(req.template_id)
    image = to_blob(load_source(req.image_url)) if req.image_url else None
    return get_suggestion(template.id, template.name, req.current_top, req.current_bottom, image=image)
