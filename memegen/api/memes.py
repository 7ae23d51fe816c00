# memegen/api/memes.py
from typing import Literal

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel, ValidationError

from memegen.core.logging import get_logger
from memegen.data.templates import get_template
from memegen.services.compositor.exporter import render_story, to_blob, to_data_uri
from memegen.services.compositor.meme_composer import render_captioned_source, render_captioned_template
from memegen.services.compositor.position import CaptionPositions
from memegen.services.compositor.style import StyleOptions

logger = get_logger(__name__)

router = APIRouter()


class RenderRequest(BaseModel):
    template_id: str
    top_text: str = ""
    bottom_text: str = ""
    style: StyleOptions | None = None
    positions: CaptionPositions | None = None
    format: Literal["png", "data_uri"] = "png"


def _png(blob: bytes, filename: str) -> Response:
    return Response(
        content=blob,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


def _parse_form_json(model, raw: str | None):
    if not raw:
        return None
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=f"{model.__name__} 파싱 실패: {e.errors()}")


@router.post("/v1/memes/template")
def render_template_meme(req: RenderRequest):
    template = get_template(req.template_id)
    image = render_captioned_template(template, req.top_text, req.bottom_text, req.style, req.positions)

    if req.format == "data_uri":
        return {"template_id": template.id, "data_uri": to_data_uri(image)}
    return _png(to_blob(image), f"meme-{template.id}.png")


@router.post("/v1/memes/upload")
async def render_uploaded_meme(
    image: UploadFile = File(...),
    top_text: str = Form(""),
    bottom_text: str = Form(""),
    style: str | None = Form(None),
    positions: str | None = Form(None),
):
    image_bytes = await image.read()
    if not image_bytes:
        raise HTTPException(status_code=400, detail="빈 이미지")

    style_opts = _parse_form_json(StyleOptions, style)
    position_opts = _parse_form_json(CaptionPositions, positions)

    composed = await run_in_threadpool(
        render_captioned_source, image_bytes, top_text, bottom_text, style_opts, position_opts
    )
    blob = await run_in_threadpool(to_blob, composed)
    return _png(blob, "meme-upload.png")


@router.post("/v1/memes/story")
async def render_story_meme(
    image: UploadFile | None = File(None),
    template_id: str | None = Form(None),
    top_text: str = Form(""),
    bottom_text: str = Form(""),
    style: str | None = Form(None),
):
    if image is not None:
        source = await image.read()
        if not source:
            raise HTTPException(status_code=400, detail="빈 이미지")
    elif template_id:
        source = get_template(template_id)
    else:
        raise HTTPException(status_code=400, detail="image 또는 template_id 필요")

    style_opts = _parse_form_json(StyleOptions, style)
    blob = await run_in_threadpool(render_story, source, top_text, bottom_text, style_opts)
    return _png(blob, "meme-story.png")
