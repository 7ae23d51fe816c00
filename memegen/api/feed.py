# memegen/api/feed.py
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from memegen.api.deps import get_engagement, get_feed
from memegen.api.memes import RenderRequest
from memegen.core.logging import get_logger
from memegen.data.templates import get_template
from memegen.services.community.engagement import EngagementState, EngagementTracker
from memegen.services.community.feed import CommunityFeed
from memegen.services.community.models import FeedPage, MemeRecord, ReactionResult
from memegen.services.compositor.exporter import to_blob
from memegen.services.compositor.meme_composer import render_captioned_template

logger = get_logger(__name__)

router = APIRouter()


class PublishResponse(BaseModel):
    meme: MemeRecord
    engagement: EngagementState


class ReactionRequest(BaseModel):
    reaction: str
    previous: str = ""


@router.get("/v1/feed", response_model=FeedPage)
def list_feed(page: int = Query(0, ge=0), feed: CommunityFeed = Depends(get_feed)):
    return feed.list_page(page)


@router.get("/v1/feed/{meme_id}", response_model=MemeRecord)
def get_meme(meme_id: str, feed: CommunityFeed = Depends(get_feed)):
    return feed.get(meme_id)


@router.post("/v1/feed", response_model=PublishResponse)
def publish(
    req: RenderRequest,
    feed: CommunityFeed = Depends(get_feed),
    engagement: EngagementTracker = Depends(get_engagement),
):
    template = get_template(req.template_id)
    image = render_captioned_template(template, req.top_text, req.bottom_text, req.style, req.positions)
    record = feed.publish(to_blob(image), req.top_text, req.bottom_text, template_id=template.id)
    state = engagement.record()
    logger.info("published meme %s (template=%s)", record.id, template.id)
    return PublishResponse(meme=record, engagement=state)


@router.post("/v1/feed/{meme_id}/reactions", response_model=ReactionResult)
def react(meme_id: str, req: ReactionRequest, feed: CommunityFeed = Depends(get_feed)):
    try:
        return feed.react(meme_id, req.previous, req.reaction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/v1/engagement", response_model=EngagementState)
def get_engagement_state(engagement: EngagementTracker = Depends(get_engagement)):
    return engagement.load()
