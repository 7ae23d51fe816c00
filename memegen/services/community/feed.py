# memegen/services/community/feed.py

import time

from memegen.core.errors import MemeNotFoundError, StoreUnavailableError
from memegen.core.logging import get_logger
from memegen.services.community.models import REACTIONS, FeedPage, MemeRecord, ReactionResult
from memegen.services.community.stores import LocalStore, SupabaseStore

logger = get_logger(__name__)


class CommunityFeed:
    """
    커뮤니티 피드
    - 원격(Supabase) 우선, 연결 실패 시 로컬 JSON 캐시로 fallback
    - remote=None 이면 처음부터 로컬만 사용
    """

    def __init__(self, remote: SupabaseStore | None, local: LocalStore, *, page_size: int = 6):
        self.remote = remote
        self.local = local
        self.page_size = page_size

    def publish(self, blob: bytes, top_text: str, bottom_text: str, template_id: str = "custom",
                author_id: str | None = None) -> MemeRecord:
        object_path = f"memes/{int(time.time() * 1000)}-{template_id}.png"

        if self.remote is not None:
            try:
                url = self.remote.upload_image(object_path, blob, "image/png")
                return self.remote.insert(url, top_text, bottom_text, author_id)
            except StoreUnavailableError as e:
                logger.warning("remote publish failed, saving locally: %s", e)

        url = self.local.upload_image(object_path, blob, "image/png")
        return self.local.insert(url, top_text, bottom_text, author_id)

    def list_page(self, page: int = 0) -> FeedPage:
        if self.remote is not None:
            try:
                items = self.remote.list_page(page, self.page_size)
                return FeedPage(items=items, page=page, has_more=len(items) == self.page_size)
            except StoreUnavailableError as e:
                logger.warning("remote feed unavailable, reading local cache: %s", e)

        items = self.local.list_page(page, self.page_size)
        return FeedPage(items=items, page=page, has_more=len(items) == self.page_size, source="local")

    def _locate(self, meme_id: str) -> tuple[MemeRecord, SupabaseStore | LocalStore]:
        """레코드와 그 레코드를 가진 저장소 (원격 장애/미존재 시 로컬 캐시)"""
        if self.remote is not None:
            try:
                return self.remote.get(meme_id), self.remote
            except StoreUnavailableError as e:
                logger.warning("remote lookup failed for %s, reading local cache: %s", meme_id, e)
            except MemeNotFoundError:
                # 장애 중 로컬에 저장된 밈은 원격에 없음
                logger.debug("meme %s not in remote store, checking local cache", meme_id)
        return self.local.get(meme_id), self.local

    def get(self, meme_id: str) -> MemeRecord:
        return self._locate(meme_id)[0]

    def react(self, meme_id: str, previous: str, reaction: str) -> ReactionResult:
        """
        반응 토글 (같은 반응 다시 누르면 해제)
        - 카운트는 레코드를 읽어온 저장소에 기록
        - 저장 실패 시 이전 선택/카운트로 롤백
        """
        if reaction not in REACTIONS:
            raise ValueError(f"unknown reaction: {reaction}")

        record, store = self._locate(meme_id)
        selection = "" if previous == reaction else reaction
        delta = (1 if selection else 0) - (1 if previous else 0)
        total = max(0, record.reactions_count + delta)

        try:
            store.update_reactions(meme_id, total)
        except StoreUnavailableError as e:
            logger.error("reaction update failed for %s, rolling back: %s", meme_id, e)
            return ReactionResult(meme_id=meme_id, selection=previous,
                                  reactions_count=record.reactions_count, persisted=False)

        return ReactionResult(meme_id=meme_id, selection=selection, reactions_count=total, persisted=True)
