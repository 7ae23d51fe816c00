# memegen/api/deps.py
from functools import lru_cache

from memegen.core.config import settings
from memegen.services.community.engagement import EngagementTracker
from memegen.services.community.feed import CommunityFeed
from memegen.services.community.stores import LocalStore, SupabaseStore


@lru_cache
def get_remote_store() -> SupabaseStore | None:
    if not settings.supabase_configured:
        return None
    return SupabaseStore(
        settings.supabase_url,
        settings.supabase_anon_key,
        bucket=settings.supabase_bucket,
        table=settings.supabase_table,
        timeout=settings.http_timeout,
    )


@lru_cache
def get_feed() -> CommunityFeed:
    return CommunityFeed(
        get_remote_store(),
        LocalStore(settings.local_store_path),
        page_size=settings.feed_page_size,
    )


@lru_cache
def get_engagement() -> EngagementTracker:
    return EngagementTracker(settings.engagement_path)
