# memegen/core/config.py
from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Supabase (커뮤니티 피드 원격 저장소)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_bucket: str = "Public"
    supabase_table: str = "memes"

    # Anthropic / Claude (캡션 추천)
    anthropic_api_key: str | None = None
    claude_default_model: str = "claude-3-5-haiku-20241022"
    claude_max_tokens: int = 256

    # 렌더링
    caption_font_path: Path | None = None
    http_timeout: float = 10.0

    # 로컬 fallback 저장소
    data_dir: Path = Path("data")
    local_store_path: Path = data_dir / "local_memes.json"
    engagement_path: Path = data_dir / "engagement.json"

    # 피드 / 헬스체크
    feed_page_size: int = 6
    health_check_interval: float = 300.0

    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "extra": "ignore",
    }

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_anon_key)


settings = Settings()
