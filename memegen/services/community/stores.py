# memegen/services/community/stores.py

"""
피드 저장소 두 가지
- SupabaseStore: Supabase REST / Storage (requests)
- LocalStore: 원격이 안 될 때 쓰는 JSON 파일 key-value 캐시
두 저장소는 같은 메서드 집합을 가진다.
"""

import base64
import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

import requests

from memegen.core.errors import MemeNotFoundError, StoreUnavailableError
from memegen.core.logging import get_logger
from memegen.services.community.models import MemeRecord

logger = get_logger(__name__)


class SupabaseStore:
    def __init__(self, url: str, anon_key: str, *, bucket: str = "Public", table: str = "memes",
                 timeout: float = 10.0, session: requests.Session | None = None):
        self.base_url = url.rstrip("/")
        self.bucket = bucket
        self.table = table
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": anon_key,
            "Authorization": f"Bearer {anon_key}",
        })

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            resp = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise StoreUnavailableError(f"Supabase {method} {path} failed: {e}") from e
        return resp

    def _records(self, resp: requests.Response) -> list[MemeRecord]:
        # 응답 디코딩 실패도 원격 장애로 취급 → 로컬 fallback 대상
        try:
            return [MemeRecord(**row) for row in resp.json()]
        except (ValueError, TypeError) as e:
            raise StoreUnavailableError(f"Supabase returned an unreadable reply: {e}") from e

    @property
    def _rest_path(self) -> str:
        return f"/rest/v1/{self.table}"

    def public_url(self, object_path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{object_path}"

    def upload_image(self, object_path: str, blob: bytes, content_type: str = "image/png") -> str:
        self._request(
            "POST",
            f"/storage/v1/object/{self.bucket}/{object_path}",
            data=blob,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )
        return self.public_url(object_path)

    def insert(self, image_url: str, top_text: str, bottom_text: str, author_id: str | None = None) -> MemeRecord:
        resp = self._request(
            "POST",
            self._rest_path,
            json={"image_url": image_url, "top_text": top_text, "bottom_text": bottom_text, "author_id": author_id},
            headers={"Prefer": "return=representation"},
        )
        records = self._records(resp)
        if not records:
            raise StoreUnavailableError("Supabase insert returned no row")
        return records[0]

    def list_page(self, page: int, page_size: int) -> list[MemeRecord]:
        resp = self._request(
            "GET",
            self._rest_path,
            params={"select": "*", "order": "created_at.desc", "offset": page * page_size, "limit": page_size},
        )
        return self._records(resp)

    def get(self, meme_id: str) -> MemeRecord:
        resp = self._request("GET", self._rest_path, params={"select": "*", "id": f"eq.{meme_id}"})
        records = self._records(resp)
        if not records:
            raise MemeNotFoundError(meme_id)
        return records[0]

    def update_reactions(self, meme_id: str, count: int) -> None:
        self._request("PATCH", self._rest_path, params={"id": f"eq.{meme_id}"}, json={"reactions_count": count})

    def ping(self) -> None:
        self._request("GET", self._rest_path, params={"select": "id", "limit": 1})


class LocalStore:
    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> list[dict]:
        if not self.path.exists():
            return []
        try:
            return json.loads(self.path.read_text(encoding="utf-8")).get("memes", [])
        except (json.JSONDecodeError, AttributeError) as e:
            logger.warning("local store unreadable (%s), starting empty: %s", self.path, e)
            return []

    def _save(self, rows: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"memes": rows}, ensure_ascii=False, indent=2), encoding="utf-8")

    def upload_image(self, object_path: str, blob: bytes, content_type: str = "image/png") -> str:
        # 로컬은 이미지를 data URI로 레코드에 인라인 저장
        return f"data:{content_type};base64,{base64.b64encode(blob).decode('ascii')}"

    def insert(self, image_url: str, top_text: str, bottom_text: str, author_id: str | None = None) -> MemeRecord:
        record = MemeRecord(
            id=str(uuid.uuid4()),
            image_url=image_url,
            top_text=top_text,
            bottom_text=bottom_text,
            author_id=author_id,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            rows = self._load()
            rows.append(record.model_dump(mode="json"))
            self._save(rows)
        return record

    def list_page(self, page: int, page_size: int) -> list[MemeRecord]:
        with self._lock:
            # 같은 created_at이면 나중에 추가된 레코드가 앞
            records = [MemeRecord(**row) for row in reversed(self._load())]
        records.sort(key=lambda r: r.created_at, reverse=True)
        start = page * page_size
        return records[start:start + page_size]

    def get(self, meme_id: str) -> MemeRecord:
        with self._lock:
            for row in self._load():
                if row.get("id") == meme_id:
                    return MemeRecord(**row)
        raise MemeNotFoundError(meme_id)

    def update_reactions(self, meme_id: str, count: int) -> None:
        with self._lock:
            rows = self._load()
            for row in rows:
                if row.get("id") == meme_id:
                    row["reactions_count"] = count
                    self._save(rows)
                    return
        raise MemeNotFoundError(meme_id)

    def ping(self) -> None:
        return None
