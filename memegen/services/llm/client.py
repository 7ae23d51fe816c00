# memegen/services/llm/client.py

import base64

from anthropic import Anthropic

from memegen.core.config import settings
from memegen.core.errors import SuggestionError
from memegen.core.logging import get_logger

logger = get_logger(__name__)

_client: Anthropic | None = None


def _get_client() -> Anthropic:
    # 키가 설정된 뒤에만 클라이언트 생성
    global _client
    if _client is None:
        _client = Anthropic(api_key=settings.anthropic_api_key)
    return _client


def _content(prompt: str, image: bytes | None, media_type: str):
    if image is None:
        return prompt
    return [
        {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": media_type,
                "data": base64.b64encode(image).decode("ascii"),
            },
        },
        {"type": "text", "text": prompt},
    ]


def call_claude(prompt: str, model: str = None, max_tokens: int = None,
                image: bytes = None, media_type: str = "image/png") -> str:
    """
    Claude API 호출 함수
    - prompt: LLM에 전달할 프롬프트 문자열
    - image: 함께 보낼 이미지 바이트 (base64 image 블록으로 전송)
    - model: 사용할 Claude 모델 (None이면 기본값)
    - max_tokens: 최대 출력 토큰 수 (None이면 기본값)
    """
    try:
        response = _get_client().messages.create(
            model=model or settings.claude_default_model,
            max_tokens=max_tokens or settings.claude_max_tokens,
            messages=[{"role": "user", "content": _content(prompt, image, media_type)}],
        )
        return response.content[0].text
    except Exception as e:
        logger.error("[ClaudeClient] API 호출 실패: %s", e)
        raise SuggestionError(str(e)) from e
