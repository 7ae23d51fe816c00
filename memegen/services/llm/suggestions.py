# memegen/services/llm/suggestions.py

import json
import random
import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from memegen.core.config import settings
from memegen.core.errors import SuggestionError
from memegen.core.logging import get_logger
from memegen.data.captions import DEFAULT_PROMPT, FALLBACK_CAPTIONS, GENERIC_FALLBACK, TEMPLATE_PROMPTS
from memegen.services.llm.client import call_claude

logger = get_logger(__name__)

_MAX_CAPTION_CHARS = 100

SUGGESTION_PROMPT = """{template_prompt}

Current text: {current}
Template: {template_name}

Generate ONE funny, relatable meme text that fits this template.
Return ONLY the top and bottom text, separated by "|". Make it short, punchy, and meme-worthy.
Format: "Top text" | "Bottom text"
"""

IMAGE_ANALYSIS_PROMPT = """Analyze this image for meme potential. Describe what you see, identify objects, emotions, and context. Rate the meme potential from 1-10. Return as JSON:
{
  "description": "Brief description of the image",
  "objects": ["list", "of", "objects"],
  "emotions": ["list", "of", "emotions"],
  "context": "What's happening in the image",
  "memePotential": 8
}
"""

IMAGE_SUGGESTION_PROMPT = """Based on this image analysis, create a funny meme text for the {template_name} template.

Image Analysis:
- Description: {description}
- Objects: {objects}
- Emotions: {emotions}
- Context: {context}
- Meme Potential: {meme_potential:g}/10

Template: {template_prompt}

Generate ONE funny, relatable meme text that connects the image content with this template.
Return ONLY the top and bottom text, separated by "|". Make it short, punchy, and meme-worthy.
Format: "Top text" | "Bottom text"
"""


class Suggestion(BaseModel):
    top_text: str
    bottom_text: str
    confidence: float
    reasoning: str


class ImageAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str
    objects: list[str] = []
    emotions: list[str] = []
    context: str = ""
    meme_potential: float = Field(5, ge=0, le=10, alias="memePotential")


def _clean(part: str) -> str:
    return part.strip().replace('"', "").strip()[:_MAX_CAPTION_CHARS]


def parse_suggestion(text: str) -> tuple[str, str] | None:
    """'Top' | 'Bottom' 형식 응답 파싱 (코드펜스/앞뒤 잡담 허용)"""
    if not text:
        return None
    text = re.sub(r"```[a-z]*", "", text)
    for line in text.splitlines():
        if "|" not in line:
            continue
        top, bottom = line.split("|", 1)
        top, bottom = _clean(top), _clean(bottom.split("|", 1)[0])
        if top and bottom:
            return top, bottom
    return None


def build_prompt(template_id: str, template_name: str, current_top: str | None = None,
                 current_bottom: str | None = None) -> str:
    return SUGGESTION_PROMPT.format(
        template_prompt=TEMPLATE_PROMPTS.get(template_id, DEFAULT_PROMPT),
        current=current_top or current_bottom or "None",
        template_name=template_name,
    )


def fallback_suggestion(template_id: str, rng: random.Random | None = None) -> Suggestion:
    top, bottom = (rng or random).choice(FALLBACK_CAPTIONS.get(template_id, GENERIC_FALLBACK))
    return Suggestion(
        top_text=top,
        bottom_text=bottom,
        confidence=0.6,
        reasoning="Curated suggestion based on popular internet memes",
    )


def parse_image_analysis(text: str) -> ImageAnalysis | None:
    """응답 안의 첫 '{' ~ 마지막 '}' 구간을 JSON으로 읽음"""
    match = re.search(r"\{[\s\S]*\}", text or "")
    if not match:
        return None
    try:
        return ImageAnalysis.model_validate(json.loads(match.group(0)))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("image analysis reply unreadable: %s", e)
        return None


def analyze_image(image: bytes, media_type: str = "image/png") -> ImageAnalysis | None:
    try:
        reply = call_claude(IMAGE_ANALYSIS_PROMPT, max_tokens=512, image=image, media_type=media_type)
    except SuggestionError:
        return None
    return parse_image_analysis(reply)


def image_based_suggestion(template_id: str, template_name: str, analysis: ImageAnalysis) -> Suggestion | None:
    """
    이미지 분석 결과 → 캡션
    - confidence: min(0.9, 0.6 + memePotential / 20)
    """
    prompt = IMAGE_SUGGESTION_PROMPT.format(
        template_name=template_name,
        description=analysis.description,
        objects=", ".join(analysis.objects),
        emotions=", ".join(analysis.emotions),
        context=analysis.context,
        meme_potential=analysis.meme_potential,
        template_prompt=TEMPLATE_PROMPTS.get(template_id, DEFAULT_PROMPT),
    )
    try:
        parsed = parse_suggestion(call_claude(prompt))
    except SuggestionError:
        return None
    if not parsed:
        return None
    return Suggestion(
        top_text=parsed[0],
        bottom_text=parsed[1],
        confidence=min(0.9, 0.6 + analysis.meme_potential / 20),
        reasoning=f"Based on image analysis: {analysis.description}",
    )


def get_suggestion(
    template_id: str,
    template_name: str,
    current_top: str | None = None,
    current_bottom: str | None = None,
    *,
    image: bytes | None = None,
    media_type: str = "image/png",
    rng: random.Random | None = None,
) -> Suggestion:
    """
    캡션 추천
    1) 이미지가 있으면 Claude로 이미지 분석 → 분석 기반 캡션
    2) API 키 있으면 텍스트 프롬프트로 Claude 호출
    3) 실패/파싱 불가 → 템플릿별 예시 캡션 중 랜덤
    """
    if settings.anthropic_api_key:
        if image is not None:
            analysis = analyze_image(image, media_type)
            suggestion = analysis and image_based_suggestion(template_id, template_name, analysis)
            if suggestion:
                return suggestion
            logger.warning("image-based suggestion unavailable for %s, using text prompt", template_id)

        prompt = build_prompt(template_id, template_name, current_top, current_bottom)
        try:
            parsed = parse_suggestion(call_claude(prompt))
        except SuggestionError:
            parsed = None
        if parsed:
            return Suggestion(
                top_text=parsed[0],
                bottom_text=parsed[1],
                confidence=0.8,
                reasoning="Claude-generated suggestion",
            )
        logger.warning("LLM suggestion unavailable for %s, using curated fallback", template_id)

    return fallback_suggestion(template_id, rng)
