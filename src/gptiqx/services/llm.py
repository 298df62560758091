"""LLM scoring service for conversation transcripts."""

import hashlib
import json
import logging
import random
import re
from textwrap import dedent
from typing import Any, Dict, Optional, Tuple

import openai
from diskcache import Cache
from tenacity import before_sleep_log, retry, retry_if_exception, stop_after_attempt, wait_exponential

from ..core.config import settings
from ..core.constants import (
    PromptConstants, ErrorConstants, MockDataConstants, FileConstants,
)
from ..core.models import ScoreSnapshot

logger = logging.getLogger(__name__)

SCORING_PROMPT_VERSION = PromptConstants.SCORING_PROMPT_VERSION

SCORING_PROMPT = dedent("""
You are an expert conversation analyst. Analyze the given conversation transcript between a user and GPT, and provide detailed scores.

Score each aspect from 0-100:

UserIQ (Overall prompt quality):
- Clarity: How clear and well-structured are the user's prompts?
- Depth: How thoughtful and detailed are the questions?
- Creativity: How original and innovative are the prompts?

GPTIQ (Overall response quality):
- Clarity: How clear and understandable are GPT's responses?
- Depth: How comprehensive and detailed are the answers?
- Flow: How well does GPT maintain context and conversation flow?

ConversationIQ (Overall interaction quality):
- Flow: How natural is the conversation progression?
- Synergy: How well do user and GPT complement each other?

Also provide a brief justification (2-3 sentences) explaining the scores.

Return ONLY a valid JSON object with this exact structure:
{
  "user_iq": number,
  "user_clarity": number,
  "user_depth": number,
  "user_creativity": number,
  "gpt_iq": number,
  "gpt_clarity": number,
  "gpt_depth": number,
  "gpt_flow": number,
  "conversation_iq": number,
  "conversation_flow": number,
  "conversation_synergy": number,
  "justification": "string"
}
""").strip()

_JSON_OBJECT = re.compile(r"\{.*\}", re.S)


class AnalysisError(Exception):
    """Scoring failure carrying the HTTP-style status of the hosted function."""

    def __init__(self, message: str, status_code: int = ErrorConstants.SERVER_ERROR_STATUS):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> Dict[str, str]:
        return {"error": self.message}


def _extract_scores(content: str) -> Dict[str, Any]:
    """Pull the score object out of free-text model output."""
    match = _JSON_OBJECT.search(content or "")
    if not match:
        raise AnalysisError(ErrorConstants.INVALID_JSON_MESSAGE)
    try:
        scores = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Could not parse JSON from AI response: {e}") from e
    if not isinstance(scores, dict):
        raise AnalysisError(ErrorConstants.INVALID_JSON_MESSAGE)
    return scores


def _is_transient(exc: BaseException) -> bool:
    """Connection problems and 5xx responses are worth retrying; 4xx are not."""
    if isinstance(exc, (openai.APIConnectionError, openai.APITimeoutError)):
        return True
    return isinstance(exc, openai.APIStatusError) and exc.status_code >= 500


def _map_gateway_error(exc: openai.OpenAIError) -> AnalysisError:
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == ErrorConstants.RATE_LIMIT_STATUS:
            return AnalysisError(ErrorConstants.RATE_LIMIT_MESSAGE, ErrorConstants.RATE_LIMIT_STATUS)
        if exc.status_code == ErrorConstants.PAYMENT_REQUIRED_STATUS:
            return AnalysisError(ErrorConstants.PAYMENT_REQUIRED_MESSAGE, ErrorConstants.PAYMENT_REQUIRED_STATUS)
        return AnalysisError(f"AI gateway error: {exc.status_code}")
    return AnalysisError(str(exc) or "Analysis failed")


class ScoringServiceFactory:
    """Factory for creating scoring services."""

    @staticmethod
    def create():
        """Create appropriate scoring service."""
        if settings.effective_gateway_key:
            return GatewayScoringService()
        else:
            return FallbackScoringService()


class GatewayScoringService:
    """Scores transcripts through an OpenAI-compatible LLM gateway."""

    def __init__(self, client: Optional[openai.OpenAI] = None, cache: Optional[Cache] = None):
        # Retries are handled here with tenacity, not by the SDK
        self.client = client or openai.OpenAI(
            api_key=settings.effective_gateway_key,
            base_url=settings.gateway_base_url,
            timeout=settings.request_timeout,
            max_retries=0,
        )
        self.model = settings.scoring_model
        self.temperature = settings.scoring_temperature
        self.cache = cache if cache is not None else Cache(settings.cache_dir)
        logger.info(f"Gateway scoring service initialized with model {self.model}")

    def _cache_key(self, transcript: str) -> str:
        raw = f"{self.model}|{self.temperature}|{SCORING_PROMPT_VERSION}|{transcript}"
        return hashlib.md5(raw.encode()).hexdigest()

    @retry(
        stop=stop_after_attempt(settings.max_retries),
        wait=wait_exponential(multiplier=settings.retry_delay, max=settings.retry_backoff * 10),
        retry=retry_if_exception(_is_transient),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    def _complete(self, transcript: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SCORING_PROMPT},
                {"role": "user", "content": transcript},
            ],
            temperature=self.temperature,
        )
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()

    def analyze(self, transcript: str) -> ScoreSnapshot:
        """Score a transcript, raising AnalysisError on any failure."""
        if not transcript or not transcript.strip():
            raise AnalysisError(ErrorConstants.EMPTY_TRANSCRIPT_MESSAGE, ErrorConstants.BAD_REQUEST_STATUS)

        cache_key = self._cache_key(transcript)
        cached = self.cache.get(cache_key)
        if cached:
            logger.debug(f"Cache hit for scoring request: {cache_key[:FileConstants.CACHE_KEY_LENGTH]}...")
            return ScoreSnapshot.from_dict(cached)

        logger.info("Calling LLM gateway for analysis...")
        try:
            content = self._complete(transcript)
        except openai.OpenAIError as e:
            logger.error(f"AI gateway error: {e}")
            raise _map_gateway_error(e) from e

        if not content:
            raise AnalysisError(ErrorConstants.NO_RESPONSE_MESSAGE)
        logger.debug(f"AI response: {content[:200]}")

        scores = _extract_scores(content)
        self.cache.set(cache_key, scores, expire=3600 * settings.cache_ttl_hours)
        return ScoreSnapshot.from_dict(scores)


class FallbackScoringService:
    """Offline scoring with deterministic mock composites."""

    def __init__(self):
        logger.info("Using fallback scoring service")

    def analyze(self, transcript: str) -> ScoreSnapshot:
        if not transcript or not transcript.strip():
            raise AnalysisError(ErrorConstants.EMPTY_TRANSCRIPT_MESSAGE, ErrorConstants.BAD_REQUEST_STATUS)
        logger.warning("Fallback scoring used - no gateway key configured")

        seed = int(hashlib.md5(transcript.encode()).hexdigest(), 16)
        rng = random.Random(seed)

        def mock():
            return MockDataConstants.MOCK_SCORE_MIN + rng.randrange(MockDataConstants.MOCK_SCORE_SPAN)

        return ScoreSnapshot(
            user_iq=mock(),
            gpt_iq=mock(),
            conversation_iq=mock(),
            justification="Offline mock scores. Configure a gateway API key for a real analysis.",
        )


def analyze_conversation(payload: Dict[str, Any], service=None) -> Tuple[Dict[str, Any], int]:
    """Request/response contract of the hosted analysis function.

    Takes `{"transcript": str}` and returns the score JSON with status 200, or
    `{"error": str}` with 400, 402, 429 or 500.
    """
    service = service or ScoringServiceFactory.create()
    try:
        transcript = (payload or {}).get("transcript") or ""
        scores = service.analyze(transcript)
    except AnalysisError as e:
        return e.to_dict(), e.status_code
    return scores.to_dict(), 200
