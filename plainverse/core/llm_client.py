"""
LLM Client: Gemini API access for verse modernization
"""
import os
import logging
from typing import Any, Dict, Optional

import google.generativeai as genai
from dotenv import load_dotenv

from plainverse import settings
from plainverse.core.exceptions import ServiceError, TransformError, TransientServiceError
from plainverse.core.prompts import SYSTEM_INSTRUCTION, build_verse_prompt

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

_TRANSIENT_KEYWORDS = (
    '429', 'quota', 'resource exhausted', 'resourceexhausted', 'rate limit',
    'too many requests', 'timeout', 'timed out', 'deadline', 'unavailable',
    'overloaded', '500', '502', '503', '504',
)
_TRANSIENT_ERROR_TYPES = {
    'ResourceExhausted', 'TooManyRequests', 'ServiceUnavailable', 'DeadlineExceeded',
    'InternalServerError', 'GatewayTimeout', 'BadGateway', 'TimeoutError', 'ConnectionError',
}


def classify_service_error(error: Exception) -> TransformError:
    """
    Map an SDK or transport error onto the transient / terminal split.

    Args:
        error: Exception raised while calling the service

    Returns:
        TransientServiceError for rate limits, quota and temporary server
        failures; ServiceError for everything else
    """
    if isinstance(error, TransformError):
        return error

    error_type = type(error).__name__
    error_str = str(error)
    lowered = error_str.lower()

    if error_type in _TRANSIENT_ERROR_TYPES or any(keyword in lowered for keyword in _TRANSIENT_KEYWORDS):
        return TransientServiceError(f"{error_type}: {error_str}")
    return ServiceError(f"{error_type}: {error_str}")


def _extract_response_text(response: Any) -> str:
    """Pull text out of a Gemini response, tolerating blocked or partial candidates"""
    try:
        if getattr(response, 'text', None):
            return response.text
    except ValueError:
        # .text raises when the candidate has no text parts
        pass

    candidates = getattr(response, 'candidates', None)
    if candidates:
        content = getattr(candidates[0], 'content', None)
        parts = getattr(content, 'parts', None) if content else None
        if parts:
            return "".join(getattr(part, 'text', '') for part in parts)
    return ""


class GeminiModernizer:
    """
    One-verse-per-call Gemini client.

    Each call sends the fixed system instruction and a single verse. Errors are
    raised as TransientServiceError or ServiceError so the retry wrapper can
    tell them apart.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Gemini API key is required. Set GEMINI_API_KEY environment variable."
            )

        self.model_name = model_name or settings.get_llm_model_name()
        self.generation_config = generation_config or settings.get_generation_config()

        genai.configure(api_key=self.api_key)
        self._model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=SYSTEM_INSTRUCTION,
            generation_config=genai.GenerationConfig(**self.generation_config)
        )
        logger.info(f"Configured Gemini model {self.model_name} with key: {self.api_key[:4]}...")

    def modernize(self, verse_text: str, context=None) -> str:
        """
        Send one verse to the model.

        Args:
            verse_text: Text to modernize
            context: Optional VerseContext used for the prompt reference and logs

        Returns:
            Raw response text

        Raises:
            TransientServiceError: Rate limit or temporary server failure
            ServiceError: Any other failure, including an empty response
        """
        book = getattr(context, 'book', None)
        chapter = getattr(context, 'chapter', None)
        verse = getattr(context, 'verse', None)
        prompt = build_verse_prompt(verse_text, book=book, chapter=chapter, verse=verse)

        logger.debug(f"Sending modernization request for {book} {chapter}:{verse}")
        try:
            response = self._model.generate_content(prompt)
        except Exception as e:
            raise classify_service_error(e) from e

        response_text = _extract_response_text(response)
        if not response_text.strip():
            finish_reason = None
            if getattr(response, 'candidates', None):
                finish_reason = getattr(response.candidates[0], 'finish_reason', None)
            raise ServiceError(f"Empty response from Gemini (finish_reason={finish_reason})")

        return response_text
