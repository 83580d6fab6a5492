"""
Verse transform strategies.

Three interchangeable implementations of ``transform(text, context) -> str``:

- RuleTransformStrategy: the deterministic rule cascade; never fails
- ServiceTransformStrategy: one Gemini call per verse, with bounded retry
- HybridTransformStrategy: rules first, escalating long or complex output
  to the service

The strategy is chosen once at startup by ``create_transform_strategy``.
Every strategy returns a string or raises a TransformError subclass.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

from plainverse.core.error_handler import RetryConfig, retry_on_transient
from plainverse.core.exceptions import ServiceError, TransformError
from plainverse.core.normalizer import normalize_text
from plainverse.core.rules import apply_rules

logger = logging.getLogger(__name__)

_ENCLOSING_QUOTES = "\"'“”‘’"


class TransformMode(Enum):
    """Available transform strategies"""
    RULES = "rules"
    AI = "ai"
    HYBRID = "hybrid"

    @classmethod
    def parse(cls, value: str) -> 'TransformMode':
        normalized = value.strip().lower()
        if normalized == "combined":
            return cls.HYBRID
        try:
            return cls(normalized)
        except ValueError:
            choices = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Unknown transform mode: {value}. Choose from: {choices}, combined")


@dataclass(frozen=True)
class VerseContext:
    """
    Identity of the verse being transformed, for prompts and logs.

    Carries no neighbouring verse text.
    """
    book: Optional[str] = None
    chapter: Optional[int] = None
    verse: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.book or '?'} {self.chapter if self.chapter is not None else '?'}:{self.verse if self.verse is not None else '?'}"


class ModernizationClient(Protocol):
    """Anything that can send a single verse to a language model"""

    def modernize(self, verse_text: str, context: Optional[VerseContext] = None) -> str:
        ...


def strip_enclosing_quotes(text: str) -> str:
    """Remove one quote character from each end of a model response"""
    result = text.strip()
    if result[:1] in _ENCLOSING_QUOTES:
        result = result[1:]
    if result[-1:] in _ENCLOSING_QUOTES:
        result = result[:-1]
    return result.strip()


class TransformStrategy(ABC):
    """Base class for verse transform strategies"""

    mode: TransformMode
    uses_service: bool = False

    @abstractmethod
    def transform(self, text: str, context: Optional[VerseContext] = None) -> str:
        """
        Modernize one verse.

        Args:
            text: Verse text
            context: Verse identity (never neighbouring text)

        Returns:
            Modernized text

        Raises:
            TransformError: If the verse could not be transformed
        """
        pass


class RuleTransformStrategy(TransformStrategy):
    """Delegates to the rule engine"""

    mode = TransformMode.RULES

    def transform(self, text: str, context: Optional[VerseContext] = None) -> str:
        return apply_rules(text)


class ServiceTransformStrategy(TransformStrategy):
    """Exactly one language model call per verse, retried on transient failures"""

    mode = TransformMode.AI
    uses_service = True

    def __init__(self, client: ModernizationClient, retry_config: Optional[RetryConfig] = None, sleep=None):
        self.client = client
        self.retry_config = retry_config or RetryConfig()
        retry_kwargs = {'sleep': sleep} if sleep is not None else {}
        self._call = retry_on_transient(self.retry_config, **retry_kwargs)(self._call_once)

    def _call_once(self, text: str, context: Optional[VerseContext]) -> str:
        return self.client.modernize(text, context)

    def transform(self, text: str, context: Optional[VerseContext] = None) -> str:
        try:
            raw = self._call(text, context)
        except TransformError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error from modernization client for {context}: {e}")
            raise ServiceError(f"{type(e).__name__}: {e}") from e

        cleaned = normalize_text(strip_enclosing_quotes(raw or ""))
        if not cleaned:
            raise ServiceError("Empty response from modernization service")
        return cleaned


@dataclass
class EscalationPolicy:
    """When rule output is still complex enough to send to the service"""
    max_length: int = 100
    trigger_characters: List[str] = field(default_factory=lambda: [";"])

    def should_escalate(self, text: str) -> bool:
        return len(text) > self.max_length or any(char in text for char in self.trigger_characters)


class HybridTransformStrategy(TransformStrategy):
    """Rules first; escalate to the service only when the policy says so"""

    mode = TransformMode.HYBRID
    uses_service = True

    def __init__(
        self,
        rule_strategy: RuleTransformStrategy,
        service_strategy: ServiceTransformStrategy,
        policy: Optional[EscalationPolicy] = None
    ):
        self.rule_strategy = rule_strategy
        self.service_strategy = service_strategy
        self.policy = policy or EscalationPolicy()

    def transform(self, text: str, context: Optional[VerseContext] = None) -> str:
        rule_output = self.rule_strategy.transform(text, context)
        if not self.policy.should_escalate(rule_output):
            return rule_output
        logger.debug(f"Escalating {context} to the modernization service")
        return self.service_strategy.transform(rule_output, context)


def create_transform_strategy(
    mode,
    client: Optional[ModernizationClient] = None,
    retry_config: Optional[RetryConfig] = None,
    policy: Optional[EscalationPolicy] = None
) -> TransformStrategy:
    """
    Factory function to create the transform strategy for a run.

    Args:
        mode: TransformMode or its string value ("rules", "ai", "hybrid", "combined")
        client: Modernization client; a GeminiModernizer is built when a
            service mode is requested without one
        retry_config: Retry policy for service calls (default: from settings)
        policy: Escalation policy for hybrid mode (default: from settings)

    Returns:
        Configured strategy instance

    Raises:
        ValueError: If the mode is unknown or the service cannot be configured
    """
    if not isinstance(mode, TransformMode):
        mode = TransformMode.parse(str(mode))

    logger.info(f"Creating transform strategy: {mode.value}")

    if mode == TransformMode.RULES:
        return RuleTransformStrategy()

    from plainverse import settings

    if client is None:
        from plainverse.core.llm_client import GeminiModernizer
        client = GeminiModernizer()

    service = ServiceTransformStrategy(client, retry_config or settings.get_retry_config())
    if mode == TransformMode.AI:
        return service

    policy = policy or EscalationPolicy(
        max_length=settings.get_hybrid_max_length(),
        trigger_characters=settings.get_hybrid_trigger_characters(),
    )
    return HybridTransformStrategy(RuleTransformStrategy(), service, policy)
