#!/usr/bin/env python3
"""
Unit tests for transform strategies
"""

import pytest
from unittest.mock import Mock, patch

from plainverse.core.error_handler import RetryConfig
from plainverse.core.exceptions import (
    RetryExhaustedError,
    ServiceError,
    TransformError,
    TransientServiceError,
)
from plainverse.core.transformer import (
    EscalationPolicy,
    HybridTransformStrategy,
    RuleTransformStrategy,
    ServiceTransformStrategy,
    TransformMode,
    VerseContext,
    create_transform_strategy,
    strip_enclosing_quotes,
)

CONTEXT = VerseContext(book="1 Nephi", chapter=3, verse=7)


def make_service(client, max_attempts=3):
    return ServiceTransformStrategy(
        client,
        RetryConfig(max_attempts=max_attempts, base_delay=0.0, jitter=False),
        sleep=Mock(),
    )


class TestTransformMode:

    @pytest.mark.parametrize("value,expected", [
        ("rules", TransformMode.RULES),
        ("AI", TransformMode.AI),
        ("hybrid", TransformMode.HYBRID),
        ("combined", TransformMode.HYBRID),
    ])
    def test_parse(self, value, expected):
        assert TransformMode.parse(value) == expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown transform mode"):
            TransformMode.parse("magic")


class TestVerseContext:

    def test_str(self):
        assert str(CONTEXT) == "1 Nephi 3:7"


class TestStripEnclosingQuotes:

    def test_strips_one_pair(self):
        assert strip_enclosing_quotes('"I will go and do."') == "I will go and do."

    def test_curly_quotes(self):
        assert strip_enclosing_quotes("“Go.”") == "Go."

    def test_plain_text_untouched(self):
        assert strip_enclosing_quotes("Go.") == "Go."


class TestRuleTransformStrategy:

    def test_delegates_to_rules(self):
        strategy = RuleTransformStrategy()
        assert strategy.transform("thou hast done", CONTEXT) == "you have done"
        assert strategy.uses_service is False


class TestServiceTransformStrategy:

    def test_single_call_and_normalization(self):
        client = Mock()
        client.modernize.return_value = '  "I will go and do what the Lord commands ."  '
        strategy = make_service(client)

        result = strategy.transform("I will go and do the things which the Lord hath commanded", CONTEXT)

        assert result == "I will go and do what the Lord commands."
        client.modernize.assert_called_once_with(
            "I will go and do the things which the Lord hath commanded", CONTEXT
        )

    def test_transient_errors_are_retried(self):
        client = Mock()
        client.modernize.side_effect = [TransientServiceError("429"), "Go."]
        strategy = make_service(client)

        assert strategy.transform("Go thou.", CONTEXT) == "Go."
        assert client.modernize.call_count == 2

    def test_exhaustion_raises_transform_error(self):
        client = Mock()
        client.modernize.side_effect = TransientServiceError("503")
        strategy = make_service(client, max_attempts=2)

        with pytest.raises(RetryExhaustedError):
            strategy.transform("Go thou.", CONTEXT)
        assert client.modernize.call_count == 2

    def test_empty_response(self):
        client = Mock()
        client.modernize.return_value = '""'
        strategy = make_service(client)

        with pytest.raises(ServiceError, match="Empty response"):
            strategy.transform("Go thou.", CONTEXT)

    def test_unexpected_exception_becomes_service_error(self):
        client = Mock()
        client.modernize.side_effect = KeyError("candidates")
        strategy = make_service(client)

        with pytest.raises(ServiceError) as exc_info:
            strategy.transform("Go thou.", CONTEXT)
        assert isinstance(exc_info.value, TransformError)
        assert client.modernize.call_count == 1


class TestEscalationPolicy:

    def test_short_simple_text_stays(self):
        assert EscalationPolicy().should_escalate("And the Lord spoke to my father") is False

    def test_long_text_escalates(self):
        assert EscalationPolicy(max_length=10).should_escalate("x" * 11) is True

    def test_trigger_character_escalates(self):
        assert EscalationPolicy().should_escalate("he went; she stayed") is True


class TestHybridTransformStrategy:

    def setup_method(self):
        self.client = Mock()
        self.client.modernize.return_value = "He went, but she stayed."
        self.strategy = HybridTransformStrategy(
            RuleTransformStrategy(),
            make_service(self.client),
            EscalationPolicy(max_length=100, trigger_characters=[";"]),
        )

    def test_simple_verse_uses_rules_only(self):
        assert self.strategy.transform("thou hast done", CONTEXT) == "you have done"
        self.client.modernize.assert_not_called()

    def test_complex_verse_escalates_rule_output(self):
        result = self.strategy.transform("and he went; and she abode", CONTEXT)

        assert result == "He went, but she stayed."
        self.client.modernize.assert_called_once_with("and he went; and she stayed", CONTEXT)

    def test_service_failure_propagates(self):
        self.client.modernize.side_effect = ServiceError("blocked")
        with pytest.raises(ServiceError):
            self.strategy.transform("a; b", CONTEXT)


class TestCreateTransformStrategy:

    def test_rules(self):
        assert isinstance(create_transform_strategy("rules"), RuleTransformStrategy)

    def test_ai_with_client(self):
        strategy = create_transform_strategy("ai", client=Mock(), retry_config=RetryConfig())
        assert isinstance(strategy, ServiceTransformStrategy)

    def test_combined_alias(self):
        strategy = create_transform_strategy("combined", client=Mock())
        assert isinstance(strategy, HybridTransformStrategy)
        assert strategy.policy.max_length == 100
        assert strategy.policy.trigger_characters == [";"]

    def test_builds_gemini_client_when_missing(self):
        with patch("plainverse.core.llm_client.GeminiModernizer") as mock_client_cls:
            strategy = create_transform_strategy(TransformMode.AI)
        mock_client_cls.assert_called_once_with()
        assert strategy.client is mock_client_cls.return_value
