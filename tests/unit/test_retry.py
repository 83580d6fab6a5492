#!/usr/bin/env python3
"""
Unit tests for the retry wrapper
"""

import pytest
from unittest.mock import Mock

from plainverse.core.error_handler import RetryConfig, calculate_retry_delay, retry_on_transient
from plainverse.core.exceptions import RetryExhaustedError, ServiceError, TransientServiceError


class TestRetryConfig:

    def test_defaults(self):
        config = RetryConfig()
        assert config.max_attempts == 3
        assert config.base_delay == 2.0
        assert config.exponential_backoff is True

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryConfig(max_attempts=0)


class TestCalculateRetryDelay:

    def test_exponential_without_jitter(self):
        config = RetryConfig(base_delay=1.0, jitter=False)
        assert [calculate_retry_delay(n, config) for n in (1, 2, 3)] == [1.0, 2.0, 4.0]

    def test_capped_at_max_delay(self):
        config = RetryConfig(base_delay=10.0, max_delay=15.0, jitter=False)
        assert calculate_retry_delay(3, config) == 15.0

    def test_fixed_delay(self):
        config = RetryConfig(base_delay=3.0, exponential_backoff=False, jitter=False)
        assert calculate_retry_delay(4, config) == 3.0

    def test_jitter_bounds(self):
        config = RetryConfig(base_delay=4.0, jitter=True)
        assert calculate_retry_delay(1, config, rng=lambda: 0.0) == 2.0
        assert calculate_retry_delay(1, config, rng=lambda: 1.0) == 4.0


class TestRetryOnTransient:

    def setup_method(self):
        self.sleep = Mock()
        self.config = RetryConfig(max_attempts=3, base_delay=1.0, jitter=False)

    def test_success_after_two_transient_failures(self):
        func = Mock(side_effect=[TransientServiceError("429"), TransientServiceError("429"), "ok"])
        wrapped = retry_on_transient(self.config, sleep=self.sleep)(func)

        assert wrapped("verse") == "ok"
        assert func.call_count == 3
        assert self.sleep.call_count == 2
        assert [c.args[0] for c in self.sleep.call_args_list] == [1.0, 2.0]

    def test_non_retryable_fails_immediately(self):
        func = Mock(side_effect=ServiceError("bad request"))
        wrapped = retry_on_transient(self.config, sleep=self.sleep)(func)

        with pytest.raises(ServiceError):
            wrapped()
        assert func.call_count == 1
        self.sleep.assert_not_called()

    def test_exhaustion_is_typed(self):
        last = TransientServiceError("quota")
        func = Mock(side_effect=[TransientServiceError("429"), TransientServiceError("503"), last])
        wrapped = retry_on_transient(self.config, sleep=self.sleep)(func)

        with pytest.raises(RetryExhaustedError) as exc_info:
            wrapped()

        assert exc_info.value.attempts == 3
        assert exc_info.value.last_error is last
        assert exc_info.value.__cause__ is last
        assert self.sleep.call_count == 2

    def test_single_attempt_never_sleeps(self):
        func = Mock(side_effect=TransientServiceError("429"))
        wrapped = retry_on_transient(RetryConfig(max_attempts=1), sleep=self.sleep)(func)

        with pytest.raises(RetryExhaustedError):
            wrapped()
        self.sleep.assert_not_called()
