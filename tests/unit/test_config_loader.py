#!/usr/bin/env python3
"""
Unit tests for configuration loading and settings accessors
"""

from unittest.mock import patch

import pytest

from plainverse import settings
from plainverse.config import ConfigLoader
from plainverse.core.error_handler import RetryConfig


class TestConfigLoader:

    def test_defaults(self, tmp_path):
        loader = ConfigLoader(user_config_path=str(tmp_path / "missing.yaml"), environ={})

        assert loader.get('transform', 'mode') == 'ai'
        assert loader.get('retry.max_attempts') == 3
        assert loader.get('hybrid', 'trigger_characters') == [';']
        assert loader.get('missing', 'key', default='fallback') == 'fallback'

    def test_user_config_overrides_defaults(self, tmp_path):
        user_config = tmp_path / "config.yaml"
        user_config.write_text("hybrid:\n  max_length: 80\n", encoding="utf-8")

        loader = ConfigLoader(user_config_path=str(user_config), environ={})

        assert loader.get('hybrid', 'max_length') == 80
        assert loader.get('hybrid', 'trigger_characters') == [';']

    def test_env_overrides(self, tmp_path):
        loader = ConfigLoader(
            user_config_path=str(tmp_path / "missing.yaml"),
            environ={
                'PLAINVERSE_RETRY_MAX_ATTEMPTS': '5',
                'PLAINVERSE_RETRY_JITTER': 'false',
                'PLAINVERSE_LLM_TEMPERATURE': '0.5',
                'PLAINVERSE_TRANSFORM_MODE': 'rules',
                'UNRELATED': 'ignored',
            },
        )

        assert loader.get('retry', 'max_attempts') == 5
        assert loader.get('retry', 'jitter') is False
        assert loader.get('llm', 'temperature') == 0.5
        assert loader.get('transform', 'mode') == 'rules'

    def test_invalid_yaml_is_ignored(self, tmp_path):
        user_config = tmp_path / "config.yaml"
        user_config.write_text("hybrid: [unclosed\n", encoding="utf-8")

        loader = ConfigLoader(user_config_path=str(user_config), environ={})

        assert loader.get('hybrid', 'max_length') == 100

    def test_get_section(self, tmp_path):
        loader = ConfigLoader(user_config_path=str(tmp_path / "missing.yaml"), environ={})
        assert loader.get_section('storage') == {'backend': 'local'}
        assert loader.get_section('nothing') == {}


class TestSettings:

    def test_retry_config(self):
        config = settings.get_retry_config()
        assert isinstance(config, RetryConfig)
        assert config.max_attempts >= 1

    def test_generation_config_keys(self):
        assert set(settings.get_generation_config()) == {
            'temperature', 'top_p', 'top_k', 'max_output_tokens'
        }

    def test_model_name_from_environment(self):
        with patch.dict('os.environ', {'GEMINI_MODEL': 'gemini-test'}):
            assert settings.get_llm_model_name() == 'gemini-test'

    def test_paths(self):
        assert settings.get_source_path().endswith('parsed.json')
        assert settings.get_checkpoint_path().endswith('parsed.json')

    def test_reload_picks_up_env_overrides(self):
        try:
            with patch.dict('os.environ', {'PLAINVERSE_HYBRID_MAX_LENGTH': '42'}):
                settings.reload_settings()
                assert settings.get_hybrid_max_length() == 42
        finally:
            settings.reload_settings()
