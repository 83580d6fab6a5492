"""
Settings management for plainverse.

This module provides simple accessor functions for configuration values.
All configuration is stored in YAML files (default.yaml, config.yaml).
"""

import os
import logging
from typing import Dict, Any, List

from .config import ConfigLoader

logger = logging.getLogger(__name__)

# Single source of configuration
_config_loader = ConfigLoader()


def reload_settings() -> None:
    """Re-read configuration files and environment overrides"""
    _config_loader.reload()


# ============================================================================
# Section Accessors
# ============================================================================

def get_paths_config() -> Dict[str, Any]:
    """Get input/output path configuration"""
    return _config_loader.get_section('paths') or {}


def get_transform_config() -> Dict[str, Any]:
    """Get transform configuration"""
    return _config_loader.get_section('transform') or {}


def get_llm_config() -> Dict[str, Any]:
    """Get LLM configuration"""
    return _config_loader.get_section('llm') or {}


def get_retry_settings() -> Dict[str, Any]:
    """Get retry configuration section"""
    return _config_loader.get_section('retry') or {}


def get_hybrid_config() -> Dict[str, Any]:
    """Get hybrid escalation configuration"""
    return _config_loader.get_section('hybrid') or {}


# ============================================================================
# Paths
# ============================================================================

def get_source_path() -> str:
    """Get path of the authoritative source corpus"""
    return get_paths_config().get('source', 'data/original/parsed.json')


def get_checkpoint_path() -> str:
    """Get path of the checkpoint (output) corpus"""
    return get_paths_config().get('checkpoint', 'data/transformed/parsed.json')


def get_log_file() -> str:
    """Get log file path"""
    return _config_loader.get('logging.file', default='plainverse.log')


# ============================================================================
# Transform
# ============================================================================

def get_transform_mode() -> str:
    """
    Get the default transform mode.

    Returns:
        str: 'rules', 'ai' or 'hybrid' (default: 'ai')
    """
    return str(get_transform_config().get('mode', 'ai')).lower()


def get_hybrid_max_length() -> int:
    """Rule output longer than this is escalated to the language model"""
    return int(get_hybrid_config().get('max_length', 100))


def get_hybrid_trigger_characters() -> List[str]:
    """Characters whose presence in rule output triggers escalation"""
    return list(get_hybrid_config().get('trigger_characters', [';']))


# ============================================================================
# LLM
# ============================================================================

def get_generation_config() -> Dict[str, Any]:
    """Get generation configuration for LLM API calls"""
    llm_cfg = get_llm_config()
    return {
        "temperature": llm_cfg.get('temperature', 0.2),
        "top_p": llm_cfg.get('top_p', 0.8),
        "top_k": llm_cfg.get('top_k', 40),
        "max_output_tokens": llm_cfg.get('max_output_tokens', 1024),
    }


def get_llm_model_name() -> str:
    """Get the Gemini model name for LLM operations"""
    env_model = os.getenv("GEMINI_MODEL")
    if env_model:
        return env_model
    return get_llm_config().get('model_name', 'gemini-2.5-flash')


def get_retry_config():
    """Build a RetryConfig from the retry section"""
    from plainverse.core.error_handler import RetryConfig

    retry_cfg = get_retry_settings()
    return RetryConfig(
        max_attempts=int(retry_cfg.get('max_attempts', 3)),
        base_delay=float(retry_cfg.get('base_delay', 2.0)),
        max_delay=float(retry_cfg.get('max_delay', 60.0)),
        exponential_backoff=bool(retry_cfg.get('exponential_backoff', True)),
        jitter=bool(retry_cfg.get('jitter', True)),
    )


# ============================================================================
# Storage
# ============================================================================

def get_storage_backend() -> str:
    """Get checkpoint storage backend type."""
    return _config_loader.get('storage.backend', default='local')
