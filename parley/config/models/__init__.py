"""Configuration model exports.

This module exports all configuration models for easy access:

    from parley.config.models import PipelineConfig, SessionConfig
"""

from parley.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from parley.config.models.pipeline import PipelineConfig, ThreadConfig
from parley.config.models.providers import LLMProviderConfig, ProvidersConfig
from parley.config.models.session import SessionConfig

__all__ = [
    "LLMProviderConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "PipelineConfig",
    "ProvidersConfig",
    "SessionConfig",
    "ThreadConfig",
]
