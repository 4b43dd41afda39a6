"""Message processing pipeline."""

from parley.pipeline.models import (
    ContactSummary,
    PipelineStep,
    PipelineStepTiming,
    ProcessedExchange,
    ProcessingOptions,
    ProcessingStats,
    ThreadInfo,
)
from parley.pipeline.processor import CUSTOM_CONTEXT, MessageProcessor
from parley.pipeline.prompt_builder import DEFAULT_TEMPLATE, PromptBuilder

__all__ = [
    "ContactSummary",
    "PipelineStep",
    "PipelineStepTiming",
    "ProcessedExchange",
    "ProcessingOptions",
    "ProcessingStats",
    "ThreadInfo",
    "CUSTOM_CONTEXT",
    "MessageProcessor",
    "DEFAULT_TEMPLATE",
    "PromptBuilder",
]
