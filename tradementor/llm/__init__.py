"""LLM integration for Claude API."""

from tradementor.llm.client import ClaudeClient
from tradementor.llm.prompts import PromptBuilder, PromptLoader
from tradementor.llm.schemas import (
    MARKET_VERDICT_SCHEMA,
    ROUTINE_CHECK_SCHEMA,
    QUICK_SENTIMENT_SCHEMA,
)

__all__ = [
    "ClaudeClient",
    "PromptBuilder",
    "PromptLoader",
    "MARKET_VERDICT_SCHEMA",
    "ROUTINE_CHECK_SCHEMA",
    "QUICK_SENTIMENT_SCHEMA",
]
