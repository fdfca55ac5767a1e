"""
Trade Mentor - LLM trading journal

Structured option-strategy recommendations with resilient response recovery.
"""

__version__ = "0.1.0"

from loguru import logger

from tradementor.core.enums import SchemaKind, Verdict, ConfidenceLevel

# Library stays quiet until an application calls init_logger()
logger.disable("tradementor")

__all__ = [
    "__version__",
    "SchemaKind",
    "Verdict",
    "ConfidenceLevel",
]
