"""Core domain models, enums, and exceptions."""

from tradementor.core.enums import (
    Verdict,
    ConfidenceLevel,
    StrategyType,
    LegAction,
    OptionType,
    Recommendation,
    RiskLevel,
    SchemaKind,
    RecoveryStage,
    RecoveryConfidence,
    TradeStatus,
    TradeResult,
)
from tradementor.core.exceptions import (
    TradeMentorError,
    ConfigurationError,
    LLMError,
    StorageError,
    TradeNotFoundError,
)

__all__ = [
    "Verdict",
    "ConfidenceLevel",
    "StrategyType",
    "LegAction",
    "OptionType",
    "Recommendation",
    "RiskLevel",
    "SchemaKind",
    "RecoveryStage",
    "RecoveryConfidence",
    "TradeStatus",
    "TradeResult",
    "TradeMentorError",
    "ConfigurationError",
    "LLMError",
    "StorageError",
    "TradeNotFoundError",
]
