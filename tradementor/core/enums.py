"""Core enumerations for Trade Mentor."""

from enum import Enum


class Verdict(str, Enum):
    """Directional market verdict."""

    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"

    def __str__(self) -> str:
        return self.value


class ConfidenceLevel(str, Enum):
    """Model confidence in a recommendation."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value


class StrategyType(str, Enum):
    """Whether a strategy collects or pays premium."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    def __str__(self) -> str:
        return self.value


class LegAction(str, Enum):
    """Side of a single option leg."""

    BUY = "BUY"
    SELL = "SELL"

    def __str__(self) -> str:
        return self.value


class OptionType(str, Enum):
    """Call (CE) or put (PE)."""

    CE = "CE"
    PE = "PE"

    def __str__(self) -> str:
        return self.value


class Recommendation(str, Enum):
    """End-of-day decision for an open position."""

    HOLD = "HOLD"
    EXIT = "EXIT"
    ADJUST = "ADJUST"

    def __str__(self) -> str:
        return self.value


class RiskLevel(str, Enum):
    """Overnight gap risk."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    def __str__(self) -> str:
        return self.value


class SchemaKind(str, Enum):
    """Response shapes the recovery pipeline knows how to rebuild."""

    MARKET_VERDICT = "MARKET_VERDICT"
    ROUTINE_CHECK = "ROUTINE_CHECK"
    QUICK_SENTIMENT = "QUICK_SENTIMENT"

    def __str__(self) -> str:
        return self.value


class RecoveryStage(str, Enum):
    """Pipeline stage that produced a recovered response."""

    DIRECT = "DIRECT"
    NORMALIZED = "NORMALIZED"
    STRUCTURAL_REPAIR = "STRUCTURAL_REPAIR"
    FIELD_EXTRACTION = "FIELD_EXTRACTION"
    DEFAULT = "DEFAULT"

    def __str__(self) -> str:
        return self.value


class RecoveryConfidence(str, Enum):
    """How faithfully a recovered value reflects the model output."""

    EXACT = "EXACT"
    DEGRADED = "DEGRADED"

    def __str__(self) -> str:
        return self.value


class TradeStatus(str, Enum):
    """Position lifecycle status."""

    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"

    def __str__(self) -> str:
        return self.value


class TradeResult(str, Enum):
    """Outcome of a closed position."""

    PROFIT = "PROFIT"
    LOSS = "LOSS"

    def __str__(self) -> str:
        return self.value
