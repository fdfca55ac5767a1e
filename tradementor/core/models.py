"""Core domain models for Trade Mentor."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tradementor.core.enums import (
    Verdict,
    ConfidenceLevel,
    StrategyType,
    LegAction,
    OptionType,
    Recommendation,
    RiskLevel,
)


class ResponseModel(BaseModel):
    """Base for model-response shapes; JSON keys are camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump using the wire (camelCase) key names."""
        return self.model_dump(mode="json", by_alias=True)


# Market verdict


class KeyLevels(ResponseModel):
    """Support and resistance derived from OI concentrations."""

    support: float
    resistance: float


class MarketAnalysis(ResponseModel):
    """Trend, momentum and option-chain readings."""

    trend: str
    momentum: str
    pcr: float
    pcr_interpretation: str
    max_pain: float
    key_levels: KeyLevels


class StrategyLeg(ResponseModel):
    """A single option contract within a strategy."""

    action: LegAction
    strike: float
    type: OptionType
    premium: float


class Strategy(ResponseModel):
    """Defined-risk option strategy."""

    name: str
    type: StrategyType
    legs: list[StrategyLeg] = Field(default_factory=list)
    net_premium: float
    max_profit: float
    max_loss: float
    risk_reward: str
    breakeven: float | list[float]
    rationale: str

    @property
    def breakeven_points(self) -> list[float]:
        """Breakeven as a list, whether one or two points were given."""
        if isinstance(self.breakeven, list):
            return list(self.breakeven)
        return [self.breakeven]


class AlertLevel(ResponseModel):
    """Price level that triggers an alert."""

    level: float
    description: str


class Alerts(ResponseModel):
    """Warning, abort (stop-loss) and profit-booking zones."""

    warning: AlertLevel
    abort: AlertLevel
    profit_booking: AlertLevel


class MarketVerdict(ResponseModel):
    """Full market analysis with strategy recommendation."""

    verdict: Verdict
    confidence: ConfidenceLevel
    analysis: MarketAnalysis
    strategy: Strategy
    alerts: Alerts
    summary: str


# Routine check


class CurrentStatus(ResponseModel):
    """Where the open position stands."""

    pnl_percent: float
    distance_to_stop: float
    distance_to_target: float
    thesis_status: str


class RoutineAnalysis(ResponseModel):
    """End-of-day technical read."""

    day_close: str
    technical_view: str
    risk_assessment: str


class RoutineAction(ResponseModel):
    """What to do with the position."""

    instruction: str
    rationale: str
    new_stop_loss: float | None = None
    new_target: float | None = None


class RoutineCheck(ResponseModel):
    """3:15 PM end-of-day review of an open position."""

    recommendation: Recommendation
    confidence: ConfidenceLevel
    current_status: CurrentStatus
    analysis: RoutineAnalysis
    action: RoutineAction
    overnight_risk: RiskLevel
    summary: str


class QuickSentiment(ResponseModel):
    """One-line market bias."""

    sentiment: Verdict
    summary: str


# Market inputs


class SpotOHLC(ResponseModel):
    """Spot open/high/low/close for one session."""

    open: float
    high: float
    low: float
    close: float


class MacdReading(ResponseModel):
    """MACD(12,26,9) values."""

    value: float
    signal: float
    histogram: float


class Indicators(ResponseModel):
    """Technical indicators fed to the model."""

    dma10: float
    dma50: float
    rsi: float
    macd: MacdReading


class MarketSnapshot(ResponseModel):
    """Everything the market analysis prompt needs for one date."""

    date: date
    spot: SpotOHLC
    indicators: Indicators
    option_chain: str = ""


class PositionCheck(ResponseModel):
    """Current state of an open position for the routine check."""

    current_spot: float
    current_date: date = Field(default_factory=date.today)
    current_premium: float | None = None
    days_to_expiry: int | None = None
    today_ohlc: SpotOHLC | None = None
