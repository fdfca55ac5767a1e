"""Models for the trade journal."""

from datetime import date, datetime
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field

from tradementor.core.enums import (
    ConfidenceLevel,
    TradeResult,
    TradeStatus,
    Verdict,
)
from tradementor.core.models import Alerts, MarketAnalysis, Strategy


class TradeUpdate(BaseModel):
    """A dated note on an open trade."""

    date: datetime = Field(default_factory=datetime.now)
    note: str
    spot_price: Optional[float] = None


class CloseRequest(BaseModel):
    """Details supplied when a position is closed."""

    reason: str
    exit_spot: float
    exit_premium: Optional[float] = None
    realized_pnl: float


class Trade(BaseModel):
    """A position opened from an accepted market verdict."""

    id: str = Field(default_factory=lambda: uuid4().hex[:12])
    instrument: str
    entry_date: date
    entry_spot: float
    verdict: Verdict
    confidence: ConfidenceLevel
    strategy: Strategy
    alerts: Alerts
    analysis: MarketAnalysis
    status: TradeStatus = TradeStatus.ACTIVE
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None
    updates: list[TradeUpdate] = Field(default_factory=list)
    last_routine_check: Optional[datetime] = None
    last_routine_result: Optional[dict[str, Any]] = None

    # Set when closed
    closed_at: Optional[datetime] = None
    close_reason: Optional[str] = None
    exit_spot: Optional[float] = None
    exit_premium: Optional[float] = None
    realized_pnl: Optional[float] = None
    result: Optional[TradeResult] = None

    @property
    def is_active(self) -> bool:
        """Check if the position is still open."""
        return self.status == TradeStatus.ACTIVE

    @property
    def stop_loss(self) -> float:
        """Abort level, i.e. the stop-loss."""
        return self.alerts.abort.level

    @property
    def target(self) -> float:
        """Profit-booking level."""
        return self.alerts.profit_booking.level


class PortfolioStats(BaseModel):
    """Aggregate performance of closed trades."""

    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    total_pnl: float = 0.0
    active_trades: int = 0

    @computed_field
    @property
    def win_rate(self) -> float:
        """Winning trades as a percentage of closed trades, one decimal."""
        if self.total_trades == 0:
            return 0.0
        return round(self.wins / self.total_trades * 100, 1)
