"""Position lifecycle on top of the journal store."""

import json
from datetime import date, datetime
from typing import Any

from loguru import logger

from tradementor.core.enums import TradeResult, TradeStatus
from tradementor.core.exceptions import TradeNotFoundError
from tradementor.core.models import MarketVerdict, RoutineCheck
from tradementor.journal.models import (
    CloseRequest,
    PortfolioStats,
    Trade,
    TradeUpdate,
)
from tradementor.journal.store import JournalStore

ACTIVE_TRADES = "active_trades"
TRADE_HISTORY = "trade_history"
LAST_ANALYSIS = "last_analysis"


class TradeJournal:
    """
    Accept, track, re-check and close positions.

    Flow:
    1. A market verdict is accepted as a new ACTIVE trade
    2. Routine checks and manual notes are appended as updates
    3. Closing moves the trade to history (newest first) with its result
    """

    def __init__(self, store: JournalStore) -> None:
        self._store = store

    @property
    def instrument(self) -> str:
        """Instrument this journal partition tracks."""
        return self._store.instrument

    # Reads

    def active_trades(self) -> list[Trade]:
        """Open positions in entry order."""
        return [Trade.model_validate(t) for t in self._store.load(ACTIVE_TRADES, [])]

    def trade_history(self) -> list[Trade]:
        """Closed positions, most recent first."""
        return [Trade.model_validate(t) for t in self._store.load(TRADE_HISTORY, [])]

    def get_trade(self, trade_id: str) -> Trade:
        """Find an active or closed trade by id."""
        for trade in self.active_trades() + self.trade_history():
            if trade.id == trade_id:
                return trade
        raise TradeNotFoundError(trade_id)

    def _save_active(self, trades: list[Trade]) -> None:
        self._store.save(ACTIVE_TRADES, [t.model_dump(mode="json") for t in trades])

    def _save_history(self, trades: list[Trade]) -> None:
        self._store.save(TRADE_HISTORY, [t.model_dump(mode="json") for t in trades])

    # Lifecycle

    def accept_trade(
        self,
        verdict: MarketVerdict,
        entry_spot: float,
        entry_date: date | None = None,
    ) -> Trade:
        """Open a position from a market verdict."""
        trade = Trade(
            instrument=self.instrument,
            entry_date=entry_date or date.today(),
            entry_spot=entry_spot,
            verdict=verdict.verdict,
            confidence=verdict.confidence,
            strategy=verdict.strategy,
            alerts=verdict.alerts,
            analysis=verdict.analysis,
        )
        trades = self.active_trades()
        trades.append(trade)
        self._save_active(trades)
        logger.info("Accepted {} trade {} on {}", trade.strategy.name, trade.id, self.instrument)
        return trade

    def update_trade(
        self,
        trade_id: str,
        note: str | None = None,
        current_spot: float | None = None,
        **changes: Any,
    ) -> Trade:
        """
        Apply field changes to an active trade.

        Args:
            trade_id: Trade to update
            note: Optional note appended to the trade's update history
            current_spot: Spot price recorded with the note
            **changes: Trade fields to overwrite

        Returns:
            The updated trade
        """
        trades = self.active_trades()
        index = next((i for i, t in enumerate(trades) if t.id == trade_id), None)
        if index is None:
            raise TradeNotFoundError(trade_id)

        data = trades[index].model_dump()
        data.update(changes)
        data["updated_at"] = datetime.now()
        updated = Trade.model_validate(data)
        if note:
            updated.updates.append(TradeUpdate(note=note, spot_price=current_spot))

        trades[index] = updated
        self._save_active(trades)
        return updated

    def record_routine_check(
        self,
        trade_id: str,
        check: RoutineCheck,
        current_spot: float | None = None,
    ) -> Trade:
        """Store a routine-check result and note it on the trade."""
        return self.update_trade(
            trade_id,
            note=f"3:15 PM Check: {check.recommendation.value} - {check.summary}",
            current_spot=current_spot,
            last_routine_check=datetime.now(),
            last_routine_result=check.to_json_dict(),
        )

    def close_trade(self, trade_id: str, request: CloseRequest) -> Trade:
        """Close an active trade and move it to history."""
        trades = self.active_trades()
        trade = next((t for t in trades if t.id == trade_id), None)
        if trade is None:
            raise TradeNotFoundError(trade_id)

        closed = trade.model_copy(
            update={
                "status": TradeStatus.CLOSED,
                "closed_at": datetime.now(),
                "close_reason": request.reason,
                "exit_spot": request.exit_spot,
                "exit_premium": request.exit_premium,
                "realized_pnl": request.realized_pnl,
                "result": (
                    TradeResult.PROFIT if request.realized_pnl >= 0 else TradeResult.LOSS
                ),
            }
        )

        history = self.trade_history()
        history.insert(0, closed)
        self._save_history(history)
        self._save_active([t for t in trades if t.id != trade_id])
        logger.info("Closed trade {} with {} ({:.2f})", trade_id, closed.result, request.realized_pnl)
        return closed

    # Stats and snapshots

    def portfolio_stats(self) -> PortfolioStats:
        """Win/loss and P&L totals over closed trades."""
        history = self.trade_history()
        return PortfolioStats(
            total_trades=len(history),
            wins=sum(1 for t in history if t.result == TradeResult.PROFIT),
            losses=sum(1 for t in history if t.result == TradeResult.LOSS),
            total_pnl=sum(t.realized_pnl or 0.0 for t in history),
            active_trades=len(self.active_trades()),
        )

    def save_last_analysis(self, verdict: MarketVerdict) -> None:
        """Keep the most recent market verdict for later acceptance."""
        self._store.save(
            LAST_ANALYSIS,
            {**verdict.to_json_dict(), "timestamp": datetime.now().isoformat()},
        )

    def last_analysis(self) -> MarketVerdict | None:
        """Most recent saved market verdict, if any."""
        data = self._store.load(LAST_ANALYSIS)
        if data is None:
            return None
        return MarketVerdict.model_validate(data)

    def export_data(self) -> str:
        """Serialize the whole partition as a JSON document."""
        data = {
            "instrument": self.instrument,
            "activeTrades": self._store.load(ACTIVE_TRADES, []),
            "tradeHistory": self._store.load(TRADE_HISTORY, []),
            "lastAnalysis": self._store.load(LAST_ANALYSIS),
            "exportedAt": datetime.now().isoformat(),
        }
        return json.dumps(data, indent=2)

    def import_data(self, text: str) -> bool:
        """
        Restore a partition from ``export_data`` output.

        Returns False if the document is not valid JSON or its trades do not
        validate; nothing is written in that case.
        """
        try:
            data = json.loads(text)
            active = [Trade.model_validate(t) for t in data.get("activeTrades") or []]
            history = [Trade.model_validate(t) for t in data.get("tradeHistory") or []]
            last = data.get("lastAnalysis")
            verdict = MarketVerdict.model_validate(last) if last else None
        except (ValueError, AttributeError) as e:
            logger.warning("Journal import rejected: {}", e)
            return False

        self._save_active(active)
        self._save_history(history)
        if verdict is not None:
            self.save_last_analysis(verdict)
        logger.info("Imported {} active and {} closed trades", len(active), len(history))
        return True
