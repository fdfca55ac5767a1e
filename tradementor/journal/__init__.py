"""Trade journal: position lifecycle and local persistence."""

from tradementor.journal.models import CloseRequest, PortfolioStats, Trade, TradeUpdate
from tradementor.journal.service import TradeJournal
from tradementor.journal.store import JournalStore

__all__ = [
    "CloseRequest",
    "PortfolioStats",
    "Trade",
    "TradeUpdate",
    "TradeJournal",
    "JournalStore",
]
