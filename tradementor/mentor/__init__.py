"""Model-backed market analysis and position reviews."""

from tradementor.mentor.service import CompletionClient, TradingMentor

__all__ = ["CompletionClient", "TradingMentor"]
