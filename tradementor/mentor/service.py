"""Trading mentor: prompts the model and recovers typed recommendations."""

from typing import Protocol

from loguru import logger

from tradementor.core.enums import SchemaKind
from tradementor.core.models import (
    MarketSnapshot,
    PositionCheck,
    QuickSentiment,
)
from tradementor.journal.models import Trade
from tradementor.llm.prompts import PromptBuilder
from tradementor.recovery.pipeline import RecoveryPipeline, RecoveryResult

SENTIMENT_MAX_TOKENS = 256


class CompletionClient(Protocol):
    """What the mentor needs from an LLM client."""

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str: ...


class TradingMentor:
    """
    Runs the three model-backed checks.

    The model call is the only thing that can fail here: upstream errors
    propagate as LLMError, while malformed responses are always absorbed by
    the recovery pipeline and come back tagged with how they were recovered.
    """

    def __init__(
        self,
        llm_client: CompletionClient,
        prompt_builder: PromptBuilder | None = None,
        pipeline: RecoveryPipeline | None = None,
    ) -> None:
        self.llm_client = llm_client
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.pipeline = pipeline or RecoveryPipeline()

    async def analyze_market(self, snapshot: MarketSnapshot) -> RecoveryResult:
        """
        Ask for a verdict and a defined-risk strategy for a market snapshot.

        Args:
            snapshot: Spot OHLC, indicators and option chain for one date

        Returns:
            RecoveryResult whose value is a MarketVerdict
        """
        system_prompt, user_prompt = self.prompt_builder.build_market_analysis(snapshot)
        raw = await self.llm_client.complete_text(system_prompt, user_prompt)

        result = self.pipeline.recover(raw, SchemaKind.MARKET_VERDICT)
        logger.info(
            "Market analysis for {}: {} ({} via {})",
            snapshot.date,
            result.value.verdict,
            result.confidence,
            result.stage,
        )
        return result

    async def run_routine_check(
        self,
        trade: Trade,
        check: PositionCheck,
    ) -> RecoveryResult:
        """
        End-of-day review of an open trade.

        Args:
            trade: The active position
            check: Current spot, premium, days to expiry and today's OHLC

        Returns:
            RecoveryResult whose value is a RoutineCheck
        """
        system_prompt, user_prompt = self.prompt_builder.build_routine_check(trade, check)
        raw = await self.llm_client.complete_text(system_prompt, user_prompt)

        result = self.pipeline.recover(raw, SchemaKind.ROUTINE_CHECK)
        logger.info(
            "Routine check for trade {}: {} ({} via {})",
            trade.id,
            result.value.recommendation,
            result.confidence,
            result.stage,
        )
        return result

    async def quick_sentiment(self, spot: float, pcr: float, rsi: float) -> QuickSentiment:
        """One-line bias; an unparseable answer gives the neutral default."""
        system_prompt, user_prompt = self.prompt_builder.build_quick_sentiment(spot, pcr, rsi)
        raw = await self.llm_client.complete_text(
            system_prompt,
            user_prompt,
            max_tokens=SENTIMENT_MAX_TOKENS,
        )
        result = self.pipeline.recover_strict(raw, SchemaKind.QUICK_SENTIMENT)
        return result.value  # type: ignore[return-value]
