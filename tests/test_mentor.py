"""Tests for the trading mentor service."""

import asyncio
import json
from datetime import date
from typing import Any

import pytest

from tradementor.core.enums import RecoveryStage, Verdict
from tradementor.core.exceptions import LLMError
from tradementor.core.models import PositionCheck, QuickSentiment
from tradementor.mentor import TradingMentor
from tradementor.mentor.service import SENTIMENT_MAX_TOKENS


class FakeCompletionClient:
    """Returns one canned response and records every call."""

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def make_mentor(prompt_builder):
    """Factory for a mentor over a fake client."""

    def _make(response: str = "", error: Exception | None = None):
        client = FakeCompletionClient(response, error)
        return TradingMentor(client, prompt_builder=prompt_builder), client

    return _make


class TestAnalyzeMarket:
    """Test suite for market analysis."""

    def test_exact_response(self, make_mentor, snapshot, verdict_json):
        """Test a clean response is recovered exactly."""
        mentor, client = make_mentor(verdict_json)

        result = asyncio.run(mentor.analyze_market(snapshot))

        assert result.is_exact
        assert result.value.verdict == Verdict.BULLISH
        assert len(client.calls) == 1
        assert "24395" in client.calls[0]["user_prompt"]
        assert client.calls[0]["max_tokens"] is None

    def test_fenced_truncated_response(self, make_mentor, snapshot, verdict_json):
        """Test a fenced response cut off mid-generation still yields a verdict."""
        mentor, _ = make_mentor("```json\n" + verdict_json[: verdict_json.index('"strategy"')])

        result = asyncio.run(mentor.analyze_market(snapshot))

        assert result.is_degraded
        assert result.value.verdict == Verdict.BULLISH
        assert result.value.analysis.pcr == 1.18
        assert result.value.strategy.name == "Unable to determine"

    def test_llm_error_propagates(self, make_mentor, snapshot):
        """Test upstream failures are not masked by recovery."""
        mentor, _ = make_mentor(error=LLMError("Claude API error: overloaded"))

        with pytest.raises(LLMError):
            asyncio.run(mentor.analyze_market(snapshot))


class TestRoutineCheck:
    """Test suite for the end-of-day routine check."""

    def test_routine_check(self, make_mentor, journal, market_verdict, routine_data):
        """Test the trade context is sent and the response recovered."""
        trade = journal.accept_trade(market_verdict, entry_spot=24395)
        mentor, client = make_mentor(json.dumps(routine_data))
        check = PositionCheck(current_spot=24215, current_date=date(2025, 1, 16), days_to_expiry=2)

        result = asyncio.run(mentor.run_routine_check(trade, check))

        assert result.is_exact
        assert result.value.recommendation.value == "EXIT"
        prompt = client.calls[0]["user_prompt"]
        assert "Bull Call Spread" in prompt
        assert "24215" in prompt
        assert "24180" in prompt

    def test_garbage_response_holds(self, make_mentor, journal, market_verdict):
        """Test an unusable response defaults to HOLD for manual review."""
        trade = journal.accept_trade(market_verdict, entry_spot=24395)
        mentor, _ = make_mentor("Sorry, I can't do that right now.")

        result = asyncio.run(mentor.run_routine_check(trade, PositionCheck(current_spot=24300)))

        assert result.stage == RecoveryStage.FIELD_EXTRACTION
        assert result.value.recommendation.value == "HOLD"
        assert "review the position manually" in result.value.summary


class TestQuickSentiment:
    """Test suite for the quick sentiment check."""

    def test_sentiment(self, make_mentor):
        """Test a parseable sentiment and the small token budget."""
        mentor, client = make_mentor('{"sentiment": "bearish", "summary": "PCR below 0.7"}')

        sentiment = asyncio.run(mentor.quick_sentiment(24300, 0.65, 38))

        assert isinstance(sentiment, QuickSentiment)
        assert sentiment.sentiment == Verdict.BEARISH
        assert client.calls[0]["max_tokens"] == SENTIMENT_MAX_TOKENS

    def test_unparseable_sentiment_is_neutral(self, make_mentor):
        """Test a broken answer falls back to neutral."""
        mentor, _ = make_mentor('{"sentiment": "BULLISH", "summary": "cut')

        sentiment = asyncio.run(mentor.quick_sentiment(24300, 1.1, 55))

        assert sentiment.sentiment == Verdict.NEUTRAL
        assert sentiment.summary == "Unable to determine sentiment"

    def test_llm_error_propagates(self, make_mentor):
        """Test upstream failures surface to the caller."""
        mentor, _ = make_mentor(error=LLMError("Claude API error: timeout"))

        with pytest.raises(LLMError):
            asyncio.run(mentor.quick_sentiment(24300, 1.0, 50))
