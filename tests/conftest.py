"""Pytest fixtures for Trade Mentor tests."""

import json
from datetime import date
from pathlib import Path
from typing import Any

import pytest

import tradementor
from tradementor.core.models import (
    Indicators,
    MacdReading,
    MarketSnapshot,
    MarketVerdict,
    SpotOHLC,
)
from tradementor.journal import JournalStore, TradeJournal
from tradementor.llm.prompts import PromptBuilder, PromptLoader

PROMPTS_DIR = Path(tradementor.__file__).parent / "prompts"


@pytest.fixture
def verdict_data() -> dict[str, Any]:
    """A complete, well-formed market verdict in wire format."""
    return {
        "verdict": "BULLISH",
        "confidence": "HIGH",
        "analysis": {
            "trend": "Price above 10 and 50 DMA, higher highs",
            "momentum": "RSI 62 and rising, MACD above signal",
            "pcr": 1.18,
            "pcrInterpretation": "Put writers active, supportive",
            "maxPain": 24300,
            "keyLevels": {"support": 24200, "resistance": 24600},
        },
        "strategy": {
            "name": "Bull Call Spread",
            "type": "DEBIT",
            "legs": [
                {"action": "BUY", "strike": 24350, "type": "CE", "premium": 120.5},
                {"action": "SELL", "strike": 24550, "type": "CE", "premium": 45.0},
            ],
            "netPremium": 75.5,
            "maxProfit": 124.5,
            "maxLoss": 75.5,
            "riskReward": "1:1.65",
            "breakeven": 24425.5,
            "rationale": "Defined-risk bullish exposure into resistance",
        },
        "alerts": {
            "warning": {"level": 24250, "description": "Close below support zone"},
            "abort": {"level": 24180, "description": "Thesis invalid below support"},
            "profitBooking": {"level": 24550, "description": "Short strike reached"},
        },
        "summary": "Trend and momentum aligned; bull call spread into 24550.",
    }


@pytest.fixture
def verdict_json(verdict_data: dict[str, Any]) -> str:
    """The well-formed market verdict serialized with indentation."""
    return json.dumps(verdict_data, indent=2)


@pytest.fixture
def routine_data() -> dict[str, Any]:
    """A complete routine check in wire format."""
    return {
        "recommendation": "EXIT",
        "confidence": "MEDIUM",
        "currentStatus": {
            "pnlPercent": -12.5,
            "distanceToStop": 35,
            "distanceToTarget": 310,
            "thesisStatus": "WEAKENING",
        },
        "analysis": {
            "dayClose": "Closed near the low of the day",
            "technicalView": "Lost 10 DMA on rising volume",
            "riskAssessment": "Gap-down risk with global cues weak",
        },
        "action": {
            "instruction": "Exit both legs before close",
            "rationale": "Stop is within one ATR",
            "newStopLoss": None,
            "newTarget": None,
        },
        "overnightRisk": "HIGH",
        "summary": "Thesis weakening close to stop; exit today.",
    }


@pytest.fixture
def market_verdict(verdict_data: dict[str, Any]) -> MarketVerdict:
    """The well-formed market verdict as a model."""
    return MarketVerdict.model_validate(verdict_data)


@pytest.fixture
def snapshot() -> MarketSnapshot:
    """Market snapshot for one session."""
    return MarketSnapshot(
        date=date(2025, 1, 15),
        spot=SpotOHLC(open=24310, high=24420, low=24280, close=24395),
        indicators=Indicators(
            dma10=24250,
            dma50=24010,
            rsi=62.4,
            macd=MacdReading(value=42.1, signal=35.7, histogram=6.4),
        ),
        option_chain='Strike,CE OI,PE OI\n24300,"1,20,000","2,40,000"\n24400,150000,90000',
    )


@pytest.fixture
def prompt_builder() -> PromptBuilder:
    """Prompt builder over the packaged YAML prompts."""
    return PromptBuilder(PromptLoader(PROMPTS_DIR))


@pytest.fixture
def store(tmp_path: Path) -> JournalStore:
    """Journal store rooted in a temporary directory."""
    return JournalStore(data_dir=tmp_path, user="tester", instrument="nifty")


@pytest.fixture
def journal(store: JournalStore) -> TradeJournal:
    """Empty trade journal."""
    return TradeJournal(store)
