"""Tests for the staged recovery pipeline."""

import json

import pytest

from tradementor.core.enums import RecoveryConfidence, RecoveryStage, SchemaKind
from tradementor.core.models import MarketVerdict, QuickSentiment, RoutineCheck
from tradementor.recovery import RecoveryPipeline, recover, recover_strict


@pytest.fixture
def pipeline() -> RecoveryPipeline:
    """A fresh recovery pipeline."""
    return RecoveryPipeline()


class TestRecover:
    """Test suite for the full cascade."""

    def test_stage_order(self, pipeline):
        """Test parse stages run in a fixed order."""
        assert pipeline.stages == [
            RecoveryStage.DIRECT,
            RecoveryStage.NORMALIZED,
            RecoveryStage.STRUCTURAL_REPAIR,
        ]

    def test_well_formed(self, pipeline, verdict_json, verdict_data):
        """Test valid JSON recovers exactly, field for field."""
        result = pipeline.recover(verdict_json, SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.DIRECT
        assert result.confidence == RecoveryConfidence.EXACT
        assert result.is_exact
        assert result.defaulted == ()
        assert isinstance(result.value, MarketVerdict)
        assert result.value == MarketVerdict.model_validate(verdict_data)
        assert result.value.strategy.legs[1].strike == 24550

    @pytest.mark.parametrize(
        "wrap",
        [
            "```json\n{}\n```",
            "```\n{}\n```",
            "{}\n```",
            "Here is my analysis:\n{}\nLet me know if you need more.",
        ],
    )
    def test_wrapped_matches_unwrapped(self, pipeline, verdict_json, wrap):
        """Test fences and prose around the object do not change the result."""
        plain = pipeline.recover(verdict_json, SchemaKind.MARKET_VERDICT)
        wrapped = pipeline.recover(wrap.format(verdict_json), SchemaKind.MARKET_VERDICT)

        assert wrapped.stage == RecoveryStage.DIRECT
        assert wrapped.is_exact
        assert wrapped.value == plain.value

    def test_trailing_comma(self, pipeline, verdict_data):
        """Test a single trailing comma is fixed by normalization."""
        text = json.dumps(verdict_data)[:-1] + ",}"
        result = pipeline.recover(text, SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.NORMALIZED
        assert result.is_exact
        assert result.value.summary == verdict_data["summary"]

    def test_raw_newline_in_string(self, pipeline):
        """Test an unescaped newline inside a value is fixed by normalization."""
        text = '{"sentiment": "BEARISH", "summary": "Gap down\nlikely"}'
        result = pipeline.recover(text, SchemaKind.QUICK_SENTIMENT)

        assert result.stage == RecoveryStage.NORMALIZED
        assert result.value.summary == "Gap down likely"

    def test_truncated_mid_string(self, pipeline):
        """Test a completion cut off inside a leaf string."""
        text = (
            '{"verdict": "BULLISH", "confidence": "HIGH", "analysis": '
            '{"trend": "Strong uptrend", "momentum": "Market is showi'
        )
        result = pipeline.recover(text, SchemaKind.MARKET_VERDICT)

        assert result.stage in (
            RecoveryStage.STRUCTURAL_REPAIR,
            RecoveryStage.FIELD_EXTRACTION,
        )
        assert result.is_degraded
        assert result.value.verdict.value == "BULLISH"
        assert result.value.confidence.value == "HIGH"
        assert result.value.analysis.trend == "Strong uptrend"
        assert result.value.analysis.momentum.startswith("Market is showi")
        assert result.value.analysis.pcr == 1.0
        assert "analysis.momentum" not in result.defaulted
        assert "summary" in result.defaulted

    def test_extraction_when_nothing_parses(self, pipeline):
        """Test a broken object falls through to field extraction."""
        text = '{"sentiment": bearish, "summary": "Weak breadth" "extra"}'
        result = pipeline.recover(text, SchemaKind.QUICK_SENTIMENT)

        assert result.stage == RecoveryStage.FIELD_EXTRACTION
        assert result.is_degraded
        assert result.value.sentiment.value == "BEARISH"
        assert result.value.summary == "Weak breadth"

    @pytest.mark.parametrize("text", ["", "   ", "I cannot help with that.", "[1, 2]"])
    def test_gibberish(self, pipeline, text):
        """Test unusable text yields all defaults without raising."""
        result = pipeline.recover(text, SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.FIELD_EXTRACTION
        assert result.confidence == RecoveryConfidence.DEGRADED
        assert result.value.verdict.value == "NEUTRAL"
        assert result.value.analysis.pcr == 1.0
        assert result.value.strategy.legs == []
        assert result.value.summary.startswith("Analysis completed but response format was invalid")

    def test_none_input(self, pipeline):
        """Test a missing completion is treated as empty text."""
        result = pipeline.recover(None, SchemaKind.QUICK_SENTIMENT)
        assert result.stage == RecoveryStage.FIELD_EXTRACTION
        assert result.value.sentiment.value == "NEUTRAL"

    def test_parsed_with_missing_fields_is_degraded(self, pipeline):
        """Test a parse that needed defaults is not reported as exact."""
        result = pipeline.recover('{"verdict": "bearish"}', SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.DIRECT
        assert result.is_degraded
        assert result.value.verdict.value == "BEARISH"
        assert "analysis.trend" in result.defaulted

    def test_idempotent(self, pipeline):
        """Test identical input gives identical results."""
        text = '```json\n{"recommendation": "EXIT", "currentStatus": {"pnlPercent": -4.2,'
        first = pipeline.recover(text, SchemaKind.ROUTINE_CHECK)
        second = pipeline.recover(text, SchemaKind.ROUTINE_CHECK)
        assert first == second

    def test_oversized_integer_defaults(self, pipeline):
        """Test an integer too large for a float falls back to the default."""
        text = '{"verdict": "BULLISH", "analysis": {"maxPain": ' + "9" * 400 + "}}"
        result = pipeline.recover(text, SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.DIRECT
        assert result.is_degraded
        assert result.value.verdict.value == "BULLISH"
        assert result.value.analysis.max_pain == 0.0
        assert "analysis.maxPain" in result.defaulted

    def test_integer_over_parser_digit_limit(self, pipeline):
        """Test an integer literal json refuses to parse drops to extraction."""
        text = '{"verdict": "BULLISH", "analysis": {"maxPain": ' + "9" * 5000 + "}}"
        result = pipeline.recover(text, SchemaKind.MARKET_VERDICT)

        assert result.stage == RecoveryStage.FIELD_EXTRACTION
        assert result.value.verdict.value == "BULLISH"
        assert result.value.analysis.max_pain == 0.0

    def test_strict_oversized_integer(self, pipeline):
        """Test strict mode defaults the field rather than raising."""
        text = '{"sentiment": "BEARISH", "summary": "Heavy", "x": ' + "9" * 5000 + "}"
        result = pipeline.recover_strict(text, SchemaKind.QUICK_SENTIMENT)

        assert result.stage == RecoveryStage.DEFAULT
        assert result.value.sentiment.value == "NEUTRAL"

    def test_routine_check(self, pipeline, routine_data):
        """Test the routine check schema end to end."""
        result = pipeline.recover(json.dumps(routine_data), SchemaKind.ROUTINE_CHECK)

        assert result.is_exact
        assert isinstance(result.value, RoutineCheck)
        assert result.value.recommendation.value == "EXIT"
        assert result.value.current_status.thesis_status == "WEAKENING"
        assert result.value.action.new_stop_loss is None

    def test_module_level_recover(self, verdict_json):
        """Test the shared default pipeline."""
        assert recover(verdict_json, SchemaKind.MARKET_VERDICT).is_exact


class TestRecoverStrict:
    """Test suite for single-parse strict mode."""

    def test_success(self, pipeline):
        """Test a parseable response."""
        result = pipeline.recover_strict(
            '```json\n{"sentiment": "BULLISH", "summary": "Breakout above 24500",}\n```',
            SchemaKind.QUICK_SENTIMENT,
        )

        assert result.stage == RecoveryStage.NORMALIZED
        assert result.is_exact
        assert isinstance(result.value, QuickSentiment)
        assert result.value.summary == "Breakout above 24500"

    def test_failure_gives_defaults(self, pipeline):
        """Test strict mode never repairs or extracts."""
        result = pipeline.recover_strict(
            '{"sentiment": "BULLISH", "summary": "Breakout',
            SchemaKind.QUICK_SENTIMENT,
        )

        assert result.stage == RecoveryStage.DEFAULT
        assert result.is_degraded
        assert result.value.sentiment.value == "NEUTRAL"
        assert result.value.summary == "Unable to determine sentiment"
        assert result.defaulted == ("sentiment", "summary")

    def test_module_level_recover_strict(self):
        """Test the shared default pipeline in strict mode."""
        result = recover_strict("nope", SchemaKind.QUICK_SENTIMENT)
        assert result.stage == RecoveryStage.DEFAULT
