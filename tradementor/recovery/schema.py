"""Declarative field lists for every response shape the pipeline rebuilds.

Each schema is a tree of ``FieldSpec`` entries (key, kind, default). The same
tree drives the fallback field extractor and the ``conform`` step that fits a
successfully parsed object to the target model, so defaults live in exactly
one place.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tradementor.core.enums import (
    Verdict,
    ConfidenceLevel,
    StrategyType,
    LegAction,
    OptionType,
    Recommendation,
    RiskLevel,
    SchemaKind,
)
from tradementor.core.models import (
    ResponseModel,
    MarketVerdict,
    RoutineCheck,
    QuickSentiment,
)


class FieldKind(str, Enum):
    """How a field's value is recognised and coerced."""

    STRING = "string"
    NUMBER = "number"
    ENUM = "enum"
    OPTIONAL_NUMBER = "optional_number"
    NUMBER_OR_PAIR = "number_or_pair"
    NESTED = "nested"
    ARRAY = "array"


@dataclass(frozen=True)
class FieldSpec:
    """One key of a response schema."""

    key: str
    kind: FieldKind
    default: Any = None
    choices: tuple[str, ...] = ()
    children: tuple["FieldSpec", ...] = ()

    def default_value(self) -> Any:
        """Fresh default for this field (containers are never shared)."""
        if self.kind == FieldKind.NESTED:
            return {child.key: child.default_value() for child in self.children}
        if self.kind == FieldKind.ARRAY:
            return []
        return self.default


def string(key: str, default: str) -> FieldSpec:
    return FieldSpec(key, FieldKind.STRING, default)


def number(key: str, default: float = 0.0) -> FieldSpec:
    return FieldSpec(key, FieldKind.NUMBER, default)


def enum(key: str, enum_cls: type[Enum], default: Enum) -> FieldSpec:
    return FieldSpec(
        key,
        FieldKind.ENUM,
        default.value,
        choices=tuple(member.value for member in enum_cls),
    )


def optional_number(key: str) -> FieldSpec:
    return FieldSpec(key, FieldKind.OPTIONAL_NUMBER, None)


def number_or_pair(key: str, default: float = 0.0) -> FieldSpec:
    return FieldSpec(key, FieldKind.NUMBER_OR_PAIR, default)


def nested(key: str, *children: FieldSpec) -> FieldSpec:
    return FieldSpec(key, FieldKind.NESTED, children=children)


def array(key: str, *item_fields: FieldSpec) -> FieldSpec:
    return FieldSpec(key, FieldKind.ARRAY, children=item_fields)


UNABLE_TO_PARSE = "Unable to parse"
UNABLE_TO_DETERMINE = "Unable to determine"


def _alert(key: str) -> FieldSpec:
    return nested(
        key,
        number("level"),
        string("description", UNABLE_TO_DETERMINE),
    )


MARKET_VERDICT_FIELDS: tuple[FieldSpec, ...] = (
    enum("verdict", Verdict, Verdict.NEUTRAL),
    enum("confidence", ConfidenceLevel, ConfidenceLevel.MEDIUM),
    nested(
        "analysis",
        string("trend", UNABLE_TO_PARSE),
        string("momentum", UNABLE_TO_PARSE),
        # Neutral put-call ratio, not zero
        number("pcr", 1.0),
        string("pcrInterpretation", "Unable to calculate"),
        number("maxPain"),
        nested("keyLevels", number("support"), number("resistance")),
    ),
    nested(
        "strategy",
        string("name", UNABLE_TO_DETERMINE),
        enum("type", StrategyType, StrategyType.DEBIT),
        array(
            "legs",
            enum("action", LegAction, LegAction.BUY),
            number("strike"),
            enum("type", OptionType, OptionType.CE),
            number("premium"),
        ),
        number("netPremium"),
        number("maxProfit"),
        number("maxLoss"),
        string("riskReward", "1:1"),
        number_or_pair("breakeven"),
        string("rationale", "Unable to parse strategy"),
    ),
    nested(
        "alerts",
        _alert("warning"),
        _alert("abort"),
        _alert("profitBooking"),
    ),
    string(
        "summary",
        "Analysis completed but response format was invalid. Please try again.",
    ),
)

ROUTINE_CHECK_FIELDS: tuple[FieldSpec, ...] = (
    enum("recommendation", Recommendation, Recommendation.HOLD),
    enum("confidence", ConfidenceLevel, ConfidenceLevel.MEDIUM),
    nested(
        "currentStatus",
        number("pnlPercent"),
        number("distanceToStop"),
        number("distanceToTarget"),
        string("thesisStatus", UNABLE_TO_DETERMINE),
    ),
    nested(
        "analysis",
        string("dayClose", UNABLE_TO_PARSE),
        string("technicalView", UNABLE_TO_PARSE),
        string("riskAssessment", UNABLE_TO_PARSE),
    ),
    nested(
        "action",
        string("instruction", UNABLE_TO_DETERMINE),
        string("rationale", UNABLE_TO_PARSE),
        optional_number("newStopLoss"),
        optional_number("newTarget"),
    ),
    enum("overnightRisk", RiskLevel, RiskLevel.MEDIUM),
    string(
        "summary",
        "Routine check completed but response format was invalid. "
        "Please review the position manually.",
    ),
)

QUICK_SENTIMENT_FIELDS: tuple[FieldSpec, ...] = (
    enum("sentiment", Verdict, Verdict.NEUTRAL),
    string("summary", "Unable to determine sentiment"),
)


@dataclass(frozen=True)
class ResponseSchema:
    """A target model together with the field tree that rebuilds it."""

    kind: SchemaKind
    model: type[ResponseModel]
    fields: tuple[FieldSpec, ...] = field(default_factory=tuple)

    def defaults(self) -> dict[str, Any]:
        """All-default wire dict for this schema."""
        return {spec.key: spec.default_value() for spec in self.fields}

    def default_paths(self) -> list[str]:
        """Dotted paths of every leaf, i.e. everything a full default replaces."""
        return _leaf_paths(self.fields, "")

    def build(self, data: dict[str, Any]) -> ResponseModel:
        """Validate a conformed wire dict into the target model."""
        return self.model.model_validate(data)


SCHEMAS: dict[SchemaKind, ResponseSchema] = {
    SchemaKind.MARKET_VERDICT: ResponseSchema(
        SchemaKind.MARKET_VERDICT, MarketVerdict, MARKET_VERDICT_FIELDS
    ),
    SchemaKind.ROUTINE_CHECK: ResponseSchema(
        SchemaKind.ROUTINE_CHECK, RoutineCheck, ROUTINE_CHECK_FIELDS
    ),
    SchemaKind.QUICK_SENTIMENT: ResponseSchema(
        SchemaKind.QUICK_SENTIMENT, QuickSentiment, QUICK_SENTIMENT_FIELDS
    ),
}


def get_schema(kind: SchemaKind) -> ResponseSchema:
    """Look up the schema for a response kind."""
    return SCHEMAS[SchemaKind(kind)]


def _leaf_paths(fields: tuple[FieldSpec, ...], prefix: str) -> list[str]:
    paths: list[str] = []
    for spec in fields:
        path = f"{prefix}{spec.key}"
        if spec.kind == FieldKind.NESTED:
            paths.extend(_leaf_paths(spec.children, f"{path}."))
        else:
            paths.append(path)
    return paths


# Coercion


def coerce_number(value: Any) -> float | None:
    """Finite float from a JSON number or numeric string, else ``None``."""
    if isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            number = float(value)
        elif isinstance(value, str):
            number = float(value.strip().replace(",", ""))
        else:
            return None
    except (OverflowError, ValueError):
        return None
    return number if math.isfinite(number) else None


def coerce_enum(value: Any, choices: tuple[str, ...]) -> str | None:
    """Case-insensitive match against the allowed values."""
    if not isinstance(value, str):
        return None
    candidate = value.strip().upper()
    return candidate if candidate in choices else None


def _coerce_pair(value: Any) -> float | list[float] | None:
    if isinstance(value, list):
        numbers = [coerce_number(item) for item in value]
        points = [n for n in numbers if n is not None][:2]
        if len(points) == 2:
            return points
        if len(points) == 1:
            return points[0]
        return None
    return coerce_number(value)


def conform(
    data: Any,
    fields: tuple[FieldSpec, ...],
    prefix: str = "",
) -> tuple[dict[str, Any], list[str]]:
    """Fit ``data`` to ``fields``.

    Returns the conformed wire dict and the dotted paths of every field that
    had to fall back to its default. Keys outside the schema are dropped.
    """
    source = data if isinstance(data, dict) else {}
    result: dict[str, Any] = {}
    defaulted: list[str] = []

    for spec in fields:
        path = f"{prefix}{spec.key}"
        present = spec.key in source
        raw = source.get(spec.key)

        if spec.kind == FieldKind.NESTED:
            child, child_defaults = conform(raw, spec.children, f"{path}.")
            result[spec.key] = child
            defaulted.extend(child_defaults)
            continue

        if spec.kind == FieldKind.ARRAY:
            if not isinstance(raw, list):
                result[spec.key] = []
                defaulted.append(path)
                continue
            items = []
            for index, item in enumerate(raw):
                if not isinstance(item, dict):
                    defaulted.append(f"{path}[{index}]")
                    continue
                conformed, item_defaults = conform(item, spec.children, f"{path}[{index}].")
                items.append(conformed)
                defaulted.extend(item_defaults)
            result[spec.key] = items
            continue

        if spec.kind == FieldKind.OPTIONAL_NUMBER:
            value = coerce_number(raw)
            if value is None and present and raw is not None:
                defaulted.append(path)
            result[spec.key] = value
            continue

        if spec.kind == FieldKind.STRING:
            value = raw if isinstance(raw, str) else None
            if value is None and isinstance(raw, (int, float)) and not isinstance(raw, bool):
                value = str(raw)
        elif spec.kind == FieldKind.NUMBER:
            value = coerce_number(raw)
        elif spec.kind == FieldKind.ENUM:
            value = coerce_enum(raw, spec.choices)
        else:
            value = _coerce_pair(raw)

        if value is None:
            value = spec.default_value()
            defaulted.append(path)
        result[spec.key] = value

    return result, defaulted
