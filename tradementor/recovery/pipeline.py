"""Recovery pipeline: raw model text in, typed recommendation out.

Stages run in a fixed order and the first one that yields a JSON object wins:

    DIRECT -> NORMALIZED -> STRUCTURAL_REPAIR -> FIELD_EXTRACTION

Field extraction cannot fail, so ``recover`` always returns a value. The
pipeline is pure: no I/O, no clock, no shared mutable state.
"""

import json
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Callable

from loguru import logger

from tradementor.core.enums import RecoveryConfidence, RecoveryStage, SchemaKind
from tradementor.core.models import ResponseModel
from tradementor.recovery.extractor import extract_fields
from tradementor.recovery.normalizer import isolate_object, normalize
from tradementor.recovery.repairer import repair
from tradementor.recovery.schema import ResponseSchema, conform, get_schema


@dataclass(frozen=True)
class RecoveryResult:
    """A recovered response and how it was obtained."""

    value: ResponseModel
    stage: RecoveryStage
    confidence: RecoveryConfidence
    defaulted: tuple[str, ...] = ()

    @property
    def is_exact(self) -> bool:
        """Check if every field came from a successful parse."""
        return self.confidence == RecoveryConfidence.EXACT

    @property
    def is_degraded(self) -> bool:
        """Check if any field is a best-effort value or a default."""
        return self.confidence == RecoveryConfidence.DEGRADED


class _Candidate:
    """Lazily derived views of one raw response."""

    def __init__(self, raw_text: str) -> None:
        self.raw_text = raw_text

    @cached_property
    def isolated(self) -> str:
        return isolate_object(self.raw_text)

    @cached_property
    def normalized(self) -> str:
        return normalize(self.raw_text)

    @cached_property
    def repaired(self) -> str:
        return repair(self.normalized)


def parse_object(text: str) -> dict[str, Any] | None:
    """Strict JSON parse; anything but a JSON object counts as failure."""
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return parsed if isinstance(parsed, dict) else None


StageAttempt = Callable[[_Candidate], dict[str, Any] | None]


class RecoveryPipeline:
    """
    Ordered cascade of parse attempts with field extraction as the floor.

    Each stage is a function from the candidate text to an optional parsed
    object; the first non-``None`` result is conformed to the schema.
    """

    def __init__(self) -> None:
        self._stages: tuple[tuple[RecoveryStage, StageAttempt], ...] = (
            (RecoveryStage.DIRECT, lambda c: parse_object(c.isolated)),
            (RecoveryStage.NORMALIZED, lambda c: parse_object(c.normalized)),
            (RecoveryStage.STRUCTURAL_REPAIR, lambda c: parse_object(c.repaired)),
        )

    @property
    def stages(self) -> list[RecoveryStage]:
        """Parse stages in the order they are attempted."""
        return [stage for stage, _ in self._stages]

    def recover(self, raw_text: str, kind: SchemaKind) -> RecoveryResult:
        """
        Recover a typed response from raw model output.

        Args:
            raw_text: Full text of one model completion
            kind: Which response shape to rebuild

        Returns:
            RecoveryResult tagged with the stage that produced it
        """
        schema = get_schema(kind)
        candidate = _Candidate(raw_text or "")

        for stage, attempt in self._stages:
            parsed = attempt(candidate)
            if parsed is None:
                logger.debug("{} stage failed for {} response", stage, schema.kind)
                continue
            return self._from_parsed(schema, parsed, stage)

        extraction = extract_fields(candidate.normalized, schema.fields)
        logger.warning(
            "{} response recovered by field extraction ({} matched, {} defaulted)",
            schema.kind,
            len(extraction.matched),
            len(extraction.defaulted),
        )
        return RecoveryResult(
            value=schema.build(extraction.data),
            stage=RecoveryStage.FIELD_EXTRACTION,
            confidence=RecoveryConfidence.DEGRADED,
            defaulted=tuple(extraction.defaulted),
        )

    def recover_strict(self, raw_text: str, kind: SchemaKind) -> RecoveryResult:
        """
        Single parse of the normalized text, for short low-stakes responses.

        Any failure yields the schema's all-default value with stage DEFAULT.
        """
        schema = get_schema(kind)
        parsed = parse_object(normalize(raw_text or ""))
        if parsed is not None:
            return self._from_parsed(schema, parsed, RecoveryStage.NORMALIZED)

        logger.warning("{} response unparseable, using defaults", schema.kind)
        return RecoveryResult(
            value=schema.build(schema.defaults()),
            stage=RecoveryStage.DEFAULT,
            confidence=RecoveryConfidence.DEGRADED,
            defaulted=tuple(schema.default_paths()),
        )

    def _from_parsed(
        self,
        schema: ResponseSchema,
        parsed: dict[str, Any],
        stage: RecoveryStage,
    ) -> RecoveryResult:
        data, defaulted = conform(parsed, schema.fields)
        if defaulted:
            logger.warning(
                "{} response parsed at {} stage with defaults for: {}",
                schema.kind,
                stage,
                ", ".join(defaulted),
            )
        return RecoveryResult(
            value=schema.build(data),
            stage=stage,
            confidence=(
                RecoveryConfidence.DEGRADED if defaulted else RecoveryConfidence.EXACT
            ),
            defaulted=tuple(defaulted),
        )


_default_pipeline = RecoveryPipeline()


def recover(raw_text: str, kind: SchemaKind) -> RecoveryResult:
    """Recover ``raw_text`` with the shared default pipeline."""
    return _default_pipeline.recover(raw_text, kind)


def recover_strict(raw_text: str, kind: SchemaKind) -> RecoveryResult:
    """Strict-mode recovery with the shared default pipeline."""
    return _default_pipeline.recover_strict(raw_text, kind)
