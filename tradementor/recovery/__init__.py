"""Resilient recovery of structured responses from raw model text."""

from tradementor.recovery.pipeline import (
    RecoveryPipeline,
    RecoveryResult,
    recover,
    recover_strict,
)
from tradementor.recovery.schema import SCHEMAS, FieldKind, FieldSpec, get_schema

__all__ = [
    "RecoveryPipeline",
    "RecoveryResult",
    "recover",
    "recover_strict",
    "SCHEMAS",
    "FieldKind",
    "FieldSpec",
    "get_schema",
]
