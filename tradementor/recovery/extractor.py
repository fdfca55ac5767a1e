"""Last-resort recovery of schema fields from text that will not parse.

Each field is located independently by a pattern anchored on its exact key,
so one mangled value never blocks the others. Arrays are not rebuilt here:
``strategy.legs`` always comes back empty from this stage.
"""

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from tradementor.recovery.scanner import (
    ScanResult,
    scan,
    find_string_end,
    find_matching_close,
)
from tradementor.recovery.schema import FieldKind, FieldSpec, coerce_number, conform

NUMBER_PATTERN = re.compile(r"[-+]?\d+(?:\.\d+)?")
BARE_WORD_PATTERN = re.compile(r"[A-Za-z_]+")
NULL_PATTERN = re.compile(r"null\b")
UNTERMINATED_DELIMITERS = ",\n"


@dataclass
class ExtractionResult:
    """Fields recovered by pattern matching, with defaults filled in."""

    data: dict[str, Any]
    matched: list[str] = field(default_factory=list)
    defaulted: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class _Window:
    """Span of text holding one object's direct children."""

    start: int
    end: int
    child_depths: tuple[int, ...]


@lru_cache(maxsize=128)
def _key_pattern(key: str) -> re.Pattern[str]:
    return re.compile(r'"' + re.escape(key) + r'"\s*:\s*')


def _find_value_start(scanned: ScanResult, key: str, window: _Window) -> int | None:
    """Offset of the value following ``"key":`` in the window.

    A key at the window's own child depth wins, then the first key at any
    depth. A match the scanner places inside a string is used only when
    nothing else matched, since an odd stray quote flips the string state
    for the rest of the text.
    """
    fallback: int | None = None
    masked: int | None = None
    for match in _key_pattern(key).finditer(scanned.text, window.start, window.end):
        if scanned.inside(match.start()):
            if masked is None:
                masked = match.end()
            continue
        if scanned.depth_at(match.start()) in window.child_depths:
            return match.end()
        if fallback is None:
            fallback = match.end()
    return fallback if fallback is not None else masked


def _decode_string(raw: str) -> str:
    try:
        return json.loads(f'"{raw}"').strip()
    except json.JSONDecodeError:
        return raw.replace('\\"', '"').strip()


def _read_string(text: str, start: int) -> str | None:
    if start >= len(text) or text[start] != '"':
        return None

    close = find_string_end(text, start)
    if close is None:
        close = len(text)
        for pos in range(start + 1, len(text)):
            if text[pos] in UNTERMINATED_DELIMITERS:
                close = pos
                break
    return _decode_string(text[start + 1 : close])


def _read_enum(text: str, start: int) -> str | None:
    value = _read_string(text, start)
    if value is not None:
        return value
    bare = BARE_WORD_PATTERN.match(text, start)
    return bare.group(0) if bare else None


def _read_number(text: str, start: int) -> float | None:
    match = NUMBER_PATTERN.match(text, start)
    return coerce_number(match.group(0)) if match else None


def _read_number_or_pair(scanned: ScanResult, start: int) -> float | list[float] | None:
    text = scanned.text
    if start < len(text) and text[start] == "[":
        close = find_matching_close(scanned, start)
        span = text[start + 1 : close if close is not None else len(text)]
        numbers = (coerce_number(n) for n in NUMBER_PATTERN.findall(span))
        points = [n for n in numbers if n is not None][:2]
        if len(points) == 2:
            return points
        return points[0] if points else None
    return _read_number(text, start)


def _child_window(scanned: ScanResult, start: int) -> _Window | None:
    text = scanned.text
    if start >= len(text) or text[start] != "{":
        return None
    close = find_matching_close(scanned, start)
    return _Window(
        start=start + 1,
        end=close if close is not None else len(text),
        child_depths=(scanned.depth_at(start) + 1,),
    )


def _extract(
    scanned: ScanResult,
    fields: tuple[FieldSpec, ...],
    window: _Window,
    prefix: str,
    matched: list[str],
) -> dict[str, Any]:
    text = scanned.text
    found: dict[str, Any] = {}

    for spec in fields:
        path = f"{prefix}{spec.key}"

        if spec.kind == FieldKind.ARRAY:
            continue

        start = _find_value_start(scanned, spec.key, window)
        if start is None:
            continue

        if spec.kind == FieldKind.NESTED:
            child_window = _child_window(scanned, start)
            if child_window is not None:
                found[spec.key] = _extract(
                    scanned, spec.children, child_window, f"{path}.", matched
                )
            continue

        value: Any
        if spec.kind == FieldKind.STRING:
            value = _read_string(text, start)
        elif spec.kind == FieldKind.ENUM:
            value = _read_enum(text, start)
        elif spec.kind == FieldKind.NUMBER:
            value = _read_number(text, start)
        elif spec.kind == FieldKind.OPTIONAL_NUMBER:
            if NULL_PATTERN.match(text, start):
                continue
            value = _read_number(text, start)
        else:
            value = _read_number_or_pair(scanned, start)

        if value is not None:
            found[spec.key] = value
            matched.append(path)

    return found


def extract_fields(text: str, fields: tuple[FieldSpec, ...]) -> ExtractionResult:
    """Assemble a best-effort object from ``text``, one field at a time.

    Cannot fail: a field with no match takes its default.
    """
    scanned = scan(text)
    matched: list[str] = []
    top_level = _Window(start=0, end=len(text), child_depths=(0, 1))

    found = _extract(scanned, fields, top_level, "", matched)
    data, defaulted = conform(found, fields)
    return ExtractionResult(data=data, matched=matched, defaulted=defaulted)
