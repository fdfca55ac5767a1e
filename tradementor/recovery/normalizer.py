"""Cheap, string-safe textual fixes applied before any structural repair."""

import re

from tradementor.recovery.scanner import scan

LEADING_FENCE = re.compile(r"^\s*```[ \t]*(?:json|JSON)?[ \t]*\r?\n?")
TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```[ \t]*$")

WHITESPACE = " \t\r\n"
STRING_CONTROL_CHARS = "\r\n\t"


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker."""
    stripped = text.strip()
    stripped = LEADING_FENCE.sub("", stripped, count=1)
    stripped = TRAILING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def isolate_object(text: str) -> str:
    """Strip fences and keep only the outermost ``{ ... }`` span.

    When the text opens an object but never closes one after it (a truncated
    completion), only the prose before the ``{`` is dropped.
    """
    stripped = strip_code_fences(text)
    first = stripped.find("{")
    if first == -1:
        return stripped

    last = stripped.rfind("}")
    if last > first:
        return stripped[first : last + 1]
    return stripped[first:]


def _next_significant(text: str, pos: int) -> str:
    while pos < len(text) and text[pos] in WHITESPACE:
        pos += 1
    return text[pos] if pos < len(text) else ""


def normalize(text: str) -> str:
    """Apply the safe fixes in order: fences, isolation, trailing commas, raw newlines.

    Never fails; the output is closer to valid JSON but not guaranteed to parse.
    """
    isolated = isolate_object(text)
    scanned = scan(isolated)

    out: list[str] = []
    skip_lf = False
    for pos, ch in enumerate(isolated):
        if scanned.in_string[pos]:
            if ch == "\n" and skip_lf:
                skip_lf = False
                continue
            skip_lf = ch == "\r"
            out.append(" " if ch in STRING_CONTROL_CHARS else ch)
            continue

        skip_lf = False
        if ch == "," and _next_significant(isolated, pos + 1) in ("}", "]"):
            continue
        out.append(ch)

    return "".join(out)
