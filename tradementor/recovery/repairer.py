"""Best-effort completion of a response truncated mid-generation."""

from tradementor.recovery.scanner import scan

STRING_BOUNDARIES = ",:}"


def _string_close_position(text: str, open_quote: int) -> int:
    """Earliest unescaped ``,``, ``:`` or ``}`` after the quote, else end of text."""
    for pos in range(open_quote + 1, len(text)):
        if text[pos] in STRING_BOUNDARIES and text[pos - 1] != "\\":
            return pos
    return len(text)


def close_open_string(text: str) -> str:
    """Insert a closing quote if the text stops inside a string literal."""
    open_quote = scan(text).unterminated_string_at
    if open_quote is None:
        return text

    insert_at = _string_close_position(text, open_quote)
    return text[:insert_at] + '"' + text[insert_at:]


def close_open_brackets(text: str) -> str:
    """Append the closers for every unclosed ``{``/``[``, innermost first."""
    scanned = scan(text)
    suffix = scanned.closing_suffix
    if not suffix:
        return text

    trimmed = text.rstrip()
    if trimmed.endswith(","):
        trimmed = trimmed[:-1].rstrip()
    return trimmed + suffix


def repair(text: str) -> str:
    """Close a dangling string, then balance brackets. Never raises."""
    return close_open_brackets(close_open_string(text))
