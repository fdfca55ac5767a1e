"""Single-pass string/nesting scanner for JSON-like text.

Every repair stage needs to know whether a character sits inside a string
literal. Doing that with regexes over the whole text is where hand-rolled
repairers go wrong (or go quadratic), so the state is computed once, in one
forward pass, and shared.
"""

from dataclasses import dataclass, field

OPENERS = {"{": "}", "[": "]"}
CLOSERS = {"}": "{", "]": "["}


@dataclass
class ScanResult:
    """Per-position lexical state of a scanned text.

    ``in_string[i]`` is the state when the scanner *reaches* position ``i``:
    an opening quote is outside, its contents and the closing quote are inside.
    ``depth[i]`` is the number of unclosed ``{``/``[`` before position ``i``.
    """

    text: str
    start: int
    in_string: list[bool] = field(default_factory=list)
    depth: list[int] = field(default_factory=list)
    open_stack: list[tuple[str, int]] = field(default_factory=list)
    unterminated_string_at: int | None = None

    @property
    def ends_in_string(self) -> bool:
        """Check if the text stops inside a string literal."""
        return self.unterminated_string_at is not None

    @property
    def closing_suffix(self) -> str:
        """Closers needed to balance every unclosed opener, innermost first."""
        return "".join(OPENERS[ch] for ch, _ in reversed(self.open_stack))

    def inside(self, pos: int) -> bool:
        """Check if ``pos`` lies inside a string literal."""
        return self.in_string[pos - self.start]

    def depth_at(self, pos: int) -> int:
        """Nesting depth at ``pos``."""
        return self.depth[pos - self.start]


def scan(text: str, start: int = 0) -> ScanResult:
    """Scan ``text`` from ``start`` in one linear pass.

    A quote toggles string state unless it is preceded by an odd number of
    backslashes. Brackets only count outside strings; a closer that does not
    match the innermost opener is ignored.
    """
    result = ScanResult(text=text, start=start)
    in_string = False
    backslashes = 0
    string_start = -1
    stack: list[tuple[str, int]] = []

    for pos in range(start, len(text)):
        ch = text[pos]
        result.in_string.append(in_string)
        result.depth.append(len(stack))

        if in_string:
            if ch == "\\":
                backslashes += 1
                continue
            if ch == '"' and backslashes % 2 == 0:
                in_string = False
                string_start = -1
            backslashes = 0
            continue

        if ch == '"':
            in_string = True
            string_start = pos
            backslashes = 0
        elif ch in OPENERS:
            stack.append((ch, pos))
        elif ch in CLOSERS and stack and stack[-1][0] == CLOSERS[ch]:
            stack.pop()

    result.open_stack = stack
    if in_string:
        result.unterminated_string_at = string_start
    return result


def find_string_end(text: str, open_quote: int) -> int | None:
    """Return the index of the quote closing the string opened at ``open_quote``."""
    backslashes = 0
    for pos in range(open_quote + 1, len(text)):
        ch = text[pos]
        if ch == "\\":
            backslashes += 1
            continue
        if ch == '"' and backslashes % 2 == 0:
            return pos
        backslashes = 0
    return None


def find_matching_close(scanned: ScanResult, open_pos: int) -> int | None:
    """Return the index of the bracket closing the one at ``open_pos``.

    Works for truncated text too: ``None`` means the opener is never closed.
    """
    text = scanned.text
    closer = OPENERS.get(text[open_pos])
    if closer is None:
        return None

    inner_depth = scanned.depth_at(open_pos) + 1
    for pos in range(open_pos + 1, len(text)):
        if (
            text[pos] == closer
            and not scanned.inside(pos)
            and scanned.depth_at(pos) == inner_depth
        ):
            return pos
        if scanned.depth_at(pos) < inner_depth:
            return None
    return None
