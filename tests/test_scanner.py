"""Tests for the string/nesting scanner."""

from tradementor.recovery.scanner import find_matching_close, find_string_end, scan


class TestScan:
    """Test suite for the single-pass scanner."""

    def test_quote_positions(self):
        """Test that the opening quote is outside and the closing quote inside."""
        scanned = scan('{"k": 1}')
        assert not scanned.inside(0)
        assert not scanned.inside(1)
        assert scanned.inside(2)
        assert scanned.inside(3)
        assert not scanned.inside(4)

    def test_escaped_quote_does_not_close(self):
        """Test that a backslash-escaped quote stays inside the string."""
        scanned = scan('{"a": "b\\"c"}')
        assert not scanned.ends_in_string
        assert scanned.open_stack == []

    def test_even_backslashes_close(self):
        """Test that an escaped backslash does not escape the following quote."""
        scanned = scan('{"a": "b\\\\"}')
        assert not scanned.ends_in_string
        assert scanned.closing_suffix == ""

    def test_brackets_inside_strings_ignored(self):
        """Test that braces within string literals are not counted."""
        scanned = scan('{"a": "{[not structure"}')
        assert scanned.open_stack == []

    def test_unterminated_string(self):
        """Test truncated text inside a string literal."""
        text = '{"a": [1, {"b": "x'
        scanned = scan(text)
        assert scanned.ends_in_string
        assert scanned.unterminated_string_at == text.rindex('"')

    def test_closing_suffix_is_reverse_nesting(self):
        """Test that closers come innermost first."""
        scanned = scan('{"a": [1, {"b": 2')
        assert scanned.closing_suffix == "}]}"

    def test_mismatched_closer_ignored(self):
        """Test that a closer not matching the innermost opener is skipped."""
        scanned = scan("{]")
        assert scanned.open_stack == [("{", 0)]

    def test_depth(self):
        """Test nesting depth per position."""
        scanned = scan('{"a": {"b": 1}}')
        assert scanned.depth_at(0) == 0
        assert scanned.depth_at(1) == 1
        assert scanned.depth_at(6) == 1
        assert scanned.depth_at(7) == 2

    def test_scan_from_offset(self):
        """Test that positions stay absolute when scanning from an offset."""
        text = 'prefix {"a": 1}'
        scanned = scan(text, start=7)
        assert scanned.depth_at(7) == 0
        assert scanned.inside(9)


class TestFinders:
    """Test suite for string-end and bracket matching helpers."""

    def test_find_string_end(self):
        """Test finding the closing quote past an escaped one."""
        assert find_string_end('"ab\\"c" x', 0) == 6

    def test_find_string_end_unterminated(self):
        """Test that an unterminated string has no end."""
        assert find_string_end('"abc', 0) is None

    def test_find_matching_close(self):
        """Test matching inner and outer objects."""
        text = '{"a": {"b": 1}} x'
        scanned = scan(text)
        assert find_matching_close(scanned, 6) == 13
        assert find_matching_close(scanned, 0) == 14

    def test_find_matching_close_skips_string_braces(self):
        """Test that a brace inside a string does not close the object."""
        text = '{"a": "}"}'
        assert find_matching_close(scan(text), 0) == 9

    def test_find_matching_close_truncated(self):
        """Test that an opener never closed has no match."""
        scanned = scan('{"a": [1, 2')
        assert find_matching_close(scanned, 6) is None
        assert find_matching_close(scanned, 0) is None
