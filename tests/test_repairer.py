"""Tests for truncation repair."""

import json

from tradementor.recovery.repairer import close_open_brackets, close_open_string, repair


class TestCloseOpenString:
    """Test suite for closing a dangling string literal."""

    def test_closes_at_end(self):
        """Test a string cut off at the end of the text."""
        assert close_open_string('{"a": "hello') == '{"a": "hello"'

    def test_closes_at_first_boundary(self):
        """Test the quote goes before the first comma after the open quote."""
        assert close_open_string('{"a": "hello, world') == '{"a": "hello", world'

    def test_terminated_text_unchanged(self):
        """Test that balanced strings are left alone."""
        text = '{"a": "x", "b": "y"}'
        assert close_open_string(text) == text

    def test_quote_is_last_character(self):
        """Test a string opened on the final character is closed empty."""
        assert close_open_string('{"a": "') == '{"a": ""'


class TestCloseOpenBrackets:
    """Test suite for balancing brackets."""

    def test_appends_closers_in_reverse(self):
        """Test closers are appended innermost first."""
        assert close_open_brackets('{"a": [1, {"b": 2') == '{"a": [1, {"b": 2}]}'

    def test_dangling_comma_trimmed(self):
        """Test a trailing comma is dropped before closing."""
        assert close_open_brackets('{"a": [1, 2,  \n') == '{"a": [1, 2]}'

    def test_balanced_text_unchanged(self):
        """Test that nothing is appended when already balanced."""
        assert close_open_brackets('{"a": 1}') == '{"a": 1}'


class TestRepair:
    """Test suite for the composed repair."""

    def test_truncated_mid_string(self):
        """Test a response cut off inside a nested string value."""
        repaired = repair('{"analysis": {"trend": "Up", "momentum": "Market is showi')
        assert json.loads(repaired) == {
            "analysis": {"trend": "Up", "momentum": "Market is showi"}
        }

    def test_truncated_after_value(self):
        """Test a response cut off between fields."""
        repaired = repair('{"a": {"b": [1, 2], "c": 3,')
        assert json.loads(repaired) == {"a": {"b": [1, 2], "c": 3}}

    def test_never_raises(self):
        """Test garbage input still returns a string."""
        assert isinstance(repair('"{[\\'), str)
