"""Tests for reply decoding and command formatting."""

from __future__ import annotations

import pytest

from tos428.errors import ProtocolError, ValidationError
from tos428.parsing import (
    format_command,
    format_switch,
    parse_bool,
    parse_color,
    parse_int,
    parse_key_list,
)
from tos428.types import Color


class TestParseInt:
    """Tests for parse_int."""

    @pytest.mark.parametrize(("text", "expected"), [("4", 4), ("8", 8), ("+8", 8), ("-1", -1), ("007", 7)])
    def test_valid(self, text: str, expected: int) -> None:
        assert parse_int(text) == expected

    @pytest.mark.parametrize("text", ["", "four", "4.0", " 4", "4 ", "1_0", "0x8"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ProtocolError, match="Invalid integer"):
            parse_int(text)

    def test_error_carries_reply(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            parse_int("abc")
        assert exc_info.value.reply == "abc"


class TestParseBool:
    """Tests for parse_bool."""

    @pytest.mark.parametrize("text", ["1", "t", "T", "true", "TRUE", "True"])
    def test_true_tokens(self, text: str) -> None:
        assert parse_bool(text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "false", "FALSE", "False"])
    def test_false_tokens(self, text: str) -> None:
        assert parse_bool(text) is False

    @pytest.mark.parametrize("text", ["", "yes", "on", "tRuE", "2"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ProtocolError, match="Invalid boolean"):
            parse_bool(text)


class TestParseColor:
    """Tests for parse_color."""

    def test_valid(self) -> None:
        assert parse_color("10,20,30") == Color(10, 20, 30)

    def test_unpacks_as_triple(self) -> None:
        red, green, blue = parse_color("0,128,255")
        assert (red, green, blue) == (0, 128, 255)

    @pytest.mark.parametrize("text", ["10,20", "10,20,30,40", "", "fail"])
    def test_wrong_field_count(self, text: str) -> None:
        with pytest.raises(ProtocolError, match="Expected 3"):
            parse_color(text)

    @pytest.mark.parametrize("text", ["10,abc,30", "10,,30", "10, 20,30", "1.5,2,3"])
    def test_non_integer_field(self, text: str) -> None:
        with pytest.raises(ProtocolError, match="Invalid"):
            parse_color(text)

    @pytest.mark.parametrize("text", ["256,0,0", "0,-1,0", "0,0,1000"])
    def test_out_of_range(self, text: str) -> None:
        with pytest.raises(ProtocolError, match="out of range"):
            parse_color(text)


class TestParseKeyList:
    """Tests for parse_key_list."""

    def test_splits_on_crlf(self) -> None:
        assert parse_key_list("KEY_A\r\nKEY_B") == ("KEY_A", "KEY_B")

    def test_single_key(self) -> None:
        assert parse_key_list("KEY_ESC") == ("KEY_ESC",)

    def test_drops_blank_entries(self) -> None:
        assert parse_key_list("KEY_A\r\n\r\nKEY_B") == ("KEY_A", "KEY_B")

    def test_empty_raises(self) -> None:
        with pytest.raises(ProtocolError, match="empty"):
            parse_key_list("")


class TestFormatting:
    """Tests for command formatting helpers."""

    def test_format_command(self) -> None:
        assert format_command("setcolor", "keyboard", 1, 2, 3) == "setcolor,keyboard,1,2,3"

    def test_format_command_without_fields(self) -> None:
        assert format_command("makepermanent") == "makepermanent"

    def test_format_switch(self) -> None:
        assert format_switch(True) == "on"
        assert format_switch(False) == "off"

    def test_format_switch_rejects_non_bool(self) -> None:
        with pytest.raises(ValidationError):
            format_switch(1)  # type: ignore[arg-type]
