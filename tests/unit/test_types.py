"""Tests for tos428 value types."""

from __future__ import annotations

import pytest

from tos428.errors import ValidationError
from tos428.types import Color, DeviceInfo, Mode, Restrictor, validate_channel, validate_way


class TestMode:
    """Tests for Mode.parse."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("4", Mode.FOUR_WAY),
            (4, Mode.FOUR_WAY),
            ("8", Mode.EIGHT_WAY),
            (8, Mode.EIGHT_WAY),
            ("keyboard", Mode.KEYBOARD),
            ("Keyboard", Mode.KEYBOARD),
            (Mode.KEYBOARD, Mode.KEYBOARD),
        ],
    )
    def test_valid(self, value: object, expected: Mode) -> None:
        assert Mode.parse(value) is expected  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", ["2", 2, "", "kbd", None, True, 4.0])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValidationError, match="Invalid mode"):
            Mode.parse(value)  # type: ignore[arg-type]

    def test_wire_values(self) -> None:
        assert {m.value for m in Mode} == {"4", "8", "keyboard"}


class TestRestrictor:
    """Tests for Restrictor.parse."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("all", Restrictor.ALL),
            ("ALL", Restrictor.ALL),
            ("a", Restrictor.A),
            ("D", Restrictor.D),
            (1, Restrictor.A),
            ("2", Restrictor.B),
            (4, Restrictor.D),
            (Restrictor.C, Restrictor.C),
        ],
    )
    def test_valid(self, value: object, expected: Restrictor) -> None:
        assert Restrictor.parse(value) is expected  # type: ignore[arg-type]

    @pytest.mark.parametrize("value", ["e", "", 0, 5, "0", "5", None, True, "\u00b2", "\u0661"])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(ValidationError, match="Invalid restrictor"):
            Restrictor.parse(value)  # type: ignore[arg-type]


class TestValidateWay:
    """Tests for validate_way."""

    @pytest.mark.parametrize("way", [4, 8])
    def test_valid(self, way: int) -> None:
        assert validate_way(way) == way

    @pytest.mark.parametrize("way", [0, 2, 5, 9, -4, "4", 4.0, True, None])
    def test_invalid(self, way: object) -> None:
        with pytest.raises(ValidationError, match="Invalid way"):
            validate_way(way)


class TestColor:
    """Tests for Color."""

    def test_fields_and_tuple(self) -> None:
        color = Color(1, 2, 3)
        assert color.as_tuple() == (1, 2, 3)
        assert tuple(color) == (1, 2, 3)
        assert str(color) == "1,2,3"

    def test_bounds_inclusive(self) -> None:
        assert Color(0, 255, 0).green == 255

    @pytest.mark.parametrize(("red", "green", "blue"), [(-1, 0, 0), (0, 256, 0), (0, 0, 300)])
    def test_out_of_range_raises(self, red: int, green: int, blue: int) -> None:
        with pytest.raises(ValidationError):
            Color(red, green, blue)

    def test_frozen(self) -> None:
        color = Color(1, 2, 3)
        with pytest.raises(AttributeError):
            color.red = 5  # type: ignore[misc]

    def test_validate_channel_names_channel(self) -> None:
        with pytest.raises(ValidationError, match="blue"):
            validate_channel("blue", 999)


class TestDeviceInfo:
    """Tests for DeviceInfo."""

    def test_color_for(self) -> None:
        info = DeviceInfo(
            welcome="tos428",
            startup_way=4,
            four_way_color=Color(1, 0, 0),
            eight_way_color=Color(0, 1, 0),
            keyboard_color=Color(0, 0, 1),
        )
        assert info.color_for(4) == Color(1, 0, 0)
        assert info.color_for("8") == Color(0, 1, 0)
        assert info.color_for(Mode.KEYBOARD) == Color(0, 0, 1)
