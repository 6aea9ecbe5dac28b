"""Value types for the tos428 protocol.

Classes:
    Mode: Button color mode addressed by ``getcolor``/``setcolor``.
    Restrictor: Restrictor selector addressed by ``setway``.
    Color: RGB button color with per-channel range checking.
    DeviceInfo: Aggregated device report (welcome, startup way, colors).

Functions:
    validate_way: Check a restrictor orientation.
    validate_channel: Check a single color channel value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

from tos428.errors import ValidationError

WAYS: tuple[int, ...] = (4, 8)
"""Valid restrictor orientations."""

CHANNEL_MIN = 0
CHANNEL_MAX = 255


class Mode(Enum):
    """Button mode whose color can be configured.

    When a button controls the restrictor, ``FOUR_WAY`` and ``EIGHT_WAY``
    select the color shown in each position. ``KEYBOARD`` is the color used
    when the button is configured as a keyboard key.
    """

    FOUR_WAY = "4"
    EIGHT_WAY = "8"
    KEYBOARD = "keyboard"

    @classmethod
    def parse(cls, value: Union[Mode, str, int]) -> Mode:
        """Convert a user-supplied value into a :class:`Mode`.

        Args:
            value: A ``Mode``, one of ``"4"``, ``"8"``, ``"keyboard"``
                (case-insensitive), or the integers 4 and 8.

        Returns:
            The matching mode.

        Raises:
            ValidationError: If *value* does not name a mode.
        """
        if isinstance(value, Mode):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValidationError(f"Invalid mode: {value!r} (expected 4, 8 or keyboard)")


class Restrictor(Enum):
    """Restrictor selector for position commands."""

    ALL = "all"
    A = "a"
    B = "b"
    C = "c"
    D = "d"

    @classmethod
    def parse(cls, value: Union[Restrictor, str, int]) -> Restrictor:
        """Convert a user-supplied value into a :class:`Restrictor`.

        Accepts a member, a case-insensitive name (``"all"``, ``"a"`` ..
        ``"d"``) or a restrictor index 1-4, given as int or digit string,
        which maps to A-D.

        Raises:
            ValidationError: If *value* does not select a restrictor.
        """
        if isinstance(value, Restrictor):
            return value
        if isinstance(value, str):
            token = value.strip().lower()
            if token.isascii() and token.isdigit():
                value = int(token)
            else:
                try:
                    return cls(token)
                except ValueError:
                    pass
        if isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 4:
            return _RESTRICTOR_BY_INDEX[value]
        raise ValidationError(
            f"Invalid restrictor: {value!r} (expected all, a, b, c, d or 1-4)"
        )


_RESTRICTOR_BY_INDEX: dict[int, Restrictor] = {
    1: Restrictor.A,
    2: Restrictor.B,
    3: Restrictor.C,
    4: Restrictor.D,
}


def validate_way(way: object) -> int:
    """Check that *way* is a valid restrictor orientation.

    Args:
        way: The orientation to check.

    Returns:
        The orientation as an int.

    Raises:
        ValidationError: If *way* is not the integer 4 or 8.
    """
    if isinstance(way, bool) or not isinstance(way, int) or way not in WAYS:
        raise ValidationError(f"Invalid way: {way!r} (expected 4 or 8)")
    return way


def validate_channel(name: str, value: object) -> int:
    """Check a single color channel.

    Args:
        name: Channel name used in the error message.
        value: The channel value.

    Returns:
        The channel value as an int.

    Raises:
        ValidationError: If *value* is not an integer in [0, 255].
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Invalid value for {name}: {value!r} (expected an integer)")
    if not CHANNEL_MIN <= value <= CHANNEL_MAX:
        raise ValidationError(
            f"Invalid value for {name}: {value} (expected {CHANNEL_MIN}-{CHANNEL_MAX})"
        )
    return value


@dataclass(frozen=True)
class Color:
    """RGB color of a button.

    Iterating a color yields ``red, green, blue`` so it unpacks like a tuple.

    Attributes:
        red: Red channel, 0-255.
        green: Green channel, 0-255.
        blue: Blue channel, 0-255.
    """

    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        validate_channel("red", self.red)
        validate_channel("green", self.green)
        validate_channel("blue", self.blue)

    def __iter__(self) -> Iterator[int]:
        return iter(self.as_tuple())

    def as_tuple(self) -> tuple[int, int, int]:
        """Return the color as ``(red, green, blue)``."""
        return (self.red, self.green, self.blue)

    def __str__(self) -> str:
        return f"{self.red},{self.green},{self.blue}"


@dataclass(frozen=True)
class DeviceInfo:
    """Summary of the device configuration.

    Attributes:
        welcome: Product name and firmware version.
        startup_way: Orientation applied to all restrictors at power up.
        four_way_color: Button color in 4-way position.
        eight_way_color: Button color in 8-way position.
        keyboard_color: Button color in keyboard mode.
    """

    welcome: str
    startup_way: int
    four_way_color: Color
    eight_way_color: Color
    keyboard_color: Color

    def color_for(self, mode: Union[Mode, str, int]) -> Color:
        """Return the reported color for *mode*."""
        colors = {
            Mode.FOUR_WAY: self.four_way_color,
            Mode.EIGHT_WAY: self.eight_way_color,
            Mode.KEYBOARD: self.keyboard_color,
        }
        return colors[Mode.parse(mode)]
