"""Reply decoding and command formatting for the tos428 line protocol.

Replies are plain ASCII. Scalars are decimal integers (``"4"``) or boolean
tokens (``"true"``), colors are ``"r,g,b"`` and the key list is a sequence of
key names separated by ``\\r\\n``. Every decoder raises
:class:`~tos428.errors.ProtocolError` on malformed input.
"""

from __future__ import annotations

import re

from tos428.errors import ProtocolError, ValidationError
from tos428.types import CHANNEL_MAX, CHANNEL_MIN, Color

OK = "ok"
"""Success sentinel returned by every mutating command."""

LINE_SEPARATOR = "\r\n"

_INT_RE = re.compile(r"^[+-]?[0-9]+$")

_TRUE_TOKENS: frozenset[str] = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS: frozenset[str] = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_int(text: str) -> int:
    """Parse a decimal integer reply.

    Args:
        text: The reply text. Only an optional sign and ASCII digits are
            accepted; surrounding whitespace is not.

    Returns:
        The parsed integer.

    Raises:
        ProtocolError: If *text* is not a decimal integer.
    """
    if not _INT_RE.match(text):
        raise ProtocolError(f"Invalid integer: {text!r}", reply=text)
    return int(text)


def parse_bool(text: str) -> bool:
    """Parse a boolean reply.

    Accepts ``1``, ``t``, ``true`` and ``0``, ``f``, ``false`` in lower,
    upper or title case.

    Raises:
        ProtocolError: If *text* is not a recognized boolean token.
    """
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    raise ProtocolError(f"Invalid boolean: {text!r}", reply=text)


def parse_color(text: str) -> Color:
    """Parse an ``r,g,b`` color reply.

    Args:
        text: Exactly three comma-separated decimal integers.

    Returns:
        The decoded color.

    Raises:
        ProtocolError: If the field count is not three, a field is not an
            integer, or a channel lies outside [0, 255].
    """
    fields = text.split(",")
    if len(fields) != 3:
        raise ProtocolError(
            f"Expected 3 comma-separated color fields, got {len(fields)}: {text!r}",
            reply=text,
        )
    channels = []
    for name, field in zip(("red", "green", "blue"), fields):
        if not _INT_RE.match(field):
            raise ProtocolError(f"Invalid {name} value in color {text!r}", reply=text)
        value = int(field)
        if not CHANNEL_MIN <= value <= CHANNEL_MAX:
            raise ProtocolError(f"{name} value out of range in color {text!r}", reply=text)
        channels.append(value)
    return Color(*channels)


def parse_key_list(text: str) -> tuple[str, ...]:
    """Parse a key list reply.

    Args:
        text: Key names separated by ``\\r\\n``.

    Returns:
        The key names in device order, empty entries removed.

    Raises:
        ProtocolError: If no key name is present.
    """
    keys = tuple(key for key in text.split(LINE_SEPARATOR) if key.strip())
    if not keys:
        raise ProtocolError("Unable to get key list: reply is empty", reply=text)
    return keys


def format_switch(value: bool) -> str:
    """Format a boolean as the ``on``/``off`` token used by ``setsilent``."""
    if not isinstance(value, bool):
        raise ValidationError(f"Invalid switch value: {value!r} (expected a bool)")
    return "on" if value else "off"


def format_command(name: str, *fields: object) -> str:
    """Build a comma-separated command line.

    Args:
        name: Command keyword (e.g. ``"setway"``).
        fields: Already validated arguments; each is rendered with ``str()``.

    Returns:
        The command line, e.g. ``"setway,all,4"``.
    """
    return ",".join([name, *(str(f) for f in fields)])
