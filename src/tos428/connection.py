"""Line-based command/response connection for the tos428.

This module provides the :class:`LineConnection` class, which wraps a
transport to provide the framing of the tos428 protocol: one ASCII command
line out, one reply back, with typed query variants and ``ok`` checking for
mutating commands.

Every exchange is a single write followed by the read of its reply. The
protocol carries no request IDs, so exchanges must never be pipelined and a
connection that failed mid-exchange cannot be resynchronized.

Typical usage::

    from tos428 import LineConnection, SerialTransport

    transport = SerialTransport("/dev/ttyACM0")
    transport.open()
    conn = LineConnection(transport)

    welcome = conn.query("getwelcome")
    conn.command("setway,all,4")

    conn.close()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, TypeVar

from tos428.errors import DeviceError, ProtocolError, TransportError, ValidationError
from tos428.parsing import OK, parse_bool, parse_color, parse_int, parse_key_list
from tos428.types import Color

if TYPE_CHECKING:
    from tos428.transport import Tos428Transport

logger = logging.getLogger(__name__)

T = TypeVar("T")

REPLY_TERMINATOR = b"\r\n"
REPLY_BUFFER_SIZE = 128
"""Byte budget for a single-line reply."""

MULTILINE_BUFFER_SIZE = 4096
"""Byte budget for multi-line replies (key list, EEPROM dump)."""


class LineConnection:
    """Command/response connection wrapping a transport.

    Single-line replies are read until ``\\r\\n`` or until
    :data:`REPLY_BUFFER_SIZE` bytes have arrived. Multi-line replies are read
    line by line until the device goes quiet (a read ends without
    terminator) or :data:`MULTILINE_BUFFER_SIZE` is exhausted. The trailing
    ``\\r\\n`` is stripped before interpretation.

    A reply that fills its byte budget without ending leaves the rest of it
    queued on the port, where it would be read as the next reply. Such an
    overflow raises :class:`TransportError`.

    Any :class:`TransportError` marks the connection unusable; later
    exchanges fail immediately without touching the transport.

    Args:
        transport: An open :class:`~tos428.transport.Tos428Transport`.

    Example:
        >>> conn = LineConnection(transport)
        >>> conn.query_int("getstartupway")
        4
    """

    def __init__(self, transport: Tos428Transport) -> None:
        self._transport = transport
        self._failed: TransportError | None = None

    @property
    def transport(self) -> Tos428Transport:
        """The underlying transport."""
        return self._transport

    @property
    def is_usable(self) -> bool:
        """Return False once a transport failure has occurred."""
        return self._failed is None

    # -- Core operations -----------------------------------------------------

    def query(self, cmd: str, *, multiline: bool = False) -> str:
        """Send a command line and return its reply.

        Args:
            cmd: The command line (e.g. ``"getwelcome"``).
            multiline: Read a reply spanning several ``\\r\\n``-separated lines.

        Returns:
            The reply with trailing ``\\r\\n`` stripped.

        Raises:
            ValidationError: If *cmd* is empty, not ASCII, or not a single line.
            TransportError: If the write or read fails, no reply arrives, or
                the reply overflows its byte budget.
            ProtocolError: If the reply is not ASCII text.
        """
        data = _encode_command(cmd)
        self._ensure_usable()
        try:
            logger.debug("-> %s", cmd)
            self._transport.write(data)
            raw = self._read_multiline(cmd) if multiline else self._read_line(cmd)
        except TransportError as exc:
            self._failed = exc
            raise
        if not raw:
            self._failed = TransportError(f"No reply to {cmd!r} before timeout")
            raise self._failed
        if not multiline and not raw.endswith(REPLY_TERMINATOR):
            logger.warning("Reply to %r is not terminated: %r", cmd, raw)
        try:
            reply = raw.decode("ascii").rstrip("\r\n")
        except UnicodeDecodeError:
            raise ProtocolError(f"Reply to {cmd!r} is not ASCII: {raw!r}", command=cmd) from None
        logger.debug("<- %r", reply)
        return reply

    def command(self, cmd: str) -> None:
        """Send a mutating command and require the ``ok`` sentinel.

        Args:
            cmd: The command line (e.g. ``"setway,all,4"``).

        Raises:
            DeviceError: If the reply is anything other than ``ok``.
            TransportError: If the exchange fails.
        """
        reply = self.query(cmd)
        if reply != OK:
            raise DeviceError(cmd, reply)

    # -- Typed query variants ------------------------------------------------

    def query_as(self, cmd: str, parser: Callable[[str], T], *, multiline: bool = False) -> T:
        """Query and decode the reply with *parser*.

        Args:
            cmd: The command line.
            parser: Decoder raising :class:`ProtocolError` on malformed text.
            multiline: Read a multi-line reply.

        Returns:
            The decoded value.

        Raises:
            ProtocolError: If the reply does not decode; carries *cmd* and
                the raw reply.
        """
        reply = self.query(cmd, multiline=multiline)
        try:
            return parser(reply)
        except ProtocolError as exc:
            raise ProtocolError(f"{cmd}: {exc}", command=cmd, reply=reply) from None

    def query_int(self, cmd: str) -> int:
        """Query and parse the reply as a decimal integer."""
        return self.query_as(cmd, parse_int)

    def query_bool(self, cmd: str) -> bool:
        """Query and parse the reply as a boolean token."""
        return self.query_as(cmd, parse_bool)

    def query_color(self, cmd: str) -> Color:
        """Query and parse the reply as an ``r,g,b`` color."""
        return self.query_as(cmd, parse_color)

    def query_key_list(self, cmd: str) -> tuple[str, ...]:
        """Query and parse a multi-line key name list."""
        return self.query_as(cmd, parse_key_list, multiline=True)

    # -- Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    # -- Private helpers -----------------------------------------------------

    def _ensure_usable(self) -> None:
        if self._failed is not None:
            raise TransportError(
                f"Connection is unusable after an earlier failure ({self._failed}); reconnect"
            )

    def _read_line(self, cmd: str) -> bytes:
        raw = self._transport.read_until(REPLY_TERMINATOR, REPLY_BUFFER_SIZE)
        if len(raw) >= REPLY_BUFFER_SIZE and not raw.endswith(REPLY_TERMINATOR):
            raise TransportError(
                f"Reply to {cmd!r} exceeds {REPLY_BUFFER_SIZE} bytes: {raw[:32]!r}..."
            )
        return raw

    def _read_multiline(self, cmd: str) -> bytes:
        chunks: list[bytes] = []
        remaining = MULTILINE_BUFFER_SIZE
        while True:
            chunk = self._transport.read_until(REPLY_TERMINATOR, remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
            # A full budget may hide further queued lines.
            if remaining <= 0:
                raise TransportError(
                    f"Reply to {cmd!r} exceeds {MULTILINE_BUFFER_SIZE} bytes"
                )
            if not chunk.endswith(REPLY_TERMINATOR):
                break
        return b"".join(chunks)


def _encode_command(cmd: str) -> bytes:
    """Validate a command line and encode it for the wire."""
    if not cmd:
        raise ValidationError("Command must not be empty")
    if "\r" in cmd or "\n" in cmd:
        raise ValidationError(f"Command must be a single line: {cmd!r}")
    try:
        return cmd.encode("ascii")
    except UnicodeEncodeError:
        raise ValidationError(f"Command must be ASCII: {cmd!r}") from None
