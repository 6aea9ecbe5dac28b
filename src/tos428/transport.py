"""Transport protocol definition for tos428.

This module defines the :class:`Tos428Transport` protocol, the byte-stream
capability the driver depends on. Transports handle the physical layer;
framing and reply interpretation belong to
:class:`~tos428.connection.LineConnection`.

Implementations include:
- :class:`tos428.SerialTransport`: pyserial-backed serial port (default)
- :class:`tos428.VisaSerialResource`: PyVISA ``ASRL`` serial resource
- :class:`tos428.Tos428Emulator`: in-process device emulator for tests
"""

from __future__ import annotations

from typing import Protocol

DEFAULT_BAUDRATE = 115200
"""Fixed line speed of the tos428 serial interface."""


class Tos428Transport(Protocol):
    """Protocol for tos428 byte-stream transport.

    Callers are responsible for opening the transport before passing it to
    :class:`~tos428.connection.LineConnection`. Implementations raise
    :class:`~tos428.errors.TransportError` for I/O failures.

    This is a structural subtyping protocol (duck typing). Any class that
    implements ``write()``, ``read_until()``, and ``close()`` with the
    correct signatures is considered a valid transport.

    Example:
        >>> class MyTransport:
        ...     def write(self, data: bytes) -> None:
        ...         pass
        ...     def read_until(self, terminator: bytes, size: int) -> bytes:
        ...         return b"ok\\r\\n"
        ...     def close(self) -> None:
        ...         pass
        ...
        >>> transport: Tos428Transport = MyTransport()  # Type checks OK
    """

    def write(self, data: bytes) -> None:
        """Write all of *data* to the device."""
        ...

    def read_until(self, terminator: bytes, size: int) -> bytes:
        """Read from the device until *terminator*, *size* bytes, or timeout.

        Args:
            terminator: Byte sequence ending a line.
            size: Maximum number of bytes to return.

        Returns:
            The bytes read, including the terminator if one was seen. A
            result without terminator means the size budget was exhausted or
            the read timed out; ``b""`` means nothing arrived.
        """
        ...

    def close(self) -> None:
        """Close the transport and release resources."""
        ...
