"""pyserial transport for the tos428.

The tos428 enumerates as a USB CDC serial device (``/dev/ttyACM0`` on Linux,
``COM3`` on Windows) running at a fixed 115200 baud.
"""

from __future__ import annotations

import logging
from typing import Any

import serial

from tos428.errors import TransportError
from tos428.transport import DEFAULT_BAUDRATE

logger = logging.getLogger(__name__)


class SerialTransport:
    """Transport backed by a pyserial port.

    Implements the :class:`~tos428.transport.Tos428Transport` protocol.

    Attributes:
        port: The device path or COM port name.
        is_open: Whether the port is currently open.

    Args:
        port: Device path (e.g. ``"/dev/ttyACM0"``) or COM port.
        baudrate: Line speed. Defaults to 115200.
        timeout: Read timeout in seconds. Defaults to 1.0.
        write_timeout: Write timeout in seconds, or None to block.

    Example:
        >>> transport = SerialTransport("/dev/ttyACM0")
        >>> transport.open()
        >>> transport.write(b"getwelcome")
        >>> transport.read_until(b"\\r\\n", 128)
        >>> transport.close()
    """

    def __init__(
        self,
        port: str,
        *,
        baudrate: int = DEFAULT_BAUDRATE,
        timeout: float = 1.0,
        write_timeout: float | None = None,
    ) -> None:
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._write_timeout = write_timeout
        self._serial: Any = None

    # -- Properties ----------------------------------------------------------

    @property
    def port(self) -> str:
        """The device path or COM port name."""
        return self._port

    @property
    def baudrate(self) -> int:
        """The configured line speed."""
        return self._baudrate

    @property
    def is_open(self) -> bool:
        """Return True if the port is currently open."""
        return self._serial is not None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> None:
        """Open the serial port.

        Raises:
            TransportError: If the port cannot be opened.
        """
        if self._serial is not None:
            return
        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                timeout=self._timeout,
                write_timeout=self._write_timeout,
            )
        except (OSError, ValueError) as exc:
            self._serial = None
            raise TransportError(f"Failed to open serial port {self._port!r}: {exc}") from exc
        logger.info("Opened %s at %d baud", self._port, self._baudrate)

    def close(self) -> None:
        """Close the serial port. Safe to call multiple times."""
        if self._serial is None:
            return
        try:
            self._serial.close()
        except OSError as exc:
            logger.warning("Error closing %s: %s", self._port, exc)
        self._serial = None
        logger.info("Closed %s", self._port)

    # -- Transport interface -------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write all of *data* to the port.

        Raises:
            TransportError: If the port is not open or the write fails.
        """
        port = self._require_open()
        try:
            written = port.write(data)
            port.flush()
        except OSError as exc:
            raise TransportError(f"Write to {self._port!r} failed: {exc}") from exc
        if written is not None and written != len(data):
            raise TransportError(
                f"Short write to {self._port!r}: {written} of {len(data)} bytes"
            )

    def read_until(self, terminator: bytes, size: int) -> bytes:
        """Read until *terminator*, *size* bytes, or the read timeout.

        Raises:
            TransportError: If the port is not open or the read fails.
        """
        port = self._require_open()
        try:
            data: bytes = port.read_until(expected=terminator, size=size)
        except OSError as exc:
            raise TransportError(f"Read from {self._port!r} failed: {exc}") from exc
        return data

    # -- Private helpers -----------------------------------------------------

    def _require_open(self) -> Any:
        if self._serial is None:
            raise TransportError(f"Serial port {self._port!r} is not open")
        return self._serial
