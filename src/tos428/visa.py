"""PyVISA transport for the tos428.

Wraps a VISA serial (``ASRL``) resource, for hosts where the device is
managed through a VISA installation (NI-VISA or pyvisa-py) rather than
opened directly. ``pyvisa`` is lazily imported so the rest of tos428 works
without it installed.

Supported resource string formats include:
- ``ASRL/dev/ttyACM0::INSTR`` (pyvisa-py, Linux)
- ``ASRL3::INSTR`` (COM3 on Windows)
"""

from __future__ import annotations

import logging
from typing import Any

from tos428.errors import TransportError
from tos428.transport import DEFAULT_BAUDRATE

logger = logging.getLogger(__name__)


class VisaSerialResource:
    """Transport backed by a PyVISA serial resource.

    Implements the :class:`~tos428.transport.Tos428Transport` protocol. Reads
    stop at the VISA termination character ``"\\n"``, which ends every
    ``"\\r\\n"``-terminated reply line. A VISA timeout is reported as an empty
    read, matching pyserial semantics.

    Attributes:
        resource_string: The VISA resource address string.
        is_open: Whether the resource is currently open.

    Args:
        resource_string: VISA resource address.
        baudrate: Line speed. Defaults to 115200.
        timeout_ms: I/O timeout in milliseconds (applied on open).

    Example:
        >>> resource = VisaSerialResource("ASRL/dev/ttyACM0::INSTR")
        >>> resource.open()
        >>> resource.write(b"getwelcome")
        >>> print(resource.read_until(b"\\r\\n", 128))
        >>> resource.close()
    """

    def __init__(
        self,
        resource_string: str,
        *,
        baudrate: int = DEFAULT_BAUDRATE,
        timeout_ms: int = 1000,
    ) -> None:
        self._resource_string = resource_string
        self._baudrate = baudrate
        self._timeout_ms = timeout_ms
        self._pyvisa: Any = None
        self._rm: Any = None
        self._resource: Any = None

    # -- Properties ----------------------------------------------------------

    @property
    def resource_string(self) -> str:
        """The VISA resource string."""
        return self._resource_string

    @property
    def is_open(self) -> bool:
        """Return True if the resource is currently open."""
        return self._resource is not None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> None:
        """Open the VISA resource.

        Lazily imports ``pyvisa`` and creates a :class:`ResourceManager`.

        Raises:
            TransportError: If ``pyvisa`` is not installed or the resource
                cannot be opened.
        """
        if self._resource is not None:
            return

        try:
            import pyvisa  # type: ignore[import-not-found]  # pylint: disable=import-outside-toplevel
        except ImportError as exc:
            raise TransportError(
                "pyvisa library is not installed. Install with: pip install tos428[visa]"
            ) from exc

        try:
            self._rm = pyvisa.ResourceManager()
            self._resource = self._rm.open_resource(
                self._resource_string,
                baud_rate=self._baudrate,
                read_termination="\n",
                write_termination="",
            )
            self._resource.timeout = self._timeout_ms
        except Exception as exc:
            self._resource = None
            self._close_manager()
            raise TransportError(
                f"Failed to open VISA resource {self._resource_string!r}: {exc}"
            ) from exc
        self._pyvisa = pyvisa
        logger.info("Opened %s at %d baud", self._resource_string, self._baudrate)

    def close(self) -> None:
        """Close the VISA resource and resource manager.

        Safe to call multiple times.
        """
        if self._resource is not None:
            try:
                self._resource.close()
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Error closing %s: %s", self._resource_string, exc)
            self._resource = None
            logger.info("Closed %s", self._resource_string)
        self._close_manager()

    # -- Transport interface -------------------------------------------------

    def write(self, data: bytes) -> None:
        """Write *data* exactly, without a termination character.

        Raises:
            TransportError: If the resource is not open or the write fails.
        """
        resource = self._require_open()
        try:
            resource.write_raw(data)
        except self._pyvisa.errors.VisaIOError as exc:
            raise TransportError(f"Write to {self._resource_string!r} failed: {exc}") from exc

    def read_until(self, terminator: bytes, size: int) -> bytes:
        """Read up to *size* bytes, stopping after the termination character.

        The termination character is fixed to ``\\n`` when the resource is
        opened and *terminator* is not consulted. The tos428 reply
        terminator ``\\r\\n`` ends in that character. A timeout is reported as
        ``b""``. Bytes that arrived before the timeout are discarded by
        VISA, so a partial reply also reads as ``b""``.

        Raises:
            TransportError: If the resource is not open or the read fails
                for a reason other than a timeout.
        """
        resource = self._require_open()
        try:
            data: bytes = resource.read_bytes(size, break_on_termchar=True)
        except self._pyvisa.errors.VisaIOError as exc:
            if exc.error_code == self._pyvisa.constants.StatusCode.error_timeout:
                return b""
            raise TransportError(f"Read from {self._resource_string!r} failed: {exc}") from exc
        return data

    # -- Private helpers -----------------------------------------------------

    def _require_open(self) -> Any:
        if self._resource is None:
            raise TransportError("VISA resource is not open")
        return self._resource

    def _close_manager(self) -> None:
        if self._rm is None:
            return
        try:
            self._rm.close()
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Error closing VISA resource manager: %s", exc)
        self._rm = None
