"""Exception types for tos428.

All exceptions raised by the driver inherit from :class:`Tos428Error`, allowing
callers to catch every failure of a device exchange with a single except
clause. No error is retried or swallowed inside the library; the caller
decides whether a failure is fatal.

Exception hierarchy:
    Tos428Error (base)
    +-- ValidationError: Argument rejected before any transport I/O
    +-- TransportError: Open, write or read failure, or reply timeout
    +-- ProtocolError: Reply does not match the expected reply grammar
    +-- DeviceError: Mutating command answered with something other than ``ok``
"""

from __future__ import annotations


class Tos428Error(Exception):
    """Base exception for all tos428 errors."""


class ValidationError(Tos428Error, ValueError):
    """Raised when an argument fails a local range or set check.

    Validation always happens before a single byte is written, so the device
    never sees a malformed command. Fix the input and retry.
    """


class TransportError(Tos428Error):
    """Raised when the underlying byte stream fails.

    This covers failures to open the port, write or read errors (disconnect,
    power loss) and replies that never arrive within the transport timeout.
    After a transport error the connection must be treated as unusable.
    """


class ProtocolError(Tos428Error):
    """Raised when a reply does not conform to the expected grammar.

    Typical causes are a firmware mismatch or a framing desynchronization
    between host and device.

    Attributes:
        command: The command line whose reply failed to decode, if known.
        reply: The offending reply text, if known.
    """

    def __init__(self, message: str, *, command: str | None = None, reply: str | None = None) -> None:
        self.command = command
        self.reply = reply
        super().__init__(message)


class DeviceError(Tos428Error):
    """Raised when the device rejects a mutating command.

    The reply was well-formed text but not the ``ok`` success sentinel.

    Attributes:
        command: The command line the device rejected.
        reply: The reply text received instead of ``ok``.

    Example:
        >>> try:
        ...     device.set_startup_way(4)
        ... except DeviceError as e:
        ...     print(f"{e.command} failed: {e.reply}")
    """

    def __init__(self, command: str, reply: str) -> None:
        self.command = command
        self.reply = reply
        super().__init__(f"Device rejected {command!r}: {reply!r}")
