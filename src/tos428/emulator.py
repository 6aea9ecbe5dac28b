"""tos428 device emulator.

Provides an in-process emulator implementing the ``Tos428Transport``
protocol. It keeps a temporary configuration, which ``set*`` commands change,
and a permanent (EEPROM) configuration, which ``makepermanent`` writes and a
power cycle reloads.
"""

from __future__ import annotations

import copy
from collections import deque
from dataclasses import dataclass, field
from typing import Callable

from tos428.types import CHANNEL_MAX, CHANNEL_MIN

_OK = "ok"
_FAIL = "fail"
_TERMINATOR = "\r\n"

_RESTRICTORS: tuple[str, ...] = ("a", "b", "c", "d")
_MODES: tuple[str, ...] = ("4", "8", "keyboard")

_DEFAULT_KEYS: tuple[str, ...] = (
    "KEY_LEFT_CTRL",
    "KEY_LEFT_SHIFT",
    "KEY_LEFT_ALT",
    "KEY_RETURN",
    "KEY_ESC",
    "KEY_TAB",
    "KEY_DELETE",
    "KEY_UP_ARROW",
    "KEY_DOWN_ARROW",
    "KEY_LEFT_ARROW",
    "KEY_RIGHT_ARROW",
    "KEY_F1",
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Tos428EmulatorConfig:
    """Configuration for a tos428 emulator instance.

    Args:
        welcome: ``getwelcome`` response string.
        keys: Key names returned by ``getkeylist``.
    """

    welcome: str = "tos428 4/8-way restrictor controller V1.0 (emulated)"
    keys: tuple[str, ...] = _DEFAULT_KEYS

    def __post_init__(self) -> None:
        if not self.welcome:
            raise ValueError("welcome must be non-empty")
        if not self.keys:
            raise ValueError("keys must be non-empty")


# ---------------------------------------------------------------------------
# Internal device state
# ---------------------------------------------------------------------------


def _factory_colors() -> dict[str, tuple[int, int, int]]:
    return {"4": (255, 0, 0), "8": (0, 0, 255), "keyboard": (0, 255, 0)}


@dataclass
class _Settings:
    startup_way: int = 8
    silent: bool = False
    colors: dict[str, tuple[int, int, int]] = field(default_factory=_factory_colors)


# ---------------------------------------------------------------------------
# Emulator
# ---------------------------------------------------------------------------


class Tos428Emulator:
    """In-process tos428 emulator implementing ``Tos428Transport``.

    Every command produces exactly one ``\\r\\n``-terminated reply. Unknown
    commands and invalid arguments are answered with ``fail``.

    Args:
        config: Emulator configuration. Defaults to :class:`Tos428EmulatorConfig`.
    """

    def __init__(self, config: Tos428EmulatorConfig | None = None) -> None:
        self._config = config or Tos428EmulatorConfig()
        self._eeprom = _Settings()
        self._settings = copy.deepcopy(self._eeprom)
        self._positions: dict[str, int] = dict.fromkeys(_RESTRICTORS, self._eeprom.startup_way)
        self._response_buffer = b""
        self._queued_replies: deque[str] = deque()
        self._commands: list[str] = []
        self._closed = False

        self._handlers: dict[str, Callable[[list[str]], str]] = {
            "getwelcome": self._get_welcome,
            "getstartupway": self._get_startup_way,
            "getcolor": self._get_color,
            "getsilent": self._get_silent,
            "getkeylist": self._get_key_list,
            "dumpeeprom": self._dump_eeprom,
            "setcolor": self._set_color,
            "setway": self._set_way,
            "setsilent": self._set_silent,
            "setstartupway": self._set_startup_way,
            "makepermanent": self._make_permanent,
            "restorefactory": self._restore_factory,
        }

    # -- Transport interface ------------------------------------------------

    def write(self, data: bytes) -> None:
        """Process one command line and queue its reply after any unread bytes."""
        line = data.decode("ascii").strip()
        self._commands.append(line)
        if self._queued_replies:
            reply = self._queued_replies.popleft()
        else:
            reply = self._dispatch(line)
        self._response_buffer += (reply + _TERMINATOR).encode("ascii")

    def read_until(self, terminator: bytes, size: int) -> bytes:
        """Return buffered reply bytes up to *terminator* or *size*.

        Returns ``b""`` once the buffer is drained, as a real port does on
        timeout.
        """
        end = self._response_buffer.find(terminator)
        end = len(self._response_buffer) if end < 0 else end + len(terminator)
        end = min(end, size)
        chunk = self._response_buffer[:end]
        self._response_buffer = self._response_buffer[end:]
        return chunk

    def close(self) -> None:
        """Close the emulator (no-op for in-process transport)."""
        self._closed = True

    # -- Test helpers -------------------------------------------------------

    @property
    def commands(self) -> tuple[str, ...]:
        """Command lines received so far, oldest first."""
        return tuple(self._commands)

    @property
    def closed(self) -> bool:
        """Return True once :meth:`close` has been called."""
        return self._closed

    def position(self, restrictor: str) -> int:
        """Return the current orientation of *restrictor* (``a``-``d``)."""
        return self._positions[restrictor]

    def queue_reply(self, reply: str) -> None:
        """Answer the next command with *reply* instead of the real result.

        The command itself is not executed.
        """
        self._queued_replies.append(reply)

    def power_cycle(self) -> None:
        """Simulate a power cycle: reload EEPROM and move to startup way."""
        self._settings = copy.deepcopy(self._eeprom)
        self._positions = dict.fromkeys(_RESTRICTORS, self._settings.startup_way)
        self._response_buffer = b""

    # -- Private helpers ----------------------------------------------------

    def _dispatch(self, line: str) -> str:
        name, *args = line.split(",")
        handler = self._handlers.get(name.lower())
        if handler is None:
            return _FAIL
        return handler(args)

    @staticmethod
    def _parse_way(token: str) -> int | None:
        return int(token) if token in ("4", "8") else None

    # -- Query handlers -----------------------------------------------------

    def _get_welcome(self, args: list[str]) -> str:
        return self._config.welcome if not args else _FAIL

    def _get_startup_way(self, args: list[str]) -> str:
        return str(self._settings.startup_way) if not args else _FAIL

    def _get_color(self, args: list[str]) -> str:
        if len(args) != 1 or args[0] not in _MODES:
            return _FAIL
        return ",".join(str(c) for c in self._settings.colors[args[0]])

    def _get_silent(self, args: list[str]) -> str:
        if args:
            return _FAIL
        return "true" if self._settings.silent else "false"

    def _get_key_list(self, args: list[str]) -> str:
        return _TERMINATOR.join(self._config.keys) if not args else _FAIL

    def _dump_eeprom(self, args: list[str]) -> str:
        if args:
            return _FAIL
        eeprom = self._eeprom
        lines = [
            f"startupway={eeprom.startup_way}",
            f"silent={'on' if eeprom.silent else 'off'}",
        ]
        for mode in _MODES:
            red, green, blue = eeprom.colors[mode]
            lines.append(f"color{mode}={red},{green},{blue}")
        return _TERMINATOR.join(lines)

    # -- Set handlers -------------------------------------------------------

    def _set_color(self, args: list[str]) -> str:
        if len(args) != 4 or args[0] not in _MODES:
            return _FAIL
        try:
            channels = tuple(int(a) for a in args[1:])
        except ValueError:
            return _FAIL
        if any(not CHANNEL_MIN <= c <= CHANNEL_MAX for c in channels):
            return _FAIL
        self._settings.colors[args[0]] = (channels[0], channels[1], channels[2])
        return _OK

    def _set_way(self, args: list[str]) -> str:
        if len(args) != 2:
            return _FAIL
        selector = args[0].lower()
        way = self._parse_way(args[1])
        if way is None or (selector != "all" and selector not in _RESTRICTORS):
            return _FAIL
        targets = _RESTRICTORS if selector == "all" else (selector,)
        for target in targets:
            self._positions[target] = way
        return _OK

    def _set_silent(self, args: list[str]) -> str:
        if len(args) != 1 or args[0] not in ("on", "off"):
            return _FAIL
        self._settings.silent = args[0] == "on"
        return _OK

    def _set_startup_way(self, args: list[str]) -> str:
        way = self._parse_way(args[0]) if len(args) == 1 else None
        if way is None:
            return _FAIL
        self._settings.startup_way = way
        return _OK

    def _make_permanent(self, args: list[str]) -> str:
        if args:
            return _FAIL
        self._eeprom = copy.deepcopy(self._settings)
        return _OK

    def _restore_factory(self, args: list[str]) -> str:
        if args:
            return _FAIL
        self._settings = _Settings()
        return _OK
