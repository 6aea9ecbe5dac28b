"""tos428 switchable restrictor driver.

Wraps a :class:`~tos428.connection.LineConnection` with typed, validated
methods for every command of the tos428 firmware. Arguments are checked
before any byte is written; replies are decoded into typed values or raise
one of the :mod:`tos428.errors` exceptions.

Changes made with ``set*`` commands are temporary until
:meth:`Tos428.make_permanent` writes them to the device EEPROM.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from tos428.config import Tos428Config
from tos428.connection import LineConnection
from tos428.parsing import format_command, format_switch
from tos428.roms import RomList, load_rom_list
from tos428.serial_port import SerialTransport
from tos428.transport import Tos428Transport
from tos428.types import (
    Color,
    DeviceInfo,
    Mode,
    Restrictor,
    validate_channel,
    validate_way,
)
from tos428.visa import VisaSerialResource

logger = logging.getLogger(__name__)

MULTILINE_COMMANDS = frozenset({"getkeylist", "dumpeeprom"})
"""Commands whose reply spans several lines."""


class Tos428:
    """High-level driver for the tos428 restrictor controller.

    Not reentrant: issue one call at a time and wait for it to return.

    Args:
        connection: An open ``LineConnection`` to the device.
        restrictor: Restrictor used by :meth:`set_way_for_rom`.
        roms: 4-way ROM list used by :meth:`way_for_rom`. Defaults to the
            built-in list.
    """

    def __init__(
        self,
        connection: LineConnection,
        *,
        restrictor: Union[Restrictor, str, int] = Restrictor.ALL,
        roms: RomList | None = None,
    ) -> None:
        self._conn = connection
        self._restrictor = Restrictor.parse(restrictor)
        self._roms = roms if roms is not None else RomList.default()

    @property
    def restrictor(self) -> Restrictor:
        """Restrictor addressed by ROM-based switching."""
        return self._restrictor

    @property
    def roms(self) -> RomList:
        """The 4-way ROM list."""
        return self._roms

    # -- Identity / lifecycle -----------------------------------------------

    def get_welcome(self) -> str:
        """Query the product name and firmware version (``getwelcome``)."""
        return self._conn.query("getwelcome")

    def close(self) -> None:
        """Close the underlying connection."""
        self._conn.close()

    def __enter__(self) -> Tos428:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # -- Queries ------------------------------------------------------------

    def get_startup_way(self) -> int:
        """Query the orientation all restrictors take after power up."""
        return self._conn.query_int("getstartupway")

    def get_color(self, mode: Union[Mode, str, int]) -> Color:
        """Query the button color for *mode*.

        Args:
            mode: 4, 8 or ``"keyboard"``.

        Raises:
            ValidationError: If *mode* is invalid (nothing is sent).
            ProtocolError: If the reply is not ``r,g,b``.
        """
        mode = Mode.parse(mode)
        return self._conn.query_color(format_command("getcolor", mode.value))

    def get_silent(self) -> bool:
        """Query whether servos are unpowered when not in motion."""
        return self._conn.query_bool("getsilent")

    def get_key_list(self) -> tuple[str, ...]:
        """Query the symbolic key names buttons can emulate.

        Buttons configured as keyboard keys send up to three simultaneous
        keystrokes (e.g. ``KEY_LEFT_CTRL,KEY_LEFT_ALT,KEY_DELETE``).

        Raises:
            ProtocolError: If the device returns no key names.
        """
        return self._conn.query_key_list("getkeylist")

    def dump_eeprom(self) -> str:
        """Return the EEPROM contents holding the permanent configuration."""
        return self._conn.query("dumpeeprom", multiline=True)

    def get_info(self) -> DeviceInfo:
        """Collect welcome text, startup way and the colors of every mode."""
        welcome = self.get_welcome()
        startup_way = self.get_startup_way()
        info = DeviceInfo(
            welcome=welcome,
            startup_way=startup_way,
            four_way_color=self.get_color(Mode.FOUR_WAY),
            eight_way_color=self.get_color(Mode.EIGHT_WAY),
            keyboard_color=self.get_color(Mode.KEYBOARD),
        )
        logger.debug("Device info: %s", info)
        return info

    # -- Temporary configuration --------------------------------------------

    def set_color(self, mode: Union[Mode, str, int], red: int, green: int, blue: int) -> None:
        """Set the button color for *mode*.

        Args:
            mode: 4 or 8 for the restrictor positions, ``"keyboard"`` for
                buttons acting as keyboard keys.
            red: Red channel, 0-255.
            green: Green channel, 0-255.
            blue: Blue channel, 0-255.

        Raises:
            ValidationError: If *mode* or a channel is invalid (nothing is sent).
            DeviceError: If the device does not answer ``ok``.
        """
        mode = Mode.parse(mode)
        red = validate_channel("red", red)
        green = validate_channel("green", green)
        blue = validate_channel("blue", blue)
        self._conn.command(format_command("setcolor", mode.value, red, green, blue))

    def set_position(self, restrictor: Union[Restrictor, str, int], way: int) -> None:
        """Move *restrictor* to the *way* position.

        Args:
            restrictor: ``all``, ``a``-``d`` or an index 1-4.
            way: 4 or 8.

        Raises:
            ValidationError: If an argument is invalid (nothing is sent).
            DeviceError: If the device does not answer ``ok``.
        """
        restrictor = Restrictor.parse(restrictor)
        way = validate_way(way)
        logger.info("Setting restrictor %s position to %d-way", restrictor.value, way)
        self._conn.command(format_command("setway", restrictor.value, way))

    def set_silent(self, silent: bool) -> None:
        """Configure servo behaviour when not in motion.

        With silent mode on the servos are unpowered: low power consumption
        and noise, but also low holding torque. Recommended setting is off.
        """
        self._conn.command(format_command("setsilent", format_switch(silent)))

    def restore_factory(self) -> None:
        """Revert to factory settings.

        The revert is temporary; call :meth:`make_permanent` to keep it.
        """
        self._conn.command("restorefactory")

    # -- Permanent configuration --------------------------------------------

    def make_permanent(self) -> None:
        """Write the temporary configuration to EEPROM."""
        self._conn.command("makepermanent")

    def set_startup_way(self, way: int) -> None:
        """Set the power-up orientation of all restrictors and persist it.

        Sends ``setstartupway`` and, only if it succeeds, ``makepermanent``.
        A :class:`~tos428.errors.DeviceError` from either step names the
        rejected command in its ``command`` attribute.
        """
        way = validate_way(way)
        self._conn.command(format_command("setstartupway", way))
        self.make_permanent()

    # -- Raw access ---------------------------------------------------------

    def raw_command(self, command: str, *, multiline: bool = False) -> str:
        """Send *command* verbatim and return the reply text.

        Used for firmware features without a dedicated method. The reply is
        not interpreted. Commands in :data:`MULTILINE_COMMANDS` are always
        read in multi-line mode. Other commands answering with several lines
        need ``multiline=True``, otherwise only the first line is read and
        the rest stays queued on the port.
        """
        multiline = multiline or command.strip().lower() in MULTILINE_COMMANDS
        reply = self._conn.query(command, multiline=multiline)
        logger.info("%s -> %s", command, reply)
        return reply

    # -- ROM based switching ------------------------------------------------

    def way_for_rom(self, rom: str) -> int:
        """Return 4 if the base name of *rom* is on the ROM list, else 8."""
        return 4 if self._roms.contains_rom(rom) else 8

    def set_way_for_rom(self, rom: str) -> int:
        """Move the configured restrictor to the orientation *rom* needs.

        Args:
            rom: ROM file name or path, e.g. ``"/roms/mame/pacman.zip"``.

        Returns:
            The orientation applied.
        """
        logger.info("Checking ROM: %s", rom)
        way = self.way_for_rom(rom)
        self.set_position(self._restrictor, way)
        return way


def open_transport(config: Tos428Config) -> Tos428Transport:
    """Open the transport addressed by *config*.

    VISA resource strings (``ASRL...``) go through PyVISA, everything else
    through pyserial.

    Raises:
        TransportError: If the port cannot be opened.
    """
    if config.uses_visa:
        resource = VisaSerialResource(
            config.port,
            baudrate=config.baudrate,
            timeout_ms=int(config.timeout * 1000),
        )
        resource.open()
        return resource
    transport = SerialTransport(config.port, baudrate=config.baudrate, timeout=config.timeout)
    transport.open()
    return transport


def create_device(config: Tos428Config) -> Tos428:
    """Create a tos428 driver from a configuration.

    Loads the ROM list, opens the transport, wraps it in a
    :class:`LineConnection`, and returns a ready-to-use :class:`Tos428`.

    Args:
        config: Connection settings with a resolved device address.

    Returns:
        Connected driver instance.

    Raises:
        FileNotFoundError: If the configured ROM list does not exist.
        TransportError: If the port cannot be opened.
    """
    roms = load_rom_list(config.rom_list_path)
    transport = open_transport(config)
    return Tos428(LineConnection(transport), restrictor=config.restrictor, roms=roms)
