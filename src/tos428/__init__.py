"""Host-side driver for the tos428 switchable 4/8-way joystick restrictor.

This package talks to the tos428 controller over its serial line protocol:
ASCII command lines out, single-line ASCII replies back. It includes:

- Transport abstraction with pyserial and PyVISA implementations
- Line-based connection with reply framing and ``ok`` checking
- Typed, validated driver for every firmware command
- ROM lists deciding 4-way or 8-way orientation per game
- YAML configuration loading
- In-process device emulator for testing without hardware
- Custom exception types for validation, transport, protocol and device errors

Typical usage::

    from tos428 import Tos428Config, create_device

    config = Tos428Config(port="/dev/ttyACM0", restrictor="all")
    with create_device(config) as device:
        print(device.get_welcome())
        device.set_way_for_rom("/roms/mame/pacman.zip")
"""

from tos428.config import Tos428Config, load_config
from tos428.connection import LineConnection
from tos428.device import Tos428, create_device, open_transport
from tos428.emulator import Tos428Emulator, Tos428EmulatorConfig
from tos428.errors import (
    DeviceError,
    ProtocolError,
    Tos428Error,
    TransportError,
    ValidationError,
)
from tos428.parsing import parse_bool, parse_color, parse_int, parse_key_list
from tos428.roms import RomList, export_rom_list, load_rom_list, rom_base_name
from tos428.serial_port import SerialTransport
from tos428.transport import DEFAULT_BAUDRATE, Tos428Transport
from tos428.types import Color, DeviceInfo, Mode, Restrictor, validate_way
from tos428.visa import VisaSerialResource

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Tos428Config",
    "load_config",
    # Connection
    "LineConnection",
    # Driver
    "Tos428",
    "create_device",
    "open_transport",
    # Emulator
    "Tos428Emulator",
    "Tos428EmulatorConfig",
    # Errors
    "DeviceError",
    "ProtocolError",
    "Tos428Error",
    "TransportError",
    "ValidationError",
    # Reply parsing
    "parse_bool",
    "parse_color",
    "parse_int",
    "parse_key_list",
    # ROM lists
    "RomList",
    "export_rom_list",
    "load_rom_list",
    "rom_base_name",
    # Transports
    "DEFAULT_BAUDRATE",
    "SerialTransport",
    "Tos428Transport",
    "VisaSerialResource",
    # Types
    "Color",
    "DeviceInfo",
    "Mode",
    "Restrictor",
    "validate_way",
]
