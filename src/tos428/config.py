"""Configuration for connecting to a tos428.

The configuration is a single immutable value built once at startup and
passed to :func:`tos428.create_device`. It can be constructed directly or
loaded from YAML.

Example YAML configuration:
    device:
      port: "/dev/ttyACM0"        # or "COM3", or "ASRL/dev/ttyACM0::INSTR"
      restrictor: "all"           # all, a-d or 1-4
      baudrate: 115200
      timeout: 1.0

    roms:
      list: "/home/arcade/roms4way.txt"   # optional, defaults to built-in list
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

import yaml

from tos428.errors import ValidationError
from tos428.transport import DEFAULT_BAUDRATE
from tos428.types import Restrictor


@dataclass(frozen=True)
class Tos428Config:
    """Connection and behaviour settings for one tos428.

    Attributes:
        port: Resolved device address. A serial device path or COM port, or
            a VISA resource string starting with ``ASRL``.
        restrictor: Restrictor addressed by ROM-based switching.
        baudrate: Line speed of the serial interface.
        timeout: Reply timeout in seconds.
        rom_list_path: Optional file overriding the built-in ROM list.
    """

    port: str
    restrictor: Union[Restrictor, str, int] = Restrictor.ALL
    baudrate: int = DEFAULT_BAUDRATE
    timeout: float = 1.0
    rom_list_path: Union[Path, str, None] = None

    def __post_init__(self) -> None:
        if not isinstance(self.port, str) or not self.port.strip():
            raise ValueError(f"port must be a non-empty string, got {self.port!r}")
        if isinstance(self.baudrate, bool) or not isinstance(self.baudrate, int) or self.baudrate <= 0:
            raise ValueError(f"baudrate must be an integer > 0, got {self.baudrate!r}")
        if (
            isinstance(self.timeout, bool)
            or not isinstance(self.timeout, (int, float))
            or self.timeout <= 0
        ):
            raise ValueError(f"timeout must be a number > 0, got {self.timeout!r}")
        try:
            restrictor = Restrictor.parse(self.restrictor)
        except ValidationError as exc:
            raise ValueError(str(exc)) from None
        object.__setattr__(self, "restrictor", restrictor)
        if self.rom_list_path is not None:
            object.__setattr__(self, "rom_list_path", Path(self.rom_list_path))

    @property
    def uses_visa(self) -> bool:
        """Return True if *port* is a VISA serial resource string."""
        return self.port.upper().startswith("ASRL")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Tos428Config:
        """Build a configuration from a parsed YAML mapping.

        Raises:
            ValueError: If required fields are missing or malformed.
        """
        device = data.get("device")
        if not isinstance(device, dict):
            raise ValueError("Missing required section: device")
        port = device.get("port")
        if not port:
            raise ValueError("Missing required field: device.port")

        roms = data.get("roms") or {}
        if not isinstance(roms, dict):
            raise ValueError("roms must be a mapping")

        try:
            baudrate = int(device.get("baudrate", DEFAULT_BAUDRATE))
            timeout = float(device.get("timeout", 1.0))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid device setting: {exc}") from None

        return cls(
            port=str(port),
            restrictor=device.get("restrictor", Restrictor.ALL),
            baudrate=baudrate,
            timeout=timeout,
            rom_list_path=roms.get("list"),
        )


def load_config(path: str | Path) -> Tos428Config:
    """Load a tos428 configuration from a YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Parsed configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config is invalid or missing required fields.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError("Config must be a YAML mapping")

    return Tos428Config.from_dict(data)
