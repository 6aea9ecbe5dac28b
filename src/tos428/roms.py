"""ROM lists deciding restrictor orientation per game.

A ROM list names the games (by ROM base file name, e.g. ``pacman.zip``)
that are played with a 4-way joystick. Any ROM not on the list is played
8-way. The package ships a default list; a site-specific list can be loaded
from a text file with one name per line.
"""

from __future__ import annotations

import importlib.resources
import logging
from pathlib import Path
from typing import Iterable, Iterator

from tos428.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_ROM_LIST_RESOURCE = "data/roms4way.txt"


def rom_base_name(rom: str) -> str:
    """Return the final path component of *rom*.

    Both ``/`` and ``\\`` are treated as separators and trailing separators
    are ignored, so ``"/roms/mame/pacman.zip"`` and ``"C:\\roms\\pacman.zip"``
    both yield ``"pacman.zip"``.

    Raises:
        ValidationError: If *rom* has no file name component.
    """
    name = rom.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1].strip()
    if not name:
        raise ValidationError(f"Invalid ROM name: {rom!r}")
    return name


class RomList:
    """Immutable, ordered list of 4-way ROM names.

    Args:
        names: ROM base names. Entries are trimmed; blank entries are dropped.

    Example:
        >>> roms = RomList(["mk2.zip", "sf2.zip"])
        >>> roms.contains_rom("/roms/mk2.zip")
        True
    """

    def __init__(self, names: Iterable[str]) -> None:
        self._names = tuple(n.strip() for n in names if n.strip())
        self._lookup = frozenset(self._names)

    @classmethod
    def from_text(cls, text: str) -> RomList:
        """Build a list from newline-separated text."""
        return cls(text.splitlines())

    @classmethod
    def from_file(cls, path: str | Path) -> RomList:
        """Load a list from a text file with one ROM name per line.

        Raises:
            FileNotFoundError: If *path* does not exist.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM list not found: {path}")
        return cls.from_text(path.read_text(encoding="utf-8"))

    @classmethod
    def default(cls) -> RomList:
        """Return the list shipped with the package."""
        return cls.from_text(default_rom_list_text())

    @property
    def names(self) -> tuple[str, ...]:
        """ROM names in file order."""
        return self._names

    def contains_rom(self, rom: str) -> bool:
        """Return True if the base name of *rom* is on the list."""
        return rom_base_name(rom) in self._lookup

    def __contains__(self, name: object) -> bool:
        return name in self._lookup

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"RomList({len(self._names)} roms)"


def default_rom_list_text() -> str:
    """Return the raw text of the bundled 4-way ROM list."""
    resource = importlib.resources.files("tos428").joinpath(DEFAULT_ROM_LIST_RESOURCE)
    return resource.read_text(encoding="utf-8")


def load_rom_list(path: str | Path | None = None) -> RomList:
    """Load the ROM list from *path*, or the bundled default if None.

    Args:
        path: Optional text file with one ROM name per line.

    Returns:
        The loaded list.

    Raises:
        FileNotFoundError: If *path* is given but does not exist.
    """
    if path is None:
        roms = RomList.default()
        logger.info("Loaded %d roms from built-in list", len(roms))
    else:
        roms = RomList.from_file(path)
        logger.info("Loaded %d roms from %s", len(roms), path)
    return roms


def export_rom_list(path: str | Path) -> Path:
    """Write the bundled ROM list verbatim to *path*.

    The exported file is a starting point for a customised list passed back
    through :func:`load_rom_list`.

    Returns:
        The path written.
    """
    path = Path(path)
    path.write_text(default_rom_list_text(), encoding="utf-8")
    logger.info("Exported built-in rom list to %s", path)
    return path
