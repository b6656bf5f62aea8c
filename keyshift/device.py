"""Descriptions of input devices and matching them against device filters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

SEPARATOR = "-" * 78

_HEX = re.compile(r"\+?[0-9A-Fa-f]+")


def _parse_id(text: str) -> int:
    while text.startswith("0x"):
        text = text[2:]
    if not _HEX.fullmatch(text):
        return 0
    value = int(text, 16)
    return value if value <= 0xFFFF else 0


@dataclass(frozen=True)
class InputDeviceInfo:
    """Name, path and USB ids of an input device."""

    name: str
    path: Path
    product: int
    vendor: int

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path if isinstance(self.path, (str, PathLike)) else str(self.path)))

    def _matches_ids(self, vendor: int, product: int) -> bool:
        if vendor == 0 and product == 0:
            return False
        if product == 0:
            return vendor == self.vendor
        if vendor == 0:
            return product == self.product
        return vendor == self.vendor and product == self.product

    def matches(self, filter: str) -> bool:
        """Return whether a ``--device`` style filter selects this device.

        A filter matches the exact path or name, ``eventN`` for
        ``/dev/input/eventN``, ``ids:VENDOR:PRODUCT`` in hex (0 for any),
        or any part of the device name.
        """
        if str(self.path) == filter or self.name == filter:
            return True
        if filter.startswith("event") and self.path.name == filter:
            return True
        if filter.startswith("ids:"):
            parts = filter.split(":")
            if len(parts) == 3 and self._matches_ids(_parse_id(parts[1]), _parse_id(parts[2])):
                return True
        return filter in self.name