"""Key presses with modifiers, written as ``C-Shift-a`` in configuration files."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from keyshift.keys import parse_key


class Modifier(Enum):
    """A modifier that matches its left key, its right key, or both."""

    SHIFT = "shift"
    CONTROL = "control"
    ALT = "alt"
    WINDOWS = "windows"


@dataclass(frozen=True)
class KeyModifier:
    """A modifier that matches exactly one key."""

    key: int


@dataclass(frozen=True)
class KeyPress:
    """A triggering key together with the modifiers held with it."""

    key: int
    modifiers: tuple[Modifier | KeyModifier, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "modifiers", tuple(self.modifiers))


_MODIFIER_NAMES = {
    "SHIFT": Modifier.SHIFT,
    "C": Modifier.CONTROL,
    "CTRL": Modifier.CONTROL,
    "CONTROL": Modifier.CONTROL,
    "M": Modifier.ALT,
    "ALT": Modifier.ALT,
    "SUPER": Modifier.WINDOWS,
    "WIN": Modifier.WINDOWS,
    "WINDOWS": Modifier.WINDOWS,
}


def parse_modifier(text: str) -> Modifier | KeyModifier:
    """Parse one modifier name; any key name is accepted as an exact modifier."""
    name = text.upper()
    modifier = _MODIFIER_NAMES.get(name)
    if modifier is not None:
        return modifier
    return KeyModifier(parse_key(name))


def parse_key_press(text: str) -> KeyPress:
    """Parse a key press such as ``Shift-C-x``; the last part is the key."""
    if not isinstance(text, str):
        raise ValueError(f"expected a key press string, got {type(text).__name__}")
    *modifier_names, key = text.split("-")
    modifiers = tuple(parse_modifier(name) for name in modifier_names)
    return KeyPress(parse_key(key), modifiers)