"""Actions that a keymap entry performs, as parsed from configuration values."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Union

from keyshift.application import string_or_list
from keyshift.key_press import KeyPress, parse_key_press
from keyshift.keys import parse_key


@dataclass(frozen=True)
class KeyPressAndRelease:
    """Press and release a key press, modifiers included."""

    key_press: KeyPress


@dataclass(frozen=True)
class PressKey:
    """Only press a key."""

    key: int


@dataclass(frozen=True)
class RepeatKey:
    """Only send a repeat event for a key."""

    key: int


@dataclass(frozen=True)
class ReleaseKey:
    """Only release a key."""

    key: int


@dataclass
class Remap:
    """A nested keymap that is active for the next key press."""

    remap: dict[KeyPress, list[KeymapAction]] = field(default_factory=dict)
    timeout: timedelta | None = None
    timeout_key: tuple[int, ...] | None = None


@dataclass(frozen=True)
class Launch:
    """Run a command."""

    command: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "command", tuple(self.command))


@dataclass(frozen=True)
class SetMode:
    """Switch to another mode."""

    mode: str


@dataclass(frozen=True)
class SetMark:
    """Set or clear the mark."""

    enabled: bool


@dataclass(frozen=True)
class WithMark:
    """Send a key press, holding Shift while the mark is set."""

    key_press: KeyPress


@dataclass(frozen=True)
class EscapeNextKey:
    """Let the next key pass through without remapping."""

    enabled: bool


@dataclass(frozen=True)
class Sleep:
    """Pause for a number of milliseconds."""

    millis: int


@dataclass(frozen=True)
class SetExtraModifiers:
    """Internal action: set the extra modifiers held while emitting."""

    keys: tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))


KeymapAction = Union[
    KeyPressAndRelease,
    PressKey,
    RepeatKey,
    ReleaseKey,
    Remap,
    Launch,
    SetMode,
    SetMark,
    WithMark,
    EscapeNextKey,
    Sleep,
    SetExtraModifiers,
]


def _single_entry(value: object, name: str) -> Any:
    if isinstance(value, Mapping) and len(value) == 1 and name in value:
        return value[name]
    raise ValueError(f'not a map with a single "{name}" key')


def _string(value: object, what: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected a string for {what}, got {value!r}")
    return value


def _bool(value: object, what: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"expected a boolean for {what}, got {value!r}")
    return value


def _unsigned(value: object, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"expected a non-negative integer for {what}, got {value!r}")
    return value


def _string_list(value: object, what: str) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"expected a list of strings for {what}, got {value!r}")
    return tuple(value)


def parse_remap(value: object) -> Remap:
    """Parse a nested remap: ``{remap: {...}, timeout_millis: n, timeout_key: k}``."""
    if not isinstance(value, Mapping) or "remap" not in value:
        raise ValueError("missing field `remap`")
    table = value["remap"]
    if not isinstance(table, Mapping):
        raise ValueError(f"expected a map for `remap`, got {table!r}")
    remap = {parse_key_press(key): parse_actions(actions) for key, actions in table.items()}

    timeout_millis = value.get("timeout_millis")
    timeout = None
    if timeout_millis is not None:
        timeout = timedelta(milliseconds=_unsigned(timeout_millis, "timeout_millis"))

    timeout_key = None
    if "timeout_key" in value:
        timeout_key = tuple(parse_key(key) for key in string_or_list(value["timeout_key"]))

    return Remap(remap=remap, timeout=timeout, timeout_key=timeout_key)


_PARSERS: tuple[Callable[[object], KeymapAction], ...] = (
    lambda v: KeyPressAndRelease(parse_key_press(v)),
    lambda v: PressKey(parse_key(_string(_single_entry(v, "press"), "press"))),
    lambda v: RepeatKey(parse_key(_string(_single_entry(v, "repeat"), "repeat"))),
    lambda v: ReleaseKey(parse_key(_string(_single_entry(v, "release"), "release"))),
    parse_remap,
    lambda v: Launch(_string_list(_single_entry(v, "launch"), "launch")),
    lambda v: SetMode(_string(_single_entry(v, "set_mode"), "set_mode")),
    lambda v: SetMark(_bool(_single_entry(v, "set_mark"), "set_mark")),
    lambda v: WithMark(parse_key_press(_single_entry(v, "with_mark"))),
    lambda v: EscapeNextKey(_bool(_single_entry(v, "escape_next_key"), "escape_next_key")),
    lambda v: Sleep(_unsigned(_single_entry(v, "sleep"), "sleep")),
)


def parse_action(value: object) -> KeymapAction:
    """Parse one keymap action, trying each accepted form in turn."""
    for parser in _PARSERS:
        try:
            return parser(value)
        except ValueError:
            continue
    raise ValueError(f"data did not match any variant of untagged enum KeymapAction: {value!r}")


def parse_actions(value: object) -> list[KeymapAction]:
    """Parse ``null``, a single action, or a list of actions into a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [parse_action(item) for item in value]
    return [parse_action(value)]