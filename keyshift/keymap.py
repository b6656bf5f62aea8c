"""Keymaps: remapping key presses with modifiers to sequences of actions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from keyshift.application import OnlyOrNot, string_or_list
from keyshift.device_filter import DeviceFilter
from keyshift.key_press import KeyModifier, KeyPress, Modifier, parse_key_press
from keyshift.keymap_action import KeymapAction, parse_actions

_KEYMAP_FIELDS = ("name", "remap", "application", "window", "device", "mode", "exact_match")


def _optional(data: Mapping, key: str, parse: Any) -> Any:
    value = data.get(key)
    return None if value is None else parse(value)


@dataclass
class Keymap:
    """One keymap section of a configuration."""

    remap: dict[KeyPress, list[KeymapAction]]
    name: str = ""
    application: OnlyOrNot | None = None
    window: OnlyOrNot | None = None
    device: DeviceFilter | None = None
    mode: tuple[str, ...] | None = None
    exact_match: bool = False

    @classmethod
    def from_config(cls, data: object) -> Keymap:
        """Build from a configuration mapping."""
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a map for a keymap, got {data!r}")
        for name in data:
            if name not in _KEYMAP_FIELDS:
                raise ValueError(f"unknown field `{name}` in keymap")
        if "remap" not in data:
            raise ValueError("missing field `remap`")
        table = data["remap"]
        if not isinstance(table, Mapping):
            raise ValueError(f"expected a map for `remap`, got {table!r}")
        name = data.get("name", "")
        if not isinstance(name, str):
            raise ValueError(f"expected a string for name, got {name!r}")
        exact_match = data.get("exact_match", False)
        if not isinstance(exact_match, bool):
            raise ValueError(f"expected a boolean for exact_match, got {exact_match!r}")
        return cls(
            remap={parse_key_press(key): parse_actions(actions) for key, actions in table.items()},
            name=name,
            application=_optional(data, "application", OnlyOrNot.from_config),
            window=_optional(data, "window", OnlyOrNot.from_config),
            device=_optional(data, "device", DeviceFilter.from_config),
            mode=tuple(string_or_list(data["mode"])) if "mode" in data else None,
            exact_match=exact_match,
        )


@dataclass
class KeymapEntry:
    """A keymap remapping indexed by its triggering key."""

    actions: list[KeymapAction]
    modifiers: tuple[Modifier | KeyModifier, ...]
    application: OnlyOrNot | None = None
    title: OnlyOrNot | None = None
    device: DeviceFilter | None = None
    mode: tuple[str, ...] | None = None
    exact_match: bool = False


@dataclass
class OverrideEntry:
    """A remapping of a nested override, indexed by its triggering key."""

    actions: list[KeymapAction]
    modifiers: tuple[Modifier | KeyModifier, ...] = field(default_factory=tuple)
    exact_match: bool = False


def build_keymap_table(keymaps: Iterable[Keymap]) -> dict[int, list[KeymapEntry]]:
    """Index every keymap remapping by its triggering key, keeping keymap order."""
    table: dict[int, list[KeymapEntry]] = {}
    for keymap in keymaps:
        for key_press, actions in keymap.remap.items():
            table.setdefault(key_press.key, []).append(
                KeymapEntry(
                    actions=list(actions),
                    modifiers=key_press.modifiers,
                    application=keymap.application,
                    title=keymap.window,
                    device=keymap.device,
                    mode=keymap.mode,
                    exact_match=keymap.exact_match,
                )
            )
    return table


def build_override_table(
    remap: Mapping[KeyPress, list[KeymapAction]], exact_match: bool
) -> dict[int, list[OverrideEntry]]:
    """Index the remappings of a nested override by their triggering key."""
    table: dict[int, list[OverrideEntry]] = {}
    for key_press, actions in remap.items():
        table.setdefault(key_press.key, []).append(
            OverrideEntry(actions=list(actions), modifiers=key_press.modifiers, exact_match=exact_match)
        )
    return table