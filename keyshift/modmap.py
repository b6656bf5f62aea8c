"""Modmaps: remapping single keys, with multi-purpose and press/release actions."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Union

from keyshift.application import OnlyOrNot, string_or_list
from keyshift.device_filter import DeviceFilter
from keyshift.keymap_action import KeymapAction, parse_actions
from keyshift.keys import parse_key

DEFAULT_ALONE_TIMEOUT = timedelta(milliseconds=1000)


@dataclass(frozen=True)
class MultiPurposeKey:
    """A key that acts as ``held`` keys when held and ``alone`` keys when tapped."""

    held: tuple[int, ...]
    alone: tuple[int, ...]
    alone_timeout: timedelta = DEFAULT_ALONE_TIMEOUT
    free_hold: bool = False


@dataclass(frozen=True)
class PressReleaseKey:
    """A key that runs actions on press, repeat and release."""

    skip_key_event: bool = False
    press: list[KeymapAction] = field(default_factory=list)
    repeat: list[KeymapAction] = field(default_factory=list)
    release: list[KeymapAction] = field(default_factory=list)


ModmapAction = Union[tuple[int, ...], MultiPurposeKey, PressReleaseKey]


def parse_keys(value: object) -> tuple[int, ...]:
    """Parse one key name or a list of key names into key codes."""
    if isinstance(value, str):
        return (parse_key(value),)
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return tuple(parse_key(item) for item in value)
    raise ValueError(f"expected a key name or a list of key names, got {value!r}")


def _parse_multi_purpose_key(value: object) -> MultiPurposeKey:
    if not isinstance(value, Mapping):
        raise ValueError(f"expected a map, got {value!r}")
    for required in ("held", "alone"):
        if required not in value:
            raise ValueError(f"missing field `{required}`")
    timeout = DEFAULT_ALONE_TIMEOUT
    if "alone_timeout_millis" in value:
        millis = value["alone_timeout_millis"]
        if isinstance(millis, bool) or not isinstance(millis, int) or millis < 0:
            raise ValueError(f"expected a non-negative integer for alone_timeout_millis, got {millis!r}")
        timeout = timedelta(milliseconds=millis)
    free_hold = value.get("free_hold", False)
    if not isinstance(free_hold, bool):
        raise ValueError(f"expected a boolean for free_hold, got {free_hold!r}")
    return MultiPurposeKey(
        held=parse_keys(value["held"]),
        alone=parse_keys(value["alone"]),
        alone_timeout=timeout,
        free_hold=free_hold,
    )


def _parse_press_release_key(value: object) -> PressReleaseKey:
    if not isinstance(value, Mapping):
        raise ValueError(f"expected a map, got {value!r}")
    skip = value.get("skip_key_event", False)
    if not isinstance(skip, bool):
        raise ValueError(f"expected a boolean for skip_key_event, got {skip!r}")
    actions = {name: parse_actions(value[name]) for name in ("press", "repeat", "release") if name in value}
    return PressReleaseKey(skip_key_event=skip, **actions)


def parse_modmap_action(value: object) -> ModmapAction:
    """Parse a modmap value: keys, a multi-purpose key, or press/release actions."""
    for parser in (parse_keys, _parse_multi_purpose_key, _parse_press_release_key):
        try:
            return parser(value)
        except ValueError:
            continue
    raise ValueError(f"data did not match any variant of untagged enum ModmapAction: {value!r}")


_MODMAP_FIELDS = ("name", "remap", "application", "window", "device", "mode")


def _optional(data: Mapping, key: str, parse: Any) -> Any:
    value = data.get(key)
    return None if value is None else parse(value)


@dataclass
class Modmap:
    """One modmap section of a configuration."""

    remap: dict[int, ModmapAction]
    name: str = ""
    application: OnlyOrNot | None = None
    window: OnlyOrNot | None = None
    device: DeviceFilter | None = None
    mode: tuple[str, ...] | None = None

    @classmethod
    def from_config(cls, data: object) -> Modmap:
        """Build from a configuration mapping."""
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a map for a modmap, got {data!r}")
        for name in data:
            if name not in _MODMAP_FIELDS:
                raise ValueError(f"unknown field `{name}` in modmap")
        if "remap" not in data:
            raise ValueError("missing field `remap`")
        table = data["remap"]
        if not isinstance(table, Mapping):
            raise ValueError(f"expected a map for `remap`, got {table!r}")
        name = data.get("name", "")
        if not isinstance(name, str):
            raise ValueError(f"expected a string for name, got {name!r}")
        return cls(
            remap={parse_key(key): parse_modmap_action(action) for key, action in table.items()},
            name=name,
            application=_optional(data, "application", OnlyOrNot.from_config),
            window=_optional(data, "window", OnlyOrNot.from_config),
            device=_optional(data, "device", DeviceFilter.from_config),
            mode=tuple(string_or_list(data["mode"])) if "mode" in data else None,
        )