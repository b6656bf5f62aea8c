"""Filters selecting the input devices a modmap or keymap applies to."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from keyshift.application import string_or_list


@dataclass(frozen=True)
class DeviceFilter:
    """Device filters that must, or must not, match."""

    only: tuple[str, ...] | None = None
    not_: tuple[str, ...] | None = None

    @classmethod
    def from_config(cls, data: object) -> DeviceFilter:
        """Build from a configuration mapping with ``only`` and/or ``not``."""
        if not isinstance(data, Mapping):
            raise ValueError(f"expected a mapping, got {data!r}")
        for name in data:
            if name not in ("only", "not"):
                raise ValueError(f"unknown field `{name}`, expected `only` or `not`")

        def filters(key: str) -> tuple[str, ...] | None:
            if key not in data:
                return None
            return tuple(string_or_list(data[key]))

        return cls(only=filters("only"), not_=filters("not"))