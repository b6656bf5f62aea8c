"""Loading configuration files into a single configuration."""

from __future__ import annotations

import re
import tomllib
from collections.abc import Hashable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from os import PathLike
from pathlib import Path

import yaml

from keyshift.keymap import Keymap, KeymapEntry, build_keymap_table
from keyshift.keys import parse_key
from keyshift.modmap import Modmap

_CONFIG_FIELDS = (
    "modmap",
    "keymap",
    "default_mode",
    "virtual_modifiers",
    "keypress_delay_ms",
    "shared",
    "enable_wheel",
)


class ConfigError(Exception):
    """Raised when a configuration cannot be parsed."""


class ConfigFiletype(Enum):
    """Formats a configuration file may be written in."""

    YAML = "yaml"
    TOML = "toml"


_BOOL_TAG = "tag:yaml.org,2002:bool"


class _ConfigLoader(yaml.SafeLoader):
    """YAML loader keeping mapping keys as written and only true/false as booleans."""

    def construct_mapping(self, node, deep=False):
        self.flatten_mapping(node)
        mapping = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
            else:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping",
                        node.start_mark,
                        "found unhashable key",
                        key_node.start_mark,
                    )
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


_ConfigLoader.yaml_implicit_resolvers = {
    first: [resolver for resolver in resolvers if resolver[0] != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_ConfigLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def _sequence(data: Mapping, key: str) -> list:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"expected a sequence for `{key}`, got {value!r}")
    return value


def _typed(data: Mapping, key: str, kind: type, default):
    value = data.get(key, default)
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ValueError(f"invalid value for `{key}`: {value!r}")
    return value


@dataclass
class Config:
    """A whole configuration: modmaps, keymaps and global settings."""

    modmap: list[Modmap] = field(default_factory=list)
    keymap: list[Keymap] = field(default_factory=list)
    default_mode: str = "default"
    virtual_modifiers: list[int] = field(default_factory=list)
    keypress_delay_ms: int = 0
    enable_wheel: bool = True
    modify_time: float | None = None
    keymap_table: dict[int, list[KeymapEntry]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: object) -> Config:
        """Build a configuration from parsed YAML or TOML data."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ConfigError(f"expected a mapping at the top level, got {data!r}")
        for name in data:
            if name not in _CONFIG_FIELDS:
                raise ConfigError(f"unknown field `{name}`")
        try:
            delay = _typed(data, "keypress_delay_ms", int, 0)
            if delay < 0:
                raise ValueError(f"invalid value for `keypress_delay_ms`: {delay!r}")
            modifiers = _sequence(data, "virtual_modifiers")
            return cls(
                modmap=[Modmap.from_config(item) for item in _sequence(data, "modmap")],
                keymap=[Keymap.from_config(item) for item in _sequence(data, "keymap")],
                default_mode=_typed(data, "default_mode", str, "default"),
                virtual_modifiers=[parse_key(key) for key in modifiers],
                keypress_delay_ms=delay,
                enable_wheel=_typed(data, "enable_wheel", bool, True),
            )
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc


def parse_config(text: str, filetype: ConfigFiletype | str = ConfigFiletype.YAML) -> Config:
    """Parse configuration text in the given format."""
    filetype = ConfigFiletype(filetype)
    if filetype is ConfigFiletype.TOML:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(str(exc)) from exc
    else:
        try:
            data = yaml.load(text, Loader=_ConfigLoader)
        except yaml.YAMLError as exc:
            raise ConfigError(str(exc)) from exc
    return Config.from_dict(data)


def _filetype_for(path: Path) -> ConfigFiletype:
    if path.suffix[1:].lower() == "toml":
        return ConfigFiletype.TOML
    return ConfigFiletype.YAML


def _load(path: Path) -> Config:
    return parse_config(path.read_text(encoding="utf-8"), _filetype_for(path))


def load_configs(filenames: Iterable[str | PathLike]) -> Config:
    """Load and merge configuration files.

    Settings come from the first file; modmaps, keymaps and virtual modifiers
    of the later files are appended. Reading errors raise ``OSError``.
    """
    paths = [Path(name) for name in filenames]
    if not paths:
        raise ConfigError("no configuration file was given")
    config = _load(paths[0])
    for path in paths[1:]:
        extra = _load(path)
        config.modmap.extend(extra.modmap)
        config.keymap.extend(extra.keymap)
        config.virtual_modifiers.extend(extra.virtual_modifiers)
    try:
        config.modify_time = paths[-1].stat().st_mtime
    except OSError:
        config.modify_time = None
    config.keymap_table = build_keymap_table(config.keymap)
    return config