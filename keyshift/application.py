"""Matching of application and window names against configured filters."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class MatcherKind(Enum):
    """How an application matcher compares names."""

    LITERAL = "literal"  # the whole "class.name"
    NAME = "name"  # the part after the last dot
    REGEX = "regex"  # /regex/


@dataclass(frozen=True)
class ApplicationMatcher:
    """One entry of an ``only`` or ``not`` list."""

    kind: MatcherKind
    pattern: str
    _regex: re.Pattern[str] | None = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.kind is MatcherKind.REGEX:
            try:
                compiled = re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"invalid application name regex: {exc}") from exc
            object.__setattr__(self, "_regex", compiled)

    def matches(self, app: str) -> bool:
        """Return whether ``app`` is matched."""
        match self.kind:
            case MatcherKind.LITERAL:
                return self.pattern == app
            case MatcherKind.NAME:
                return app.rpartition(".")[2] == self.pattern
            case MatcherKind.REGEX:
                return self._regex.search(app) is not None
        return False


def slash_unescape(text: str) -> str:
    """Turn ``/regex/`` into the bare regex, unescaping ``\\/``."""
    result: list[str] = []
    escaping = False
    finished = False
    for char in text[1:]:
        if finished:
            raise ValueError("Unexpected trailing string after closing / in application name regex")
        if escaping:
            escaping = False
            if char != "/":
                result.append("\\")
            result.append(char)
        elif char == "/":
            finished = True
        elif char == "\\":
            escaping = True
        else:
            result.append(char)
    if not finished:
        raise ValueError("Missing closing / in application name regex")
    return "".join(result)


def parse_matcher(text: str) -> ApplicationMatcher:
    """Parse a matcher: ``/regex/``, ``class.name`` or a bare ``name``."""
    if text.startswith("/"):
        return ApplicationMatcher(MatcherKind.REGEX, slash_unescape(text))
    if "." in text:
        return ApplicationMatcher(MatcherKind.LITERAL, text)
    return ApplicationMatcher(MatcherKind.NAME, text)


def string_or_list(value: object) -> list[str]:
    """Accept either one string or a list of strings, returning a list."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)) and all(isinstance(item, str) for item in value):
        return list(value)
    raise ValueError(f"expected a string or a list of strings, got {value!r}")


def _check_fields(data: object, allowed: tuple[str, ...]) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a mapping, got {data!r}")
    unknown = [name for name in data if name not in allowed]
    if unknown:
        expected = " or ".join(f"`{name}`" for name in allowed)
        raise ValueError(f"unknown field `{unknown[0]}`, expected {expected}")
    return data


@dataclass(frozen=True)
class OnlyOrNot:
    """Matchers that an application must, or must not, satisfy."""

    only: tuple[ApplicationMatcher, ...] | None = None
    not_: tuple[ApplicationMatcher, ...] | None = None

    @classmethod
    def from_config(cls, data: object) -> OnlyOrNot:
        """Build from a configuration mapping with ``only`` and/or ``not``."""
        fields = _check_fields(data, ("only", "not"))

        def matchers(key: str) -> tuple[ApplicationMatcher, ...] | None:
            if key not in fields:
                return None
            return tuple(parse_matcher(text) for text in string_or_list(fields[key]))

        return cls(only=matchers("only"), not_=matchers("not"))