"""Actions produced by the event handler and carried out by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Union

from keyshift.event import InputEvent, KeyEvent, RelativeEvent


@dataclass(frozen=True)
class EmitKey:
    """Emit a key event."""

    event: KeyEvent


@dataclass(frozen=True)
class EmitRelative:
    """Emit a relative event other than mouse movement."""

    event: RelativeEvent


@dataclass(frozen=True)
class MouseMovementBatch:
    """Emit mouse movements together, without synchronisation events between them."""

    events: tuple[RelativeEvent, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "events", tuple(self.events))


@dataclass(frozen=True)
class EmitInput:
    """Emit a raw input event of any type."""

    event: InputEvent


@dataclass(frozen=True)
class Command:
    """Run a command in the background."""

    args: tuple[str, ...]

    def __post_init__(self) -> None:
        args = tuple(self.args)
        if not args:
            raise ValueError("a command needs at least a program name")
        object.__setattr__(self, "args", args)


@dataclass(frozen=True)
class Delay:
    """Pause before the next action."""

    duration: timedelta

    def __post_init__(self) -> None:
        if self.duration < timedelta(0):
            raise ValueError("a delay cannot be negative")


Action = Union[EmitKey, EmitRelative, MouseMovementBatch, EmitInput, Command, Delay]