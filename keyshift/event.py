"""Events read from input devices, in the form the event handler consumes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from keyshift.device import InputDeviceInfo

EV_SYN = 0
EV_KEY = 1
EV_REL = 2


class KeyValue(IntEnum):
    """The value of a key event."""

    RELEASE = 0
    PRESS = 1
    REPEAT = 2


@dataclass(frozen=True)
class InputEvent:
    """A raw input event: type, code and value."""

    type: int
    code: int
    value: int


@dataclass(frozen=True)
class KeyEvent:
    """A key being pressed, released or repeated."""

    key: int
    value: KeyValue

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "value", KeyValue(self.value))
        except ValueError:
            raise ValueError(f"invalid key event value: {self.value!r}") from None

    @classmethod
    def from_raw(cls, code: int, value: int) -> KeyEvent:
        """Build from a raw key code and event value (0, 1 or 2)."""
        return cls(code, value)

    @property
    def code(self) -> int:
        return self.key


@dataclass(frozen=True)
class RelativeEvent:
    """A relative axis movement, such as mouse motion or scrolling."""

    code: int
    value: int


@dataclass(frozen=True)
class DeviceKeyEvent:
    """A key event together with the device it came from."""

    device: InputDeviceInfo
    event: KeyEvent


@dataclass(frozen=True)
class DeviceRelativeEvent:
    """A relative event together with the device it came from."""

    device: InputDeviceInfo
    event: RelativeEvent


@dataclass(frozen=True)
class OtherEvent:
    """Any other raw input event, passed through untouched."""

    event: InputEvent


@dataclass(frozen=True)
class OverrideTimeout:
    """The timer of a nested override ran out."""


Event = Union[DeviceKeyEvent, DeviceRelativeEvent, OtherEvent, OverrideTimeout]


def make_event(device: InputDeviceInfo, input_event: InputEvent) -> Event:
    """Turn a raw input event from ``device`` into an event for the handler."""
    if input_event.type == EV_KEY:
        return DeviceKeyEvent(device, KeyEvent.from_raw(input_event.code, input_event.value))
    if input_event.type == EV_REL:
        return DeviceRelativeEvent(device, RelativeEvent(input_event.code, input_event.value))
    return OtherEvent(input_event)