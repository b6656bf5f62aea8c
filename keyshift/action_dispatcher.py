"""Carrying out actions: emitting events to the output device and running commands."""

from __future__ import annotations

import logging
import subprocess
import threading
import time
from typing import Protocol

from keyshift.action import (
    Action,
    Command,
    Delay,
    EmitInput,
    EmitKey,
    EmitRelative,
    MouseMovementBatch,
)
from keyshift.event import EV_KEY, EV_REL, InputEvent
from keyshift.keys import UnknownKeyError, key_name

logger = logging.getLogger(__name__)


class OutputDevice(Protocol):
    """A device that accepts input events; each call ends with one synchronisation."""

    def emit(self, events: list[InputEvent]) -> None: ...


def _describe_key(code: int) -> str:
    try:
        return key_name(code)
    except UnknownKeyError:
        return f"KeyCode({code})"


class ActionDispatcher:
    """Executes the actions produced by the event handler."""

    def __init__(self, device: OutputDevice) -> None:
        self._device = device

    def on_action(self, action: Action) -> None:
        """Carry out one action. Errors from the output device propagate."""
        match action:
            case EmitKey(event=event):
                self._send([InputEvent(EV_KEY, event.code, int(event.value))])
            case EmitRelative(event=event):
                self._send([InputEvent(EV_REL, event.code, event.value)])
            case MouseMovementBatch(events=events):
                # Movements on several axes must reach the system without a
                # synchronisation event between them, or the cursor moves differently.
                self._send([InputEvent(EV_REL, event.code, event.value) for event in events])
            case EmitInput(event=event):
                self._send([event])
            case Command(args=args):
                self._run_command(args)
            case Delay(duration=duration):
                time.sleep(duration.total_seconds())
            case _:
                raise TypeError(f"unsupported action: {action!r}")

    def _send(self, events: list[InputEvent]) -> None:
        for event in events:
            if event.type == EV_KEY:
                logger.debug("%s: %s", event.value, _describe_key(event.code))
        self._device.emit(events)

    def _run_command(self, args: tuple[str, ...]) -> None:
        logger.debug("Running command: %r", list(args))
        try:
            process = subprocess.Popen(
                list(args),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as exc:
            logger.error("Error running command: %r", exc)
            return
        logger.debug("Process started: %r, pid %s", list(args), process.pid)
        # Reap the child in the background so it never lingers as a zombie.
        threading.Thread(target=process.wait, daemon=True).start()