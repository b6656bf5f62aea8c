from datetime import timedelta

import pytest

from keyshift.action import Command, Delay, EmitInput, EmitKey, EmitRelative, MouseMovementBatch
from keyshift.event import EV_KEY, InputEvent, KeyEvent, KeyValue, RelativeEvent
from keyshift.keys import KEY_CODES


def test_command_args_become_a_tuple():
    command = Command(["/bin/sh", "-c", "true"])
    assert command.args == ("/bin/sh", "-c", "true")
    assert command == Command(("/bin/sh", "-c", "true"))


def test_empty_command_is_rejected():
    with pytest.raises(ValueError):
        Command([])


def test_delay_keeps_duration():
    assert Delay(timedelta(milliseconds=20)).duration == timedelta(milliseconds=20)


def test_negative_delay_is_rejected():
    with pytest.raises(ValueError):
        Delay(timedelta(milliseconds=-1))


def test_mouse_movement_batch_is_hashable_tuple():
    moves = [RelativeEvent(0, 3), RelativeEvent(1, -2)]
    batch = MouseMovementBatch(moves)
    assert batch.events == tuple(moves)
    assert hash(batch) == hash(MouseMovementBatch(tuple(moves)))


def test_emit_key_carries_event():
    action = EmitKey(KeyEvent(KEY_CODES["KEY_A"], KeyValue.PRESS))
    assert action.event.code == KEY_CODES["KEY_A"]
    assert action.event.value == 1


def test_emit_relative_and_input_compare_by_value():
    assert EmitRelative(RelativeEvent(8, 1)) == EmitRelative(RelativeEvent(8, 1))
    assert EmitInput(InputEvent(EV_KEY, 30, 1)) != EmitInput(InputEvent(EV_KEY, 30, 0))