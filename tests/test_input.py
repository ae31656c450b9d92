import pytest

from conftest import char_key, named_key

from pulka.components import Box
from pulka.input import (
    DirectionalIntent, KeyboardIntentProvider, PointerIntentProvider,
    TerminalKeyboardProvider, TouchIntentProvider,
)

PLAYER_BOX = Box(50, 50, 20.8, 36)


def test_intent_vector():
    assert DirectionalIntent().vector() == (0, 0)
    assert DirectionalIntent(up=True, right=True).vector() == (1, -1)
    assert DirectionalIntent(left=True, right=True, down=True).vector() == (0, 1)


def test_keyboard_down_and_up():
    provider = KeyboardIntentProvider()
    provider.key_down('ArrowUp')
    provider.key_down('ArrowRight')
    assert provider.read(PLAYER_BOX) == DirectionalIntent(up=True, right=True)

    provider.key_up('ArrowUp')
    assert provider.read(PLAYER_BOX) == DirectionalIntent(right=True)


def test_keyboard_ignores_unknown_keys():
    provider = KeyboardIntentProvider()
    provider.key_down('Enter')
    provider.key_up('x')
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


def test_keyboard_read_returns_snapshot():
    provider = KeyboardIntentProvider()
    provider.key_down('ArrowDown')
    snapshot = provider.read(PLAYER_BOX)
    provider.key_up('ArrowDown')
    assert snapshot.down


def test_terminal_keys_are_held_for_a_while():
    provider = TerminalKeyboardProvider(hold_duration=3)
    assert provider.process_key(named_key('KEY_LEFT'))
    assert provider.read(PLAYER_BOX) == DirectionalIntent(left=True)

    provider.update()
    provider.update()
    assert provider.read(PLAYER_BOX).left
    provider.update()
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


def test_terminal_repeat_refreshes_hold():
    provider = TerminalKeyboardProvider(hold_duration=2)
    provider.process_key(named_key('KEY_DOWN'))
    provider.update()
    provider.process_key(named_key('KEY_DOWN'))
    provider.update()
    assert provider.read(PLAYER_BOX).down


def test_terminal_ignores_other_keys():
    provider = TerminalKeyboardProvider()
    assert not provider.process_key(char_key('x'))
    assert not provider.process_key(named_key('KEY_ENTER'))
    assert not provider.process_key(char_key(''))
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


@pytest.mark.parametrize('ch, direction', [
    ('w', 'up'), ('a', 'left'), ('s', 'down'), ('d', 'right'), ('D', 'right'),
])
def test_terminal_wasd_keys(ch, direction):
    provider = TerminalKeyboardProvider()
    assert provider.process_key(char_key(ch))
    assert getattr(provider.read(PLAYER_BOX), direction)


def test_terminal_reset_drops_held_keys():
    provider = TerminalKeyboardProvider()
    provider.process_key(named_key('KEY_UP'))
    provider.reset()
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


def test_pointer_steers_towards_target():
    provider = PointerIntentProvider()
    assert provider.read(PLAYER_BOX) == DirectionalIntent()

    provider.press(400, 10)
    assert provider.read(PLAYER_BOX) == DirectionalIntent(up=True, right=True)

    # Inside the box on both axes: no movement
    provider.move(60, 60)
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


def test_pointer_recomputes_against_current_box():
    provider = PointerIntentProvider()
    provider.press(100, 60)
    assert provider.read(PLAYER_BOX).right
    assert not provider.read(Box(90, 50, 20.8, 36)).right


def test_pointer_move_without_press_is_ignored():
    provider = PointerIntentProvider()
    provider.move(400, 400)
    assert provider.read(PLAYER_BOX) == DirectionalIntent()
    provider.press(400, 400)
    provider.release()
    assert provider.read(PLAYER_BOX) == DirectionalIntent()


def test_touch_direction_latches_until_release():
    provider = TouchIntentProvider()
    provider.touch_start(10, 200, PLAYER_BOX)
    expected = DirectionalIntent(down=True, left=True)
    assert provider.read(PLAYER_BOX) == expected
    # Still held even once the player has moved past the touch point
    assert provider.read(Box(0, 300, 20.8, 36)) == expected

    provider.touch_end()
    assert provider.read(PLAYER_BOX) == DirectionalIntent()
