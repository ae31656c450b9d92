"""
Input Module
=============
Directional intent and the input sources that produce it.

Every source translates its own raw event stream into the same four-flag
DirectionalIntent. The simulation only ever sees the intent.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .components import Box


@dataclass
class DirectionalIntent:
    """Which directions the player wants to move this tick."""
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False

    def clear(self) -> None:
        self.up = False
        self.down = False
        self.left = False
        self.right = False

    def copy(self) -> 'DirectionalIntent':
        return DirectionalIntent(self.up, self.down, self.left, self.right)

    def vector(self) -> Tuple[int, int]:
        """Unit steps per axis; opposite directions cancel out."""
        dx = int(self.right) - int(self.left)
        dy = int(self.down) - int(self.up)
        return dx, dy


def _intent_towards(x: float, y: float, box: Box) -> DirectionalIntent:
    """Map a point outside the player's box to the directions leading to it."""
    intent = DirectionalIntent()
    if y < box.y:
        intent.up = True
    elif y > box.bottom:
        intent.down = True
    if x < box.x:
        intent.left = True
    elif x > box.right:
        intent.right = True
    return intent


class IntentProvider:
    """
    Narrow interface shared by all input sources.

    read() is called once at the start of each simulation tick with the
    player's current bounding box.
    """

    def read(self, player_box: Box) -> DirectionalIntent:
        raise NotImplementedError

    def reset(self) -> None:
        """Drop any held input (level start, restart)."""
        pass


# =============================================================================
# KEYBOARD
# =============================================================================

DIRECTION_KEYS: Dict[str, str] = {
    'ArrowUp': 'up',
    'ArrowDown': 'down',
    'ArrowLeft': 'left',
    'ArrowRight': 'right',
}


class KeyboardIntentProvider(IntentProvider):
    """Key-down / key-up driven input for platforms that report key releases."""

    def __init__(self):
        self.intent = DirectionalIntent()

    def key_down(self, key: str) -> None:
        direction = DIRECTION_KEYS.get(key)
        if direction is not None:
            setattr(self.intent, direction, True)

    def key_up(self, key: str) -> None:
        direction = DIRECTION_KEYS.get(key)
        if direction is not None:
            setattr(self.intent, direction, False)

    def read(self, player_box: Box) -> DirectionalIntent:
        return self.intent.copy()

    def reset(self) -> None:
        self.intent.clear()


# blessed key names for the arrow keys
TERMINAL_DIRECTION_KEYS: Dict[str, str] = {
    'KEY_UP': 'up',
    'KEY_DOWN': 'down',
    'KEY_LEFT': 'left',
    'KEY_RIGHT': 'right',
}

WASD_KEYS: Dict[str, str] = {
    'w': 'up',
    's': 'down',
    'a': 'left',
    'd': 'right',
}


class TerminalKeyboardProvider(IntentProvider):
    """
    Arrow-key and WASD input from blessed's inkey().

    Terminals never report key-up, so a key counts as held for a few
    frames after its last press. Auto-repeat keeps refreshing the timer.
    """

    def __init__(self, hold_duration: int = 15):
        self.keys_held: Dict[str, int] = {}  # direction -> frames remaining
        self.hold_duration = hold_duration

    def process_key(self, key) -> bool:
        """Handle one keystroke. Returns True if it was a direction key."""
        if not key:
            return False
        if key.is_sequence:
            direction = TERMINAL_DIRECTION_KEYS.get(key.name)
        else:
            direction = WASD_KEYS.get(key.lower())
        if direction is None:
            return False
        self.keys_held[direction] = self.hold_duration
        return True

    def update(self) -> None:
        """Update key hold timers (call once per frame)."""
        expired = []
        for direction, frames in self.keys_held.items():
            self.keys_held[direction] = frames - 1
            if self.keys_held[direction] <= 0:
                expired.append(direction)
        for direction in expired:
            del self.keys_held[direction]

    def read(self, player_box: Box) -> DirectionalIntent:
        return DirectionalIntent(
            up='up' in self.keys_held,
            down='down' in self.keys_held,
            left='left' in self.keys_held,
            right='right' in self.keys_held,
        )

    def reset(self) -> None:
        self.keys_held.clear()


# =============================================================================
# POINTER / TOUCH
# =============================================================================

class PointerIntentProvider(IntentProvider):
    """
    Steer towards a held pointer.

    The direction is recomputed every tick from the pointer position and
    the player's current box, so the player stops once it covers the
    pointer on an axis.
    """

    def __init__(self):
        self.target: Optional[Tuple[float, float]] = None

    def press(self, x: float, y: float) -> None:
        self.target = (x, y)

    def move(self, x: float, y: float) -> None:
        if self.target is not None:
            self.target = (x, y)

    def release(self) -> None:
        self.target = None

    def read(self, player_box: Box) -> DirectionalIntent:
        if self.target is None:
            return DirectionalIntent()
        return _intent_towards(self.target[0], self.target[1], player_box)

    def reset(self) -> None:
        self.target = None


class TouchIntentProvider(IntentProvider):
    """
    Touch input: the direction is fixed when the finger goes down,
    relative to where the player was at that moment, and held until
    the touch ends.
    """

    def __init__(self):
        self.intent = DirectionalIntent()

    def touch_start(self, x: float, y: float, player_box: Box) -> None:
        self.intent = _intent_towards(x, y, player_box)

    def touch_end(self) -> None:
        self.intent.clear()

    def read(self, player_box: Box) -> DirectionalIntent:
        return self.intent.copy()

    def reset(self) -> None:
        self.intent.clear()
