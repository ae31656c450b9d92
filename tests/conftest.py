import random

import pytest
from blessed.keyboard import Keystroke

from pulka.components import Playfield
from pulka.config import GameConfig
from pulka.simulation import SimulationContext


class FakeTerminal:
    """Just enough of blessed.Terminal for the renderer and the game loop."""

    normal = '<n>'
    home = '<home>'
    clear = '<clear>'

    def __init__(self, width=80, height=24):
        self.width = width
        self.height = height
        self.pending = []

    def move_xy(self, x, y):
        return f'<{x},{y}>'

    def color(self, n):
        return f'<c{n}>'

    def inkey(self, timeout=None):
        if self.pending:
            return self.pending.pop(0)
        return Keystroke('')


def char_key(ch):
    return Keystroke(ch)


def named_key(name, code=1000):
    return Keystroke('\x1b[?', code=code, name=name)


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def ctx(config):
    return SimulationContext(config, Playfield(800, 600), 1000, random.Random(7))


@pytest.fixture
def term():
    return FakeTerminal()
