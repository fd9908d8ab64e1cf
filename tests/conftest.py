import sys, os
import random
from itertools import cycle

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from blast.events.bus import EventBus
from blast.world import create_world


class ScriptedRandom:
    """Replays fixed draws so board contents are predictable."""

    def __init__(self, values=(0.0,), ints=(1,)):
        self._values = cycle(values)
        self._ints = cycle(ints)

    def random(self) -> float:
        return next(self._values)

    def randint(self, a: int, b: int) -> int:
        value = next(self._ints)
        assert a <= value <= b
        return value


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def world(rng):
    return create_world(rng=rng)


@pytest.fixture
def scripted_random():
    return ScriptedRandom


def parse_layout(lines):
    """Build a block grid from strings: A-F are Basic colors, X is a Bomb, S a Stripe."""
    from blast.components.block import Block

    def _block(char):
        if char == "X":
            return Block.bomb()
        if char == "S":
            return Block.stripe()
        return Block.basic("ABCDEF".index(char) + 1)

    return [[_block(char) for char in line] for line in lines]


@pytest.fixture
def board_from(world, bus):
    """Create a board sized to ``lines`` and overwrite it with that layout."""
    from blast.systems.board import BoardSystem
    from blast.systems.board_ops import apply_layout

    def _build(lines):
        system = BoardSystem(world, bus, rows=len(lines), cols=len(lines[0]))
        apply_layout(world, parse_layout(lines))
        return system

    return _build


@pytest.fixture
def layout():
    return parse_layout
