from __future__ import annotations

import random
from typing import List, Protocol

from blast.components.block import Block, BlockColor
from blast.constants import BASIC_COLOR_COUNT


class RandomSource(Protocol):
    """Subset of ``random.Random`` the factory draws from."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...


class BlockFactory:
    """Draws blocks from the configured Basic/Bomb/Stripe split.

    A single random source is shared across calls so seeded runs are
    reproducible.
    """

    def __init__(self, rng: RandomSource | None = None):
        self.rng: RandomSource = rng or random.Random()

    def random_color(self) -> BlockColor:
        return BlockColor(self.rng.randint(1, BASIC_COLOR_COUNT))

    def generate(self, basic_probability: float) -> Block:
        value = self.rng.random()
        if value < basic_probability:
            return Block.basic(self.random_color())
        if value < basic_probability + (1 - basic_probability) / 2:
            return Block.bomb()
        return Block.stripe()

    def generate_grid(self, rows: int, cols: int, basic_probability: float) -> List[List[Block]]:
        return [
            [self.generate(basic_probability) for _ in range(cols)]
            for _ in range(rows)
        ]
