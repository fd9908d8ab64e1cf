from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace

from blast.constants import (
    BASIC_BLOCK_SPAWN_PROBABILITY,
    BOMB_RADIUS,
    GRID_COLS,
    GRID_ROWS,
    INITIAL_SECONDS,
    MAX_GENERATION_ATTEMPTS,
)
from blast.errors import InvalidConfigurationError


@dataclass(frozen=True)
class GameConfig:
    """
    Round configuration, validated when a session starts.

    Attributes:
        rows: board height in cells
        cols: board width in cells
        initial_seconds: countdown at the start of the round
        basic_block_spawn_probability: chance that a generated block is Basic;
            the rest is split evenly between Bomb and Stripe
        bomb_radius: Chebyshev radius cleared by a Bomb
        max_generation_attempts: full grids sampled before giving up
        await_settle: keep the interaction lock until the presentation layer
            reports the board as settled
    """
    rows: int = GRID_ROWS
    cols: int = GRID_COLS
    initial_seconds: float = INITIAL_SECONDS
    basic_block_spawn_probability: float = BASIC_BLOCK_SPAWN_PROBABILITY
    bomb_radius: int = BOMB_RADIUS
    max_generation_attempts: int = MAX_GENERATION_ATTEMPTS
    await_settle: bool = False

    def validate(self) -> "GameConfig":
        problems: list[str] = []
        for name in ("rows", "cols", "max_generation_attempts"):
            value = getattr(self, name)
            if not _is_int(value) or value < 1:
                problems.append(f"{name} must be an integer >= 1, got {value!r}")
        if not _is_int(self.bomb_radius) or self.bomb_radius < 0:
            problems.append(f"bomb_radius must be an integer >= 0, got {self.bomb_radius!r}")
        if not _is_real(self.initial_seconds) or not self.initial_seconds > 0:
            problems.append(f"initial_seconds must be > 0, got {self.initial_seconds!r}")
        probability = self.basic_block_spawn_probability
        if not _is_real(probability) or not 0.0 <= probability <= 1.0:
            problems.append(
                f"basic_block_spawn_probability must be within [0, 1], got {probability!r}"
            )
        if problems:
            raise InvalidConfigurationError("; ".join(problems))
        return self

    def with_overrides(self, **overrides) -> "GameConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidConfigurationError(f"Unknown config field(s): {', '.join(unknown)}")
        return replace(self, **overrides)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
