import logging
from typing import Iterable, List, Optional, Tuple

from esper import World

from blast.components.block import Block
from blast.components.board import Board
from blast.components.board_position import BoardPosition
from blast.constants import BASIC_BLOCK_SPAWN_PROBABILITY, GRID_COLS, GRID_ROWS, MAX_GENERATION_ATTEMPTS
from blast.errors import BoardGenerationError
from blast.events.bus import EVENT_BOARD_GENERATED, EVENT_BOARD_REFILLED, EventBus
from blast.factories.blocks import BlockFactory
from blast.systems.board_ops import (
    Position,
    board_snapshot,
    has_possible_move,
    refill_blocks,
)

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the board entity and its cell entities.

    Every cell is an entity carrying a BoardPosition and a Block. The grid is
    only ever generated whole; after that single cells change through refill.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rows: int = GRID_ROWS,
        cols: int = GRID_COLS,
        *,
        factory: Optional[BlockFactory] = None,
        basic_probability: float = BASIC_BLOCK_SPAWN_PROBABILITY,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
    ):
        self.world = world
        self.event_bus = event_bus
        if factory is None:
            factory = BlockFactory(getattr(world, "random", None))
        self.factory = factory
        self.basic_probability = basic_probability
        self.board_entity: Optional[int] = None
        self.rebuild(rows, cols, basic_probability=basic_probability, max_attempts=max_attempts)

    def rebuild(
        self,
        rows: int,
        cols: int,
        *,
        basic_probability: float,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
    ) -> int:
        """Replace the whole board with a freshly generated playable grid.

        The current board is left untouched when no playable grid is found.
        Returns the number of grids sampled.
        """
        layout, attempts = self.generate(rows, cols, basic_probability, max_attempts=max_attempts)
        self._teardown()
        self.basic_probability = basic_probability
        self.board_entity = self.world.create_entity(Board(rows=rows, cols=cols))
        for r in range(rows):
            for c in range(cols):
                self.world.create_entity(BoardPosition(row=r, col=c), layout[r][c])
        self.event_bus.emit(
            EVENT_BOARD_GENERATED,
            rows=rows,
            cols=cols,
            attempts=attempts,
            snapshot=board_snapshot(self.world),
        )
        return attempts

    def generate(
        self,
        rows: int,
        cols: int,
        basic_probability: float,
        *,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
    ) -> Tuple[List[List[Block]], int]:
        """Sample full grids until one has a possible move."""
        for attempt in range(1, max_attempts + 1):
            layout = self.factory.generate_grid(rows, cols, basic_probability)
            blocks = {(r, c): layout[r][c] for r in range(rows) for c in range(cols)}
            if has_possible_move(self.world, blocks=blocks):
                logger.debug("Generated %dx%d board after %d attempt(s)", rows, cols, attempt)
                return layout, attempt
        raise BoardGenerationError(
            f"Unable to generate a {rows}x{cols} board with a possible move "
            f"in {max_attempts} attempts (basic probability {basic_probability})"
        )

    def refill(self, positions: Iterable[Position]) -> List[Position]:
        refilled = refill_blocks(self.world, positions, self.factory, self.basic_probability)
        if refilled:
            self.event_bus.emit(EVENT_BOARD_REFILLED, positions=refilled)
        return refilled

    @property
    def board(self) -> Board:
        if self.board_entity is None:
            raise RuntimeError("Board not found")
        return self.world.component_for_entity(self.board_entity, Board)

    def _teardown(self) -> None:
        for entity, _ in list(self.world.get_component(BoardPosition)):
            self.world.delete_entity(entity, immediate=True)
        for entity, _ in list(self.world.get_component(Board)):
            self.world.delete_entity(entity, immediate=True)
        self.board_entity = None
