from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Set, Tuple

from esper import World

from blast.components.block import Block, BlockKind
from blast.components.board import Board
from blast.components.board_position import BoardPosition
from blast.constants import BOMB_RADIUS, MIN_MATCH_SIZE
from blast.factories.blocks import BlockFactory

Position = Tuple[int, int]
Snapshot = Tuple[Tuple[Block, ...], ...]

# Up, down, left, right. No diagonals.
NEIGHBOR_OFFSETS: Tuple[Position, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def board_dimensions(world: World) -> Tuple[int, int] | None:
    for _, board in world.get_component(Board):
        return board.rows, board.cols
    return None


def require_dimensions(world: World) -> Tuple[int, int]:
    dims = board_dimensions(world)
    if dims is None:
        raise RuntimeError("Board not found")
    return dims


def in_bounds(world: World, position: Position) -> bool:
    for _, board in world.get_component(Board):
        return board.contains(*position)
    return False


def get_entity_at(world: World, row: int, col: int) -> int | None:
    for entity, position in world.get_component(BoardPosition):
        if position.row == row and position.col == col:
            return entity
    return None


def position_entity_map(world: World) -> Dict[Position, int]:
    return {(pos.row, pos.col): entity for entity, pos in world.get_component(BoardPosition)}


def block_map(world: World) -> Dict[Position, Block]:
    """Return mapping of cell positions to the block they hold."""
    return {
        (position.row, position.col): block
        for _, (position, block) in world.get_components(BoardPosition, Block)
    }


def block_at(world: World, row: int, col: int) -> Block | None:
    entity = get_entity_at(world, row, col)
    if entity is None:
        return None
    try:
        return world.component_for_entity(entity, Block)
    except KeyError:
        return None


def board_snapshot(world: World) -> Snapshot:
    """Immutable row-major copy of the grid for presentation callers."""
    rows, cols = require_dimensions(world)
    blocks = block_map(world)
    return tuple(tuple(blocks[(row, col)] for col in range(cols)) for row in range(rows))


def apply_layout(world: World, layout: Sequence[Sequence[Block]]) -> None:
    """Overwrite every cell with the block at the same index of ``layout``."""
    rows, cols = require_dimensions(world)
    if len(layout) != rows or any(len(line) != cols for line in layout):
        raise ValueError(f"Layout must be {rows}x{cols}")
    for (row, col), entity in position_entity_map(world).items():
        world.add_component(entity, layout[row][col])


def connected_region(
    world: World,
    root: Position,
    *,
    blocks: Dict[Position, Block] | None = None,
) -> Set[Position]:
    """Collect every cell 4-connected to ``root`` through blocks of the same type.

    Uses an explicit stack so large boards never hit the recursion limit.
    """
    tile_map = blocks if blocks is not None else block_map(world)
    root_block = tile_map.get(root)
    if root_block is None:
        return set()
    region: Set[Position] = {root}
    stack: List[Position] = [root]
    while stack:
        row, col = stack.pop()
        for d_row, d_col in NEIGHBOR_OFFSETS:
            neighbor = (row + d_row, col + d_col)
            if neighbor in region:
                continue
            block = tile_map.get(neighbor)
            if block is None or not block.same_type(root_block):
                continue
            region.add(neighbor)
            stack.append(neighbor)
    return region


def row_region(world: World, row: int) -> Set[Position]:
    rows, cols = require_dimensions(world)
    if not 0 <= row < rows:
        return set()
    return {(row, col) for col in range(cols)}


def area_region(world: World, center: Position, radius: int) -> Set[Position]:
    """Cells within Chebyshev distance ``radius`` of ``center``, clipped per axis."""
    rows, cols = require_dimensions(world)
    row, col = center
    first_row = max(0, row - radius)
    last_row = min(rows - 1, row + radius)
    first_col = max(0, col - radius)
    last_col = min(cols - 1, col + radius)
    return {
        (r, c)
        for r in range(first_row, last_row + 1)
        for c in range(first_col, last_col + 1)
    }


def resolve_region(world: World, origin: Position, *, bomb_radius: int = BOMB_RADIUS) -> Set[Position]:
    """Region a click on ``origin`` affects, chosen by the clicked block's kind.

    Basic regions smaller than the minimum match are returned as-is; callers
    decide whether they resolve.
    """
    block = block_at(world, *origin)
    if block is None:
        return set()
    if block.kind is BlockKind.BASIC:
        return connected_region(world, origin)
    if block.kind is BlockKind.BOMB:
        return area_region(world, origin, bomb_radius)
    return row_region(world, origin[0])


def _is_actionable(tile_map: Dict[Position, Block], position: Position) -> bool:
    block = tile_map[position]
    if not block.is_basic:
        return True
    # A connected region has at least two cells exactly when a neighbour matches.
    row, col = position
    for d_row, d_col in NEIGHBOR_OFFSETS:
        neighbor = tile_map.get((row + d_row, col + d_col))
        if neighbor is not None and neighbor.same_type(block):
            return True
    return False


def has_possible_move(world: World, *, blocks: Dict[Position, Block] | None = None) -> bool:
    """Return True as soon as one actionable cell is found."""
    tile_map = blocks if blocks is not None else block_map(world)
    return any(_is_actionable(tile_map, position) for position in tile_map)


def find_possible_moves(world: World) -> List[Position]:
    """Enumerate every actionable cell in row-major order."""
    tile_map = block_map(world)
    return [position for position in sorted(tile_map) if _is_actionable(tile_map, position)]


def is_resolvable(region: Set[Position], kind: BlockKind) -> bool:
    if kind is BlockKind.BASIC:
        return len(region) >= MIN_MATCH_SIZE
    return bool(region)


def refill_blocks(
    world: World,
    positions: Iterable[Position],
    factory: BlockFactory,
    basic_probability: float,
) -> List[Position]:
    """Swap a freshly generated block into every listed cell.

    New blocks may form matches straight away; the next interaction finds them.
    """
    position_to_entity = position_entity_map(world)
    refilled: List[Position] = []
    for position in sorted(set(positions)):
        entity = position_to_entity.get(position)
        if entity is None:
            continue
        world.add_component(entity, factory.generate(basic_probability))
        refilled.append(position)
    return refilled
