import random

import pytest

from blast.components.block import Block, BlockKind
from blast.factories.blocks import BlockFactory
from blast.systems.board_ops import (
    apply_layout,
    area_region,
    block_at,
    block_map,
    board_snapshot,
    connected_region,
    find_possible_moves,
    has_possible_move,
    in_bounds,
    refill_blocks,
    resolve_region,
    row_region,
)


def test_connected_region_of_uniform_board_is_everything(world, board_from):
    board_from(["AAA", "AAA", "AAA"])
    region = connected_region(world, (1, 1))
    assert region == {(r, c) for r in range(3) for c in range(3)}


def test_connected_region_ignores_diagonals(world, board_from):
    board_from([
        "AB",
        "BA",
    ])
    assert connected_region(world, (0, 0)) == {(0, 0)}
    assert connected_region(world, (1, 1)) == {(1, 1)}


def test_connected_region_follows_winding_path(world, board_from):
    board_from([
        "AAAB",
        "BBAB",
        "AAAB",
        "ABBB",
    ])
    region = connected_region(world, (0, 0))
    assert region == {(0, 0), (0, 1), (0, 2), (1, 2), (2, 2), (2, 1), (2, 0), (3, 0)}
    assert connected_region(world, (0, 3)) == {(0, 3), (1, 3), (2, 3), (3, 3), (3, 2), (3, 1)}


def test_connected_region_matches_special_blocks_by_kind(world, board_from):
    board_from(["XXS", "AXS"])
    assert connected_region(world, (0, 0)) == {(0, 0), (0, 1), (1, 1)}
    assert connected_region(world, (0, 2)) == {(0, 2), (1, 2)}


def test_connected_region_properties_on_random_boards(world, bus, board_from):
    board_from(["AB" * 4] * 8)
    rng = random.Random(99)
    for _ in range(20):
        layout = [[Block.basic(rng.randint(1, 2)) for _ in range(8)] for _ in range(8)]
        apply_layout(world, layout)
        blocks = block_map(world)
        for root in blocks:
            region = connected_region(world, root, blocks=blocks)
            assert root in region
            assert all(blocks[pos].same_type(blocks[root]) for pos in region)
            for row, col in region:
                for neighbor in ((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1)):
                    if neighbor in blocks and blocks[neighbor].same_type(blocks[root]):
                        assert neighbor in region


def test_connected_region_handles_large_board_without_recursion(world, bus):
    from blast.systems.board import BoardSystem

    BoardSystem(world, bus, rows=120, cols=120)
    apply_layout(world, [[Block.basic(1)] * 120 for _ in range(120)])
    assert len(connected_region(world, (0, 0))) == 120 * 120


def test_row_region_covers_whole_row(world, board_from):
    board_from(["ABCD", "EFAB", "CDEF"])
    region = row_region(world, 1)
    assert region == {(1, 0), (1, 1), (1, 2), (1, 3)}
    assert row_region(world, 3) == set()


@pytest.mark.parametrize("radius", [0, 1, 2])
def test_area_region_is_clipped_chebyshev_ball(world, board_from, radius):
    board_from(["ABCDE", "BCDEA", "CDEAB", "DEABC"])
    for row in range(4):
        for col in range(5):
            region = area_region(world, (row, col), radius)
            assert 1 <= len(region) <= (2 * radius + 1) ** 2
            assert (row, col) in region
            for r, c in region:
                assert 0 <= r < 4 and 0 <= c < 5
                assert max(abs(r - row), abs(c - col)) <= radius
            expected = {
                (r, c)
                for r in range(4)
                for c in range(5)
                if max(abs(r - row), abs(c - col)) <= radius
            }
            assert region == expected


def test_area_region_on_non_square_board_uses_row_and_col_bounds(world, board_from):
    board_from(["ABABABAB", "BABABABA"])
    assert area_region(world, (1, 6), 1) == {(0, 5), (0, 6), (0, 7), (1, 5), (1, 6), (1, 7)}


def test_area_region_on_single_cell(world, board_from):
    board_from(["X"])
    assert area_region(world, (0, 0), 1) == {(0, 0)}
    assert has_possible_move(world)


def test_resolve_region_dispatches_on_block_kind(world, board_from):
    board_from([
        "AAB",
        "CXS",
        "DEF",
    ])
    assert resolve_region(world, (0, 0)) == {(0, 0), (0, 1)}
    assert resolve_region(world, (1, 1)) == {(r, c) for r in range(3) for c in range(3)}
    assert resolve_region(world, (1, 1), bomb_radius=0) == {(1, 1)}
    assert resolve_region(world, (1, 2)) == {(1, 0), (1, 1), (1, 2)}
    assert resolve_region(world, (2, 2)) == {(2, 2)}


def test_has_possible_move_false_for_checkerboard(world, board_from):
    board_from(["ABA", "BAB", "ABA"])
    assert not has_possible_move(world)
    assert find_possible_moves(world) == []


def test_has_possible_move_true_for_single_pair(world, board_from):
    board_from(["ABC", "DEF", "ABB"])
    assert has_possible_move(world)
    assert find_possible_moves(world) == [(2, 1), (2, 2)]


def test_any_special_block_is_a_possible_move(world, board_from):
    board_from(["ABC", "DSF", "ABC"])
    assert has_possible_move(world)
    assert find_possible_moves(world) == [(1, 1)]


def test_refill_replaces_only_listed_cells(world, board_from, scripted_random):
    board_from(["AAA", "BBB"])
    factory = BlockFactory(scripted_random(values=(0.0,), ints=(6,)))
    refilled = refill_blocks(world, [(0, 0), (1, 2), (0, 0)], factory, 1.0)
    assert refilled == [(0, 0), (1, 2)]
    assert block_at(world, 0, 0) == Block.basic(6)
    assert block_at(world, 1, 2) == Block.basic(6)
    assert block_at(world, 0, 1) == Block.basic(1)
    assert block_at(world, 1, 1) == Block.basic(2)


def test_refill_distribution_tracks_basic_probability(world, board_from):
    board_from(["ABCDEFAB"] * 8)
    factory = BlockFactory(random.Random(77))
    positions = list(block_map(world))
    basic = total = 0
    for _ in range(150):
        refill_blocks(world, positions, factory, 0.6)
        for block in block_map(world).values():
            total += 1
            basic += block.kind is BlockKind.BASIC
    assert basic / total == pytest.approx(0.6, abs=0.02)


def test_snapshot_is_row_major_and_immutable(world, board_from):
    board_from(["AB", "XS"])
    snapshot = board_snapshot(world)
    assert snapshot == ((Block.basic(1), Block.basic(2)), (Block.bomb(), Block.stripe()))
    assert isinstance(snapshot, tuple) and isinstance(snapshot[0], tuple)


def test_apply_layout_rejects_wrong_shape(world, board_from, layout):
    board_from(["AB", "BA"])
    with pytest.raises(ValueError):
        apply_layout(world, layout(["ABC", "BAC"]))


def test_in_bounds(world, board_from):
    board_from(["AB", "BA", "AB"])
    assert in_bounds(world, (2, 1))
    assert not in_bounds(world, (3, 0))
    assert not in_bounds(world, (0, 2))
    assert not in_bounds(world, (-1, 0))


def test_ops_require_a_board(world):
    with pytest.raises(RuntimeError):
        row_region(world, 0)
    assert not in_bounds(world, (0, 0))
