"""
Unit tests for board state, flip propagation and move generation.

Tests verify:
1. Move generator produces the expected placements and swaps
2. Flips trigger at three same-owner neighbours and never reverse
3. Incremental hash always matches recomputation
4. Score is antisymmetric under exchanging the players
"""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from flipswap.engine.zobrist import init_zobrist_hasher
from flipswap.game.board import (
    BoardState,
    new_empty_board,
    board_from_masks,
    generate_moves,
    evaluate,
)
from flipswap.game.render import render, parse_board


zobrist = init_zobrist_hasher()


L_SHAPE = """
.x...
x.x..
.....
.....
.....
"""


def mirror(board: BoardState) -> BoardState:
    """Same layout with the players exchanged."""
    return board_from_masks(
        (board.upright[1], board.upright[0]),
        (board.flipped[1], board.flipped[0]),
    )


def random_playout(seed: int, plies: int):
    """Yield (parent, child) pairs along a random game."""
    rng = random.Random(seed)
    board = new_empty_board()
    for turn in range(plies):
        moves = list(generate_moves(board, turn & 1))
        if not moves:
            return
        child = rng.choice(moves)
        yield board, child
        board = child


class TestEmptyBoard:

    def test_empty_board_has_25_placements(self):
        board = new_empty_board()
        moves = list(generate_moves(board, 0))

        assert len(moves) == 25
        for idx, child in enumerate(moves):
            assert child.upright[0] == 1 << idx
            assert child.upright[1] == 0
            assert child.flipped == [0, 0]
            assert child.hash == zobrist.keys[idx][0]
            child.check_invariants()

    def test_parent_not_mutated(self):
        board = new_empty_board()
        list(generate_moves(board, 0))
        assert board.occupied_all() == 0
        assert board.hash == 0

    def test_generator_is_fresh_each_call(self):
        board = parse_board(L_SHAPE)
        first = list(generate_moves(board, 1))
        second = list(generate_moves(board, 1))
        assert first == second


class TestMoveGeneration:

    def test_single_piece_has_no_swaps(self):
        board = board_from_masks((1 << 12, 0))
        moves = list(generate_moves(board, 1))
        assert len(moves) == 24
        assert all(m.num_pieces() == 2 for m in moves)

    def test_full_flipped_board_has_no_moves(self):
        board = board_from_masks((0, 0), ((1 << 25) - 1, 0))
        assert list(generate_moves(board, 0)) == []

    def test_full_board_only_swaps(self):
        # Two upright pieces left, everything else flipped
        upright = (1 << 0, 1 << 24)
        flipped = (((1 << 25) - 1) & ~((1 << 0) | (1 << 24)), 0)
        board = board_from_masks(upright, flipped)
        moves = list(generate_moves(board, 0))
        assert len(moves) == 1

    def test_placements_before_swaps(self):
        board = board_from_masks((1 << 0, 1 << 24))
        moves = list(generate_moves(board, 0))
        assert len(moves) == 23 + 1
        assert all(m.num_pieces() == 3 for m in moves[:23])
        assert moves[-1].num_pieces() == 2

    def test_cross_owner_swap_exchanges_and_flips(self):
        board = board_from_masks((1 << 0, 1 << 24))
        swap = list(generate_moves(board, 0))[-1]

        assert swap.upright == [0, 0]
        assert swap.flipped[0] == 1 << 24
        assert swap.flipped[1] == 1 << 0

        keys = zobrist.keys
        delta = keys[0][0] ^ keys[24][1] ^ keys[0][3] ^ keys[24][2]
        assert swap.hash == board.hash ^ delta
        swap.check_invariants()

    def test_same_owner_swap_keeps_owner(self):
        board = board_from_masks(((1 << 3) | (1 << 20), 0))
        swap = list(generate_moves(board, 1))[-1]
        assert swap.upright == [0, 0]
        assert swap.flipped == [(1 << 3) | (1 << 20), 0]
        swap.check_invariants()

    def test_flipped_pieces_cannot_be_swapped(self):
        board = board_from_masks((1 << 0, 0), (0, 1 << 24))
        moves = list(generate_moves(board, 0))
        assert len(moves) == 23
        assert all(m.num_pieces() == 3 for m in moves)

    def test_swap_count(self):
        # 4 upright pieces -> 6 swaps
        board = board_from_masks(((1 << 0) | (1 << 2), (1 << 10) | (1 << 12)))
        moves = list(generate_moves(board, 0))
        assert len(moves) == 21 + 6

    def test_move_order_is_deterministic(self):
        board = parse_board("""
            xo...
            .X.o.
            ..x..
            O....
            ....x
        """)
        first = [m.hash for m in generate_moves(board, 1)]
        second = [m.hash for m in generate_moves(board, 1)]
        assert first == second


class TestFlipPropagation:

    def test_t_shape_flips_centre_only(self):
        """Placing the fourth piece of a T flips the centre, nothing else."""
        board = parse_board(L_SHAPE)
        child = next(m for m in generate_moves(board, 0) if m.flipped[0] >> 6 & 1)

        assert child.flipped[0] == 1 << 6
        assert child.upright[0] == (1 << 1) | (1 << 5) | (1 << 7)
        assert child.score_one_player(0) == 1000 * 1 + 1
        child.check_invariants()

    def test_propagate_is_idempotent(self):
        board = parse_board(L_SHAPE).clone()
        board.place(6, 0)
        assert board.propagate(0) == 1 << 6
        h = board.hash
        assert board.propagate(0) == 0
        assert board.hash == h

    def test_capture_swap_propagates_opponent(self):
        """Capturing a cell can complete a T for the opponent."""
        board = parse_board("""
            .....
            ooo..
            .x...
            .....
            ....o
        """)
        # Player 0 swaps its x at 11 with the o at 24: cell 11 becomes
        # player 1's, giving the o at 6 its third neighbour
        capture = next(m for m in generate_moves(board, 0) if m.flipped[0] == 1 << 24)

        assert capture.flipped[1] == (1 << 11) | (1 << 6)
        assert capture.upright[1] == (1 << 5) | (1 << 7)
        assert capture.upright[0] == 0
        capture.check_invariants()

    def test_capture_swap_acting_player_only(self):
        board = parse_board("""
            .....
            ooo..
            .x...
            .....
            ....o
        """)
        moves = generate_moves(board, 0, propagate_both_owners=False)
        capture = next(m for m in moves if m.flipped[0] == 1 << 24)

        assert capture.flipped[1] == 1 << 11
        assert capture.upright[1] == (1 << 5) | (1 << 6) | (1 << 7)
        capture.check_invariants()

    def test_flip_cell_precondition_is_noop(self):
        board = parse_board(L_SHAPE).clone()
        h = board.hash
        board.flip_cell(0, 0)      # empty cell
        board.flip_cell(1, 1)      # owned by player 0
        assert board.hash == h
        assert board.flipped == [0, 0]

    def test_swap_precondition_is_noop(self):
        board = board_from_masks((1 << 0, 0), (0, 1 << 1))
        clone = board.clone()
        assert clone.swap(0, 1) is None
        assert clone.swap(0, 0) is None
        assert clone == board
        assert clone.hash == board.hash


class TestReachableInvariants:
    """Random games: hash, disjointness and monotonic flips."""

    @pytest.mark.parametrize("seed", range(5))
    def test_random_games(self, seed):
        for parent, child in random_playout(seed, 40):
            child.check_invariants()
            assert child.num_pieces() <= 25
            for player in (0, 1):
                # Flipped pieces never return to upright or change owner
                assert parent.flipped[player] & ~child.flipped[player] == 0

    def test_every_successor_consistent(self):
        for _, child in random_playout(11, 12):
            for grandchild in generate_moves(child, 0):
                grandchild.check_invariants()


class TestScoring:

    def test_empty_board_scores_zero(self):
        assert evaluate(new_empty_board()) == 0

    def test_score_symmetry(self):
        for _, board in random_playout(3, 30):
            assert evaluate(board) == -evaluate(mirror(board))
            assert board.score_one_player(0) == mirror(board).score_one_player(1)

    def test_flip_weight(self):
        board = parse_board("""
            .x...
            xXx..
            .....
            .....
            .....
        """)
        assert evaluate(board) == 1001
        assert evaluate(board, flip_weight=10) == 11

    def test_score_counts_cells_not_flip_state(self):
        upright = parse_board("""
            .x...
            xxx..
            .....
            .....
            .....
        """)
        assert evaluate(upright) == 1001


class TestConversion:

    def test_render_parse(self):
        text = "===\nxo...\n.X.O.\n.....\n.....\n....x"
        board = parse_board(text)
        assert render(board) == text
        assert board.piece_at(0) == (0, False)
        assert board.piece_at(1) == (1, False)
        assert board.piece_at(6) == (0, True)
        assert board.piece_at(8) == (1, True)
        assert board.piece_at(2) is None
        board.check_invariants()

    def test_parse_rejects_bad_input(self):
        with pytest.raises(ValueError):
            parse_board("xo")
        with pytest.raises(ValueError):
            parse_board("?" * 25)

    def test_board_from_masks_rejects_overlap(self):
        with pytest.raises(ValueError):
            board_from_masks((1, 1))
        with pytest.raises(ValueError):
            board_from_masks((1 << 25, 0))

    def test_to_array(self):
        board = parse_board("xo...\n.X.O.\n.....\n.....\n.....")
        grid = board.to_array()
        assert grid.shape == (5, 5)
        assert grid.dtype == np.int8
        assert grid[0, 0] == 1
        assert grid[0, 1] == 2
        assert grid[1, 1] == -1
        assert grid[1, 3] == -2
        assert int(np.count_nonzero(grid)) == 4

    def test_equality_and_hash(self):
        a = parse_board(L_SHAPE)
        b = parse_board(L_SHAPE)
        assert a == b
        assert hash(a) == hash(b)
        assert a != new_empty_board()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
