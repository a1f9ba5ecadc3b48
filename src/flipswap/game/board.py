"""
Bitboard representation and move generation for flipswap.

Board: 5 rows x 5 columns, cell index = y * 5 + x
Pieces: upright or flipped, owned by player 0 or player 1
Moves:
- Placement: put an upright piece on an empty cell
- Swap: pick two upright cells (any owner), exchange their owners and flip both
Flips: a piece with >= 3 same-owner orthogonal neighbours flips, permanently.
"""

import numpy as np
from typing import Iterator, Optional

from flipswap.config import WIDTH, HEIGHT, NUM_CELLS, RULES_CONFIG
from flipswap.engine.zobrist import ZobristHasher, get_zobrist_hasher
from flipswap.game.neighbors import FULL_MASK, neighbor_masks, popcount, iter_bits


class BoardState:
    """
    One flipswap position.

    Four disjoint 25-bit masks (upright/flipped per player) plus the
    incrementally maintained Zobrist hash. Successors are built with
    ``clone()`` and mutated before they are handed out; after that a board
    is treated as a value and never changed.
    """

    __slots__ = ('upright', 'flipped', 'hash', 'zobrist')

    def __init__(self, zobrist: ZobristHasher):
        self.upright = [0, 0]
        self.flipped = [0, 0]
        self.hash = 0
        self.zobrist = zobrist

    def clone(self) -> 'BoardState':
        board = BoardState.__new__(BoardState)
        board.upright = self.upright[:]
        board.flipped = self.flipped[:]
        board.hash = self.hash
        board.zobrist = self.zobrist
        return board

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def occupied(self, player: int) -> int:
        return self.upright[player] | self.flipped[player]

    def occupied_all(self) -> int:
        return self.upright[0] | self.upright[1] | self.flipped[0] | self.flipped[1]

    def empty_cells(self) -> int:
        return ~self.occupied_all() & FULL_MASK

    def piece_at(self, idx: int) -> Optional[tuple[int, bool]]:
        """Return (owner, is_flipped) for the cell, or None if empty."""
        bit = 1 << idx
        for player in (0, 1):
            if self.upright[player] & bit:
                return player, False
            if self.flipped[player] & bit:
                return player, True
        return None

    def num_pieces(self) -> int:
        return popcount(self.occupied_all())

    # ------------------------------------------------------------------
    # Mutation (only on fresh clones)
    # ------------------------------------------------------------------

    def place(self, idx: int, player: int):
        """Put an upright piece for ``player`` on an empty cell."""
        bit = 1 << idx
        if self.occupied_all() & bit:
            return
        self.upright[player] |= bit
        self.hash ^= self.zobrist.keys[idx][player]

    def flip_cell(self, idx: int, player: int):
        """Flip one of ``player``'s upright pieces. No-op if it is not one."""
        bit = 1 << idx
        if not self.upright[player] & bit:
            return
        self.upright[player] ^= bit
        self.flipped[player] |= bit
        keys = self.zobrist.keys[idx]
        self.hash ^= keys[player] ^ keys[2 + player]

    def propagate(self, player: int) -> int:
        """
        Flip every upright piece of ``player`` with >= 3 same-owner neighbours.

        Flipping does not change occupancy, so one pass reaches the fixpoint.

        Returns:
            Mask of newly flipped cells
        """
        _, ge3 = neighbor_masks(self.upright[player] | self.flipped[player])
        newly = ge3 & self.upright[player]
        if newly:
            self.upright[player] &= ~newly
            self.flipped[player] |= newly
            keys = self.zobrist.keys
            h = self.hash
            for idx in iter_bits(newly):
                h ^= keys[idx][player] ^ keys[idx][2 + player]
            self.hash = h
        return newly

    def swap(self, i: int, j: int) -> Optional[tuple[int, int]]:
        """
        Swap two upright cells: owners are exchanged and both pieces flip.

        Returns:
            (owner of i, owner of j) before the swap, or None if either cell
            is not upright (no-op)
        """
        bit_i = 1 << i
        bit_j = 1 << j
        owner_i = 0 if self.upright[0] & bit_i else 1 if self.upright[1] & bit_i else None
        owner_j = 0 if self.upright[0] & bit_j else 1 if self.upright[1] & bit_j else None
        if owner_i is None or owner_j is None or i == j:
            return None

        self.upright[owner_i] &= ~bit_i
        self.upright[owner_j] &= ~bit_j
        self.flipped[owner_j] |= bit_i
        self.flipped[owner_i] |= bit_j

        keys = self.zobrist.keys
        self.hash ^= (
            keys[i][owner_i] ^ keys[j][owner_j]
            ^ keys[i][2 + owner_j] ^ keys[j][2 + owner_i]
        )
        return owner_i, owner_j

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_one_player(self, player: int, flip_weight: int = RULES_CONFIG['flip_weight']) -> int:
        occ = self.upright[player] | self.flipped[player]
        ge2, ge3 = neighbor_masks(occ)
        return flip_weight * popcount(ge3 & occ) + popcount(ge2 & occ)

    def score(self, flip_weight: int = RULES_CONFIG['flip_weight']) -> int:
        """Heuristic score, positive favours player 0."""
        return self.score_one_player(0, flip_weight) - self.score_one_player(1, flip_weight)

    # ------------------------------------------------------------------
    # Consistency / conversion
    # ------------------------------------------------------------------

    def check_invariants(self):
        """Raise AssertionError if masks overlap or the hash is stale."""
        masks = (self.upright[0], self.upright[1], self.flipped[0], self.flipped[1])
        for a in range(len(masks)):
            assert masks[a] & ~FULL_MASK == 0, f"mask {a} has bits outside the board"
            for b in range(a + 1, len(masks)):
                assert masks[a] & masks[b] == 0, f"masks {a} and {b} overlap"
        assert self.zobrist.verify_hash(self), "incremental hash differs from recomputation"

    def to_array(self) -> np.ndarray:
        """
        Board as a (5, 5) int8 grid.

        0: empty, 1/2: player 0/1 upright, -1/-2: player 0/1 flipped
        """
        grid = np.zeros(NUM_CELLS, dtype=np.int8)
        for player in (0, 1):
            for idx in iter_bits(self.upright[player]):
                grid[idx] = player + 1
            for idx in iter_bits(self.flipped[player]):
                grid[idx] = -(player + 1)
        return grid.reshape(HEIGHT, WIDTH)

    def __eq__(self, other):
        if not isinstance(other, BoardState):
            return NotImplemented
        return self.upright == other.upright and self.flipped == other.flipped

    def __hash__(self):
        return self.hash

    def __repr__(self):
        from flipswap.game.render import render
        return render(self)


def new_empty_board(zobrist: Optional[ZobristHasher] = None) -> BoardState:
    """Initial position. Requires ``init_zobrist_hasher`` to have run."""
    return BoardState(zobrist if zobrist is not None else get_zobrist_hasher())


def board_from_masks(
    upright: tuple[int, int],
    flipped: tuple[int, int] = (0, 0),
    zobrist: Optional[ZobristHasher] = None
) -> BoardState:
    """
    Build a board directly from masks, hashing it from scratch.

    Raises:
        ValueError: if masks overlap or exceed the board
    """
    board = new_empty_board(zobrist)
    masks = (upright[0], upright[1], flipped[0], flipped[1])
    seen = 0
    for mask in masks:
        if mask < 0 or mask & ~FULL_MASK:
            raise ValueError(f"Mask {mask:#x} has bits outside the {WIDTH}x{HEIGHT} board")
        if seen & mask:
            raise ValueError("A cell cannot hold more than one piece")
        seen |= mask
    board.upright = [upright[0], upright[1]]
    board.flipped = [flipped[0], flipped[1]]
    board.hash = board.zobrist.hash_position(board)
    return board


def generate_moves(
    board: BoardState,
    player: int,
    propagate_both_owners: bool = RULES_CONFIG['propagate_both_owners']
) -> Iterator[BoardState]:
    """
    Yield every successor of ``board`` for ``player``.

    Placements come first (ascending cell index), then swaps over all pairs
    i < j of upright cells (ascending). Each call returns a fresh generator.

    Args:
        board: Current position
        player: Player to move (0 or 1)
        propagate_both_owners: After a capturing swap also propagate flips
            for the opponent

    Yields:
        Successor boards
    """
    for idx in iter_bits(board.empty_cells()):
        child = board.clone()
        child.place(idx, player)
        child.propagate(player)
        yield child

    swappable = list(iter_bits(board.upright[0] | board.upright[1]))
    for a in range(len(swappable)):
        i = swappable[a]
        for b in range(a + 1, len(swappable)):
            j = swappable[b]
            child = board.clone()
            owner_i, owner_j = child.swap(i, j)
            child.propagate(player)
            if owner_i != owner_j and propagate_both_owners:
                child.propagate(player ^ 1)
            yield child


def evaluate(board: BoardState, flip_weight: int = RULES_CONFIG['flip_weight']) -> int:
    """score(player 0) - score(player 1)"""
    return board.score(flip_weight)
