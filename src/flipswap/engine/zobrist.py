"""
Zobrist hashing for flipswap positions.

Every board keeps its hash up to date incrementally: whenever a cell changes
state, the key of the old (cell, tag) is XORed out and the key of the new
(cell, tag) is XORed in. ``hash_position`` recomputes the hash from scratch
and only serves as a correctness oracle.

Implementation:
- Pre-generate random 64-bit keys for each (cell, tag) combination
  where tag = 2 * flipped + player  (upright-P0, upright-P1, flipped-P0, flipped-P1)
- Hash = XOR of all keys corresponding to occupied cells
- Side-to-move key is XORed into transposition-table keys when player 1 moves

The key table is process-wide and write-once: ``init_zobrist_hasher`` must be
called before any board is created.
"""

import numpy as np
from typing import Optional

from flipswap.config import NUM_CELLS, SEARCH_CONFIG


NUM_TAGS = 4


def cell_tag(player: int, flipped: bool) -> int:
    """Map (owner, flip state) to a key column."""
    return 2 * int(flipped) + player


class ZobristHasher:
    """
    Zobrist key table for 5x5 flipswap boards.

    25 cells x 4 tags = 100 zobrist keys, plus one side-to-move key.
    Keys are plain Python ints so hashing stays in arbitrary-precision
    integer arithmetic instead of numpy scalars.
    """

    def __init__(self, num_cells: int = NUM_CELLS, seed: int = SEARCH_CONFIG['zobrist_seed']):
        """
        Initialize Zobrist hash table with random 64-bit keys.

        Args:
            num_cells: Number of cells on the board
            seed: Random seed for reproducibility
        """
        self.num_cells = num_cells
        self.seed = seed

        # Use seeded RNG for reproducible hashes
        rng = np.random.RandomState(seed)

        table = rng.randint(
            0, 2**63 - 1,
            size=(num_cells, NUM_TAGS),
            dtype=np.uint64
        )
        table.setflags(write=False)
        self.zobrist_table = table

        # Row-major tuple copy used by the boards
        self.keys = tuple(tuple(int(k) for k in row) for row in table)

        # Side-to-move hash (XOR this if player 1 is to move)
        self.side_to_move_hash = int(rng.randint(0, 2**63 - 1, dtype=np.uint64))

    def key(self, idx: int, player: int, flipped: bool) -> int:
        return self.keys[idx][cell_tag(player, flipped)]

    def hash_position(self, board) -> int:
        """
        Compute the Zobrist hash of a board from scratch.

        Args:
            board: BoardState

        Returns:
            64-bit hash value (int)
        """
        hash_value = 0
        for player in (0, 1):
            for flipped, mask in ((False, board.upright[player]), (True, board.flipped[player])):
                tag = cell_tag(player, flipped)
                for idx in range(self.num_cells):
                    if mask >> idx & 1:
                        hash_value ^= self.keys[idx][tag]
        return hash_value

    def position_key(self, board_hash: int, player: int) -> int:
        """Transposition-table key for (position, side to move)."""
        if player == 1:
            return board_hash ^ self.side_to_move_hash
        return board_hash

    def verify_hash(self, board) -> bool:
        """
        Verify that the incrementally maintained hash matches the board.

        Useful for debugging incremental updates.
        """
        return self.hash_position(board) == board.hash


# Global singleton instance
_global_hasher: Optional[ZobristHasher] = None


def init_zobrist_hasher(seed: int = SEARCH_CONFIG['zobrist_seed']) -> ZobristHasher:
    """
    Create the process-wide Zobrist hasher.

    Must run once before any board is constructed. Calling it again with the
    same seed returns the existing instance.

    Args:
        seed: Random seed

    Returns:
        ZobristHasher instance
    """
    global _global_hasher

    if _global_hasher is None:
        _global_hasher = ZobristHasher(seed=seed)
    elif _global_hasher.seed != seed:
        raise RuntimeError(
            f"Zobrist table already initialized with seed {_global_hasher.seed}, "
            f"refusing to reseed with {seed}"
        )

    return _global_hasher


def get_zobrist_hasher() -> ZobristHasher:
    """Return the hasher created by ``init_zobrist_hasher``."""
    if _global_hasher is None:
        raise RuntimeError("init_zobrist_hasher() must be called before creating boards")
    return _global_hasher
