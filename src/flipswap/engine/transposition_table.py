"""
Transposition tables for caching alpha-beta search results.

The engine keeps two generations of tables:
- current: memo for the depth being searched
- previous: filled by the last completed (shallower) depth, consulted only
  for its best moves, which are searched first

After every completed depth the generations rotate: current becomes previous
and a new, empty current takes its place. There is no size limit or
eviction; a table lives for one depth iteration.

Key concepts:
- Bound types: EXACT (PV node), LOWER (fail-high/beta cutoff), UPPER (fail-low/alpha cutoff)
- Replacement policy: Depth-preferred (replace shallower searches)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BoundType(Enum):
    """Type of bound stored in transposition table entry."""
    EXACT = 0   # Exact value (PV node, searched with full window)
    LOWER = 1   # Lower bound (beta cutoff, actual value >= stored value)
    UPPER = 2   # Upper bound (alpha cutoff, actual value <= stored value)


@dataclass
class TTEntry:
    """
    Transposition table entry storing cached search results.

    Attributes:
        depth: Remaining search depth when this entry was stored
        score: Evaluation score (or bound), from the side to move's perspective
        bound: Type of bound (EXACT/LOWER/UPPER)
        best_move: Best successor board found at this position
    """
    depth: int
    score: int
    bound: BoundType
    best_move: Optional[object]


class TranspositionTable:
    """
    Unbounded hash-keyed memo of search results.

    Keys are Zobrist position keys (board hash combined with the side to
    move), values are ``TTEntry``.
    """

    def __init__(self):
        self.table: dict[int, TTEntry] = {}

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0

    def __len__(self):
        return len(self.table)

    def __contains__(self, key: int):
        return key in self.table

    def probe(
        self,
        key: int,
        depth: int,
        alpha: float,
        beta: float
    ) -> Optional[tuple[int, Optional[object]]]:
        """
        Probe transposition table for cached result.

        Returns cached score if:
        1. An entry exists for the key
        2. Stored depth == query depth (a memo only answers for the depth in progress)
        3. Bound type allows cutoff given current alpha-beta window

        Args:
            key: Position key
            depth: Remaining search depth
            alpha: Current alpha bound
            beta: Current beta bound

        Returns:
            (score, best_move) if usable entry found, None otherwise
        """
        entry = self.table.get(key)

        if entry is None or entry.depth != depth:
            self.misses += 1
            return None

        if entry.bound == BoundType.EXACT:
            self.hits += 1
            return (entry.score, entry.best_move)
        elif entry.bound == BoundType.LOWER:
            # Lower bound: true value >= entry.score
            if entry.score >= beta:
                self.hits += 1
                return (entry.score, entry.best_move)
        elif entry.bound == BoundType.UPPER:
            # Upper bound: true value <= entry.score
            if entry.score <= alpha:
                self.hits += 1
                return (entry.score, entry.best_move)

        self.misses += 1
        return None

    def store(
        self,
        key: int,
        depth: int,
        score: int,
        bound: BoundType,
        best_move: Optional[object]
    ):
        """
        Store search result in transposition table.

        Args:
            key: Position key
            depth: Remaining search depth
            score: Evaluation or bound
            bound: Type of bound
            best_move: Best successor found (None at leaves)
        """
        existing = self.table.get(key)

        if existing is not None:
            # Same position: only replace if deeper or same depth with better bound
            if depth < existing.depth:
                return
            elif depth == existing.depth and bound != BoundType.EXACT:
                if existing.bound == BoundType.EXACT:
                    return

        self.table[key] = TTEntry(
            depth=depth,
            score=score,
            bound=bound,
            best_move=best_move,
        )
        self.stores += 1

    def get_best_move(self, key: int) -> Optional[object]:
        """
        Retrieve best move without score checking.

        Used for move ordering even when depth/bounds don't allow cutoff.
        """
        entry = self.table.get(key)
        if entry is not None:
            return entry.best_move
        return None

    def clear(self):
        """Drop all entries and counters."""
        self.table = {}
        self._reset_stats()

    def _reset_stats(self):
        self.hits = 0
        self.misses = 0
        self.stores = 0

    def get_stats(self) -> dict:
        """
        Get transposition table statistics.

        Returns:
            Dictionary with hits, misses, hit rate, stores, size
        """
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'stores': self.stores,
            'size_entries': len(self.table),
        }
