"""
Alpha-beta search engine for flipswap.

This module contains the engine components:
- Zobrist hashing for fast position lookup
- Transposition tables (current / previous generation)
- Move ordering from the previous depth's best moves
- Alpha-beta negamax search with iterative deepening
"""

# zobrist must load first: the board module depends on it
from flipswap.engine.zobrist import ZobristHasher, init_zobrist_hasher, get_zobrist_hasher
from flipswap.engine.transposition_table import TranspositionTable, BoundType, TTEntry
from flipswap.engine.move_ordering import order_moves
from flipswap.engine.alphabeta import AlphaBetaEngine, SearchResult, solve

__all__ = [
    'ZobristHasher',
    'init_zobrist_hasher',
    'get_zobrist_hasher',
    'TranspositionTable',
    'BoundType',
    'TTEntry',
    'order_moves',
    'AlphaBetaEngine',
    'SearchResult',
    'solve',
]
