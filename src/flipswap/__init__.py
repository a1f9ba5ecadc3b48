"""
flipswap: self-play alpha-beta engine for a 5x5 place-and-swap board game.

Call ``init_zobrist_hasher()`` once before creating boards.
"""

from flipswap.engine import (
    init_zobrist_hasher,
    get_zobrist_hasher,
    AlphaBetaEngine,
    SearchResult,
    solve,
)
from flipswap.game import (
    BoardState,
    new_empty_board,
    generate_moves,
    evaluate,
    render,
    parse_board,
)

__version__ = '0.1'

__all__ = [
    'init_zobrist_hasher',
    'get_zobrist_hasher',
    'AlphaBetaEngine',
    'SearchResult',
    'solve',
    'BoardState',
    'new_empty_board',
    'generate_moves',
    'evaluate',
    'render',
    'parse_board',
]
