"""Board representation, move generation and rendering for flipswap."""

from flipswap.game.board import (
    BoardState,
    new_empty_board,
    board_from_masks,
    generate_moves,
    evaluate,
)
from flipswap.game.neighbors import neighbor_masks, neighbor_masks_reference
from flipswap.game.render import render, parse_board

__all__ = [
    'BoardState',
    'new_empty_board',
    'board_from_masks',
    'generate_moves',
    'evaluate',
    'neighbor_masks',
    'neighbor_masks_reference',
    'render',
    'parse_board',
]
