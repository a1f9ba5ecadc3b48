"""
Move ordering for alpha-beta search.

Good move ordering is critical for alpha-beta pruning efficiency. The best
move found for a position at the previous (shallower) depth is searched
first; the remaining moves follow in move-generator order.
"""

from typing import Iterator, Optional

from flipswap.config import RULES_CONFIG
from flipswap.game.board import BoardState, generate_moves


def order_moves(
    board: BoardState,
    player: int,
    tt_move: Optional[BoardState] = None,
    propagate_both_owners: bool = RULES_CONFIG['propagate_both_owners']
) -> Iterator[BoardState]:
    """
    Yield successors of ``board`` with the hinted move first.

    Args:
        board: Current position
        player: Player to move
        tt_move: Best successor from the previous depth's table (highest priority)
        propagate_both_owners: Passed through to the move generator

    Yields:
        Successor boards, each exactly once
    """
    if tt_move is not None:
        yield tt_move

    for child in generate_moves(board, player, propagate_both_owners):
        if tt_move is not None and child.hash == tt_move.hash and child == tt_move:
            continue
        yield child
