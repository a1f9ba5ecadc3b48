"""
Alpha-beta negamax search engine for flipswap.

Key features:
- Negamax framework (simplified minimax using negation)
- Alpha-beta pruning (cut branches that can't affect final result)
- Iterative deepening with two transposition-table generations
- Move ordering: best move of the previous depth is searched first
- Principal variation extraction

Iterative deepening runs from ``start_depth`` up to ``max_depth`` on the
first search of an engine. Later searches go straight to ``max_depth``: the
previous table still holds the best moves of the last search, which is
enough to order moves well.

Algorithm overview:

    def negamax(board, player, depth, alpha, beta):
        if depth == 0:
            return signed_eval(board, player)

        if entry := tt.probe(board, player, depth, alpha, beta):
            return entry

        best_score = -infinity
        for child in [prev_tt.best_move(board)] + generate_moves(board):
            score = -negamax(child, opponent, depth-1, -beta, -alpha)
            best_score = max(best_score, score)
            alpha = max(alpha, score)
            if alpha >= beta:
                break  # Beta cutoff

        tt.store(board, player, depth, best_score, bound_type, best_move)
        return best_score
"""

import time
from dataclasses import dataclass
from typing import Optional, Tuple

from flipswap.config import SEARCH_CONFIG, RULES_CONFIG
from flipswap.engine.zobrist import ZobristHasher, get_zobrist_hasher
from flipswap.engine.transposition_table import TranspositionTable, BoundType
from flipswap.engine.move_ordering import order_moves
from flipswap.game.board import BoardState


@dataclass
class SearchResult:
    """Result of alpha-beta search."""
    best_move: Optional[BoardState]
    score: int
    depth_reached: int
    nodes_searched: int
    time_ms: int
    principal_variation: list[BoardState]
    tt_stats: dict


SCORE_INF = 10**9


class AlphaBetaEngine:
    """
    Alpha-beta negamax search engine with iterative deepening.

    The engine owns two transposition tables. ``tt`` memoizes the depth in
    progress, ``prev_tt`` holds the results of the last completed depth and
    is only used for move ordering.
    """

    def __init__(
        self,
        max_depth: int = SEARCH_CONFIG['max_depth'],
        start_depth: int = SEARCH_CONFIG['start_depth'],
        flip_weight: int = RULES_CONFIG['flip_weight'],
        propagate_both_owners: bool = RULES_CONFIG['propagate_both_owners'],
        zobrist: Optional[ZobristHasher] = None,
        verbose: bool = False
    ):
        """
        Initialize alpha-beta engine.

        Args:
            max_depth: Maximum search depth in plies
            start_depth: First iterative-deepening depth on a cold engine
            flip_weight: Weight of >=3-neighbour cells in the evaluation
            propagate_both_owners: Move-generator propagation policy
            zobrist: Hasher (defaults to the process-wide one)
            verbose: Print one line per completed depth
        """
        if max_depth < 1 or start_depth < 1:
            raise ValueError(f"Search depths must be >= 1, got max={max_depth} start={start_depth}")

        self.max_depth = max_depth
        self.start_depth = start_depth
        self.flip_weight = flip_weight
        self.propagate_both_owners = propagate_both_owners
        self.verbose = verbose

        self.zobrist = zobrist if zobrist is not None else get_zobrist_hasher()
        self.tt = TranspositionTable()
        self.prev_tt = TranspositionTable()

        # Search statistics
        self.searches = 0
        self.nodes_searched = 0
        self.start_time = 0.0

    def search(
        self,
        board: BoardState,
        player: int,
        max_depth: Optional[int] = None
    ) -> SearchResult:
        """
        Main search entry point with iterative deepening.

        Args:
            board: Current position
            player: Player to move (0 or 1)
            max_depth: Override maximum depth

        Returns:
            SearchResult; ``best_move`` is None when no legal move exists
        """
        if player not in (0, 1):
            raise ValueError(f"Player must be 0 or 1, got {player}")

        effective_max_depth = max_depth if max_depth is not None else self.max_depth
        if effective_max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {effective_max_depth}")

        self.start_time = time.time() * 1000
        self.nodes_searched = 0

        # Only the previous generation's hints survive between searches
        self.tt.clear()

        first_depth = self.start_depth if self.searches == 0 else effective_max_depth
        first_depth = min(first_depth, effective_max_depth)
        self.searches += 1

        best_move = None
        best_score = self._evaluate(board, player)
        depth_reached = 0
        pv = []
        tt_stats = self.tt.get_stats()

        for depth in range(first_depth, effective_max_depth + 1):
            score, move = self.minimax(board, player, depth, -SCORE_INF, SCORE_INF)

            pv = self._principal_variation(board, player, depth)
            tt_stats = self.tt.get_stats()
            self._rotate_tables()

            best_move = move
            best_score = score
            depth_reached = depth

            if self.verbose:
                elapsed = int(time.time() * 1000 - self.start_time)
                print(
                    f"  depth {depth}: score={score} nodes={self.nodes_searched} "
                    f"time={elapsed}ms tt_hit_rate={tt_stats['hit_rate']:.1%}"
                )

            if move is None:
                # No legal move, deeper search cannot change that
                break

        elapsed_ms = int(time.time() * 1000 - self.start_time)

        return SearchResult(
            best_move=best_move,
            score=best_score,
            depth_reached=depth_reached,
            nodes_searched=self.nodes_searched,
            time_ms=elapsed_ms,
            principal_variation=pv,
            tt_stats=tt_stats
        )

    def solve(
        self,
        board: BoardState,
        player: int,
        max_depth: Optional[int] = None
    ) -> Optional[BoardState]:
        """Best successor of ``board`` for ``player``, or None if there is no move."""
        return self.search(board, player, max_depth).best_move

    def minimax(
        self,
        board: BoardState,
        player: int,
        depth: int,
        alpha: float,
        beta: float
    ) -> Tuple[int, Optional[BoardState]]:
        """
        Negamax alpha-beta search.

        Args:
            board: Position to search
            player: Player to move
            depth: Remaining depth
            alpha: Alpha bound
            beta: Beta bound

        Returns:
            (score from the mover's perspective, best successor or None)
        """
        self.nodes_searched += 1

        if depth == 0:
            return self._evaluate(board, player), None

        key = self.zobrist.position_key(board.hash, player)
        tt_result = self.tt.probe(key, depth, alpha, beta)
        if tt_result is not None:
            return tt_result

        tt_move = self.prev_tt.get_best_move(key)

        best_score = -SCORE_INF
        best_move = None
        original_alpha = alpha

        for child in order_moves(board, player, tt_move, self.propagate_both_owners):
            score = -self.minimax(child, player ^ 1, depth - 1, -beta, -alpha)[0]

            if score > best_score:
                best_score = score
                best_move = child

            alpha = max(alpha, score)

            # Beta cutoff
            if alpha >= beta:
                break

        if best_move is None:
            # No legal move: static evaluation
            best_score = self._evaluate(board, player)
            bound = BoundType.EXACT
        elif best_score <= original_alpha:
            bound = BoundType.UPPER  # All moves failed low
        elif best_score >= beta:
            bound = BoundType.LOWER  # We failed high
        else:
            bound = BoundType.EXACT  # PV node

        self.tt.store(key, depth, best_score, bound, best_move)

        return best_score, best_move

    def _evaluate(self, board: BoardState, player: int) -> int:
        """Static score from ``player``'s perspective."""
        score = board.score(self.flip_weight)
        return score if player == 0 else -score

    def _rotate_tables(self):
        """Current table becomes previous, previous is emptied and reused."""
        self.prev_tt, self.tt = self.tt, self.prev_tt
        self.tt.clear()

    def _principal_variation(self, board: BoardState, player: int, depth: int) -> list[BoardState]:
        """Follow best moves through the current table."""
        pv = []
        for _ in range(depth):
            move = self.tt.get_best_move(self.zobrist.position_key(board.hash, player))
            if move is None:
                break
            pv.append(move)
            board = move
            player ^= 1
        return pv

    def clear_tt(self):
        """Forget both table generations; the next search starts at start_depth."""
        self.tt.clear()
        self.prev_tt.clear()
        self.searches = 0

    def get_stats(self) -> dict:
        """Get search statistics."""
        return {
            'searches': self.searches,
            'nodes_searched': self.nodes_searched,
            'tt_stats': self.tt.get_stats(),
            'prev_tt_stats': self.prev_tt.get_stats(),
        }


def solve(
    board: BoardState,
    player: int,
    max_depth: int = SEARCH_CONFIG['max_depth'],
    engine: Optional[AlphaBetaEngine] = None
) -> Optional[BoardState]:
    """
    Best successor of ``board`` for ``player``.

    Pass the same ``engine`` across plies to keep its move-ordering hints.
    """
    if engine is None:
        engine = AlphaBetaEngine(max_depth=max_depth)
    return engine.solve(board, player, max_depth)
