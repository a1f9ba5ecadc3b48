#!/usr/bin/env python3
"""
Self-play driver for flipswap.

Starting from the empty board, the engine picks the move for whichever side
is to act, the position is printed and the turn passes. The game ends when
the side to move has no legal move or after ``max_plies`` plies.

Usage:
    flipswap-selfplay --max-depth 3 --plies 20
    flipswap-selfplay --random-player 1 --seed 7
"""

import argparse
import random
from typing import Optional

from tqdm import tqdm

from flipswap.config import SelfPlayConfig, SEARCH_CONFIG
from flipswap.engine.alphabeta import AlphaBetaEngine
from flipswap.engine.zobrist import init_zobrist_hasher
from flipswap.game.board import BoardState, new_empty_board, generate_moves
from flipswap.game.render import render


def random_move(board: BoardState, player: int, rng: random.Random) -> Optional[BoardState]:
    """Uniformly random legal successor, or None if there is none."""
    moves = list(generate_moves(board, player))
    if not moves:
        return None
    return rng.choice(moves)


def play_game(config: SelfPlayConfig, engine: Optional[AlphaBetaEngine] = None) -> list[BoardState]:
    """
    Play one game and return every position, starting with the empty board.

    Args:
        config: Self-play settings
        engine: Engine to reuse (created from ``config`` if omitted)

    Returns:
        List of positions in play order
    """
    if config.random_player not in (None, 0, 1):
        raise ValueError(f"random_player must be None, 0 or 1, got {config.random_player}")

    if engine is None:
        engine = AlphaBetaEngine(
            max_depth=config.max_depth,
            start_depth=config.start_depth,
        )
    rng = random.Random(config.seed)

    board = new_empty_board()
    history = [board]
    turn = 0

    progress = tqdm(total=config.max_plies, desc="Self-play", unit="ply", disable=not config.verbose)
    try:
        while config.max_plies is None or turn < config.max_plies:
            player = turn & 1

            if config.random_player == player:
                next_board = random_move(board, player, rng)
            else:
                next_board = engine.solve(board, player)

            if next_board is None:
                if config.verbose:
                    tqdm.write(f"Player {player} has no legal move, game over")
                break

            board = next_board
            history.append(board)
            turn += 1
            progress.update(1)

            if config.verbose:
                tqdm.write(render(board))
                tqdm.write(f"Score {board.score()}")
    finally:
        progress.close()

    return history


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Run a flipswap self-play game")
    parser.add_argument('--max-depth', type=int, default=SEARCH_CONFIG['max_depth'],
                        help="Search depth in plies")
    parser.add_argument('--start-depth', type=int, default=SEARCH_CONFIG['start_depth'],
                        help="First iterative-deepening depth")
    parser.add_argument('--plies', type=int, default=None,
                        help="Stop after this many plies (default: until no move)")
    parser.add_argument('--random-player', type=int, choices=[0, 1], default=None,
                        help="Let this player move at random")
    parser.add_argument('--seed', type=int, default=0,
                        help="Seed for the random player")
    parser.add_argument('--zobrist-seed', type=int, default=SEARCH_CONFIG['zobrist_seed'],
                        help="Seed for the Zobrist key table")
    parser.add_argument('--quiet', action='store_true',
                        help="Do not print positions")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    init_zobrist_hasher(args.zobrist_seed)

    config = SelfPlayConfig(
        max_plies=args.plies,
        max_depth=args.max_depth,
        start_depth=args.start_depth,
        random_player=args.random_player,
        seed=args.seed,
        verbose=not args.quiet,
    )
    history = play_game(config)

    print(f"\nTotal plies: {len(history) - 1}")
    print(f"Final score: {history[-1].score()}")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        print("\n\nSelf-play interrupted.")
