"""
Configuration for the flipswap self-play engine.
"""

from dataclasses import dataclass
from typing import Optional


# Board geometry
WIDTH = 5
HEIGHT = 5
NUM_CELLS = WIDTH * HEIGHT

# Search Configuration
SEARCH_CONFIG = {
    'max_depth': 7,          # Reference search depth (plies)
    'start_depth': 4,        # First iterative-deepening depth on a cold engine
    'zobrist_seed': 42,      # Fixed seed, hashes must be reproducible across runs
}

# Rules / Heuristic Configuration
RULES_CONFIG = {
    'flip_weight': 1000,            # Weight of a >=3-neighbour cell in the score
    'propagate_both_owners': True,  # After a capturing swap, propagate for both owners
}


@dataclass
class SelfPlayConfig:
    max_plies: Optional[int] = None     # None: play until no legal move exists
    max_depth: int = SEARCH_CONFIG['max_depth']
    start_depth: int = SEARCH_CONFIG['start_depth']
    random_player: Optional[int] = None  # 0 or 1 plays uniformly random moves
    seed: int = 0
    verbose: bool = True
