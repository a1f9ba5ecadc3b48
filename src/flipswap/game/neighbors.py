"""
Neighbour counting on 25-bit occupancy masks.

Cell index = y * WIDTH + x. For every cell we need to know whether at least
2 and at least 3 of its orthogonal neighbours are set in the same mask.
Instead of looping over cells, the four neighbour directions are produced as
shifted copies of the mask, and the count is taken with a two-level adder:

    count = (a + b) + (c + d)
          = 2*(a&b) + (a^b) + 2*(c&d) + (c^d)

    >= 2  <=>  (a&b) | (c&d) | ((a^b) & (c^d))
    >= 3  <=>  ((a&b) & ((c&d) | (c^d))) | ((c&d) & (a^b))
"""

from flipswap.config import WIDTH, HEIGHT, NUM_CELLS


FULL_MASK = (1 << NUM_CELLS) - 1

# Cells not in the first / last column
NOT_FIRST_COL = 0
NOT_LAST_COL = 0
for _idx in range(NUM_CELLS):
    if _idx % WIDTH != 0:
        NOT_FIRST_COL |= 1 << _idx
    if _idx % WIDTH != WIDTH - 1:
        NOT_LAST_COL |= 1 << _idx
del _idx


def neighbor_masks(occupied: int) -> tuple[int, int]:
    """
    Compute cells with >=2 and >=3 set orthogonal neighbours.

    Args:
        occupied: 25-bit mask of one player's pieces

    Returns:
        (ge2, ge3) masks over all cells (not restricted to ``occupied``)
    """
    left = (occupied << 1) & NOT_FIRST_COL     # neighbour at x-1
    right = (occupied >> 1) & NOT_LAST_COL     # neighbour at x+1
    up = (occupied << WIDTH) & FULL_MASK       # neighbour at y-1
    down = occupied >> WIDTH                   # neighbour at y+1

    carry_h = left & right
    sum_h = left ^ right
    carry_v = up & down
    sum_v = up ^ down

    ge2 = carry_h | carry_v | (sum_h & sum_v)
    ge3 = (carry_h & (carry_v | sum_v)) | (carry_v & sum_h)
    return ge2, ge3


def neighbor_masks_reference(occupied: int) -> tuple[int, int]:
    """Per-cell loop version of ``neighbor_masks`` (test oracle)."""
    ge2 = 0
    ge3 = 0
    for idx in range(NUM_CELLS):
        x = idx % WIDTH
        y = idx // WIDTH
        count = 0
        if x > 0 and occupied >> (idx - 1) & 1:
            count += 1
        if x < WIDTH - 1 and occupied >> (idx + 1) & 1:
            count += 1
        if y > 0 and occupied >> (idx - WIDTH) & 1:
            count += 1
        if y < HEIGHT - 1 and occupied >> (idx + WIDTH) & 1:
            count += 1
        if count >= 2:
            ge2 |= 1 << idx
        if count >= 3:
            ge3 |= 1 << idx
    return ge2, ge3


def popcount(mask: int) -> int:
    return bin(mask).count('1')


def iter_bits(mask: int):
    """Yield set bit indices in ascending order."""
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low
