"""
Text rendering and parsing of flipswap positions.

Glyphs:
    .  empty
    x  player 0 upright      X  player 0 flipped
    o  player 1 upright      O  player 1 flipped
"""

from typing import Optional

from flipswap.config import WIDTH, HEIGHT, NUM_CELLS


EMPTY_GLYPH = '.'
UPRIGHT_GLYPHS = ('x', 'o')
FLIPPED_GLYPHS = ('X', 'O')
HEADER = '==='


def render(board, header: bool = True) -> str:
    """Render a board as 5 lines of glyphs, optionally preceded by a header."""
    lines = [HEADER] if header else []
    for y in range(HEIGHT):
        row = []
        for x in range(WIDTH):
            piece = board.piece_at(y * WIDTH + x)
            if piece is None:
                row.append(EMPTY_GLYPH)
            else:
                player, flipped = piece
                row.append(FLIPPED_GLYPHS[player] if flipped else UPRIGHT_GLYPHS[player])
        lines.append(''.join(row))
    return '\n'.join(lines)


def parse_board(text: str, zobrist=None):
    """
    Build a board from its rendered grid.

    Whitespace and an optional ``===`` header are ignored.

    Args:
        text: Rendered board
        zobrist: Optional hasher (defaults to the process-wide one)

    Returns:
        BoardState with a from-scratch hash

    Raises:
        ValueError: on unknown glyphs or a wrong number of cells
    """
    from flipswap.game.board import board_from_masks

    body = text.replace(HEADER, '')
    cells = [c for c in body if not c.isspace()]
    if len(cells) != NUM_CELLS:
        raise ValueError(f"Expected {NUM_CELLS} cells, got {len(cells)}")

    upright = [0, 0]
    flipped = [0, 0]
    for idx, glyph in enumerate(cells):
        if glyph == EMPTY_GLYPH:
            continue
        owner = _owner_of(glyph, UPRIGHT_GLYPHS)
        if owner is not None:
            upright[owner] |= 1 << idx
            continue
        owner = _owner_of(glyph, FLIPPED_GLYPHS)
        if owner is None:
            raise ValueError(f"Unknown glyph {glyph!r} at cell {idx}")
        flipped[owner] |= 1 << idx

    return board_from_masks(tuple(upright), tuple(flipped), zobrist)


def _owner_of(glyph: str, glyphs: tuple[str, str]) -> Optional[int]:
    for player, g in enumerate(glyphs):
        if glyph == g:
            return player
    return None
