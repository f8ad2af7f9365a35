"""
Rules for repositioning a 2x2 attack board.

Only legality lives here. Actually relocating a board (and carrying its passenger along)
is not part of the move pipeline.
"""

from src.chess3d.boards import ATTACK_BOARD_SIZE, Anchor, Board
from src.chess3d.moves import MoveValidationResult
from src.chess3d.pieces import Piece, pieces_on_level
from src.chess3d.position import GRID_DIMENSIONS
from src.core.shared_types import Color

NOT_AN_ATTACK_BOARD = "Only attack boards can be relocated"
TOO_MANY_PASSENGERS = "Attack board carrying more than one piece cannot move"
BACKWARD_MOVE = "Occupied attack board cannot move backward"
OFF_GRID = "Attack board would not fit on the grid"


def is_backward(board: Board, new_anchor: Anchor, color: Color) -> bool:
    """Backward is toward the owner's side: White may not lower the rank offset, Black may not raise it."""
    if color == Color.WHITE:
        return new_anchor.rank_offset < board.rank_offset
    return new_anchor.rank_offset > board.rank_offset


def validate_attack_board_move(
    board: Board, new_anchor: Anchor, pieces: list[Piece]
) -> MoveValidationResult:
    """
    An attack board may be relocated if:

    * it carries zero or one piece (two or more freeze it in place)
    * with one passenger, the new anchor is not backward for that passenger's color (sideways/forward are fine)
    * the full 2x2 extent stays on the grid
    """
    if not board.is_attack_board:
        return MoveValidationResult(False, NOT_AN_ATTACK_BOARD)

    passengers = pieces_on_level(board.id, pieces)
    if len(passengers) > 1:
        return MoveValidationResult(False, TOO_MANY_PASSENGERS)

    if len(passengers) == 1 and is_backward(board, new_anchor, passengers[0].color):
        return MoveValidationResult(False, BACKWARD_MOVE)

    if not new_anchor.is_within_grid():
        return MoveValidationResult(False, OFF_GRID)

    return MoveValidationResult(True)


def can_move_attack_board(board: Board, new_anchor: Anchor, pieces: list[Piece]) -> bool:
    return validate_attack_board_move(board, new_anchor, pieces).valid


def legal_anchors(board: Board, pieces: list[Piece]) -> list[Anchor]:
    """Every other anchor the board could legally be moved to right now"""
    max_file = GRID_DIMENSIONS[0] - ATTACK_BOARD_SIZE[0]
    max_rank = GRID_DIMENSIONS[1] - ATTACK_BOARD_SIZE[1]
    anchors = [
        Anchor(file_offset, rank_offset)
        for file_offset in range(max_file + 1)
        for rank_offset in range(max_rank + 1)
    ]
    return [
        anchor
        for anchor in anchors
        if anchor != board.anchor and can_move_attack_board(board, anchor, pieces)
    ]
