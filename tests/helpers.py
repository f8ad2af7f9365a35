"""Shared helpers for placing pieces in tests using algebraic notation."""

from src.chess3d.pieces import Piece
from src.chess3d.position import Position
from src.core.shared_types import Color, PieceType


def make_piece(
    piece_type: PieceType,
    color: Color,
    square: str,
    piece_id: str | None = None,
    has_moved: bool = False,
) -> Piece:
    """Place a piece on e.g. 'b3-WL'"""
    return Piece(
        id=piece_id or f"{color}-{piece_type}-{square}",
        type=piece_type,
        color=color,
        position=Position.from_algebraic(square),
        has_moved=has_moved,
    )


def sq(notation: str) -> Position:
    return Position.from_algebraic(notation)
