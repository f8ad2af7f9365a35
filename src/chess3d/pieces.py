"""Defines the chess pieces and where they start"""

from dataclasses import dataclass
from typing import Iterable, Optional

from src.chess3d.boards import Board, Level, board_local_to_global, create_initial_boards
from src.chess3d.position import Position
from src.core.shared_types import Color, PieceType

SYMBOLS: dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}


@dataclass
class Piece:
    id: str
    type: PieceType
    color: Color
    position: Position
    has_moved: bool = False
    # a pawn carried along by an attack board loses its two-square advance for good
    moved_as_passenger: bool = False

    @property
    def symbol(self) -> str:
        """Capital letters for White, small letters for Black"""
        symbol = SYMBOLS[self.type]
        return symbol.upper() if self.color == Color.WHITE else symbol

    def promote_to(self, new_type: PieceType) -> None:
        self.type = new_type


@dataclass(frozen=True)
class Placement:
    """One row of the placement table, in board-local coordinates"""

    type: PieceType
    color: Color
    board: Level
    x: int
    y: int


def _row(
    types: Iterable[PieceType], color: Color, board: Level, y: int
) -> list[Placement]:
    return [Placement(piece_type, color, board, x, y) for x, piece_type in enumerate(types)]


P, N, B, R, Q, K = (
    PieceType.PAWN,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
    PieceType.KING,
)

INITIAL_PLACEMENTS: list[Placement] = [
    # White: back rank + pawns on the main board and both attack boards
    *_row([N, B, B, N], Color.WHITE, Level.WHITE_MAIN, y=0),
    *_row([P, P, P, P], Color.WHITE, Level.WHITE_MAIN, y=1),
    *_row([R, Q], Color.WHITE, Level.WHITE_QUEEN_ATTACK, y=0),
    *_row([P, P], Color.WHITE, Level.WHITE_QUEEN_ATTACK, y=1),
    *_row([K, R], Color.WHITE, Level.WHITE_KING_ATTACK, y=0),
    *_row([P, P], Color.WHITE, Level.WHITE_KING_ATTACK, y=1),
    # Black: mirrored, the back rank is at the top of each board
    *_row([P, P, P, P], Color.BLACK, Level.BLACK_MAIN, y=2),
    *_row([N, B, B, N], Color.BLACK, Level.BLACK_MAIN, y=3),
    *_row([P, P], Color.BLACK, Level.BLACK_QUEEN_ATTACK, y=0),
    *_row([R, Q], Color.BLACK, Level.BLACK_QUEEN_ATTACK, y=1),
    *_row([P, P], Color.BLACK, Level.BLACK_KING_ATTACK, y=0),
    *_row([K, R], Color.BLACK, Level.BLACK_KING_ATTACK, y=1),
]


def create_initial_pieces(boards: Optional[list[Board]] = None) -> list[Piece]:
    """Convert the placement table into pieces with global positions. Ids follow the table order."""
    boards = boards if boards is not None else create_initial_boards()
    return [
        Piece(
            id=f"piece-{index}",
            type=placement.type,
            color=placement.color,
            position=board_local_to_global(
                placement.board.value, placement.x, placement.y, boards
            ),
        )
        for index, placement in enumerate(INITIAL_PLACEMENTS)
    ]


# --- Lookups over a piece list (pieces and boards only relate through the level id) ---
def piece_at(position: Position, pieces: Iterable[Piece]) -> Optional[Piece]:
    return next((piece for piece in pieces if piece.position == position), None)


def piece_by_id(piece_id: str, pieces: Iterable[Piece]) -> Optional[Piece]:
    return next((piece for piece in pieces if piece.id == piece_id), None)


def pieces_on_level(level: str, pieces: Iterable[Piece]) -> list[Piece]:
    return [piece for piece in pieces if piece.position.level == level]


def pieces_of_color(color: Color, pieces: Iterable[Piece]) -> list[Piece]:
    return [piece for piece in pieces if piece.color == color]


def find_king(color: Color, pieces: Iterable[Piece]) -> Optional[Piece]:
    return next(
        (
            piece
            for piece in pieces
            if piece.type == PieceType.KING and piece.color == color
        ),
        None,
    )
