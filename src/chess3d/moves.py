"""
Geometry/Base movement and capturing rules across the three levels

Key idea: Use strategy pattern to define, for each piece type,
* a candidate generator: every square the piece could geometrically reach (no occupancy checks yet)
* a legality predicate: does the geometry (and, for sliding pieces, the path) allow this particular destination?

Whether a move leaves your own king in check is decided later by the detector.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from src.chess3d.boards import Anchor, Board, position_exists
from src.chess3d.pieces import SYMBOLS, Piece, piece_at
from src.chess3d.position import Position
from src.core.shared_types import Color, PieceType

Vector = tuple[int, int]

ORTHOGONALS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = ORTHOGONALS + DIAGONALS

# Longest slide along the 10-rank grid
MAX_SLIDE = 9

# Central files b and c promote one rank earlier than the outer files z, a, d and e
CENTRAL_FILES = (2, 3)


# --- REASONS FOR REJECTING A MOVE ---
SAME_SQUARE = "Cannot move to same position"
OFF_BOARD = "Destination does not exist on any board"
OWN_PIECE = "Cannot capture own piece"
VERTICAL_SHADOW = "Cannot move vertically without horizontal displacement"
LEAVES_KING_IN_CHECK = "Move would leave own king in check"


def invalid_geometry(piece_type: PieceType) -> str:
    return f"Invalid {piece_type} move"


@dataclass(frozen=True)
class MoveValidationResult:
    """Rule violations are reported, never raised."""

    valid: bool
    reason: Optional[str] = None
    captured_piece: Optional[Piece] = None


@dataclass(frozen=True)
class AttackBoardMove:
    """Relocation of an attack board from one anchor to another"""

    board_id: str
    from_anchor: Anchor
    to_anchor: Anchor


@dataclass
class Move:
    """A committed move. `piece` is a snapshot taken BEFORE the move was played."""

    piece: Piece
    from_position: Position
    to_position: Position
    captured_piece: Optional[Piece] = None
    promotion_type: Optional[PieceType] = None
    attack_board_move: Optional[AttackBoardMove] = None

    def to_notation(self) -> str:
        """
        Human readable record for a move list.

        ex)
        * "Pb3-WL-b4-WL": pawn push from b3 on White's level to b4 on White's level
        * "Bxb3-WL-d5-NL": bishop captures on the neutral level
        * "Pb7-BL-b8-BL=Q": pawn reaches its promotion rank and becomes a queen
        """
        letter = SYMBOLS[self.piece.type].upper()
        capture = "x" if self.captured_piece else ""
        promotion = (
            f"={SYMBOLS[self.promotion_type].upper()}" if self.promotion_type else ""
        )
        return f"{letter}{capture}{self.from_position.to_algebraic()}-{self.to_position.to_algebraic()}{promotion}"


def forward_direction(color: Color) -> int:
    """White moves UP the ranks, Black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def is_promotion_square(position: Position, color: Color) -> bool:
    """Central files promote on rank 8 (White) / 1 (Black), the outer files on rank 9 / 0."""
    if position.file in CENTRAL_FILES:
        return position.rank == (8 if color == Color.WHITE else 1)
    return position.rank == (9 if color == Color.WHITE else 0)


# --- CANDIDATE GENERATORS ---
def _on_every_level(file: int, rank: int, boards: list[Board]) -> list[Position]:
    """
    One (file, rank) offset can land on several levels at once.
    Every level that really has the square is a separate candidate (no deduplication).
    """
    candidates: list[Position] = []
    for board in boards:
        target = Position(file, rank, board.id)
        if position_exists(target, boards):
            candidates.append(target)
    return candidates


def single_step_candidates(
    square: Position, boards: list[Board], deltas: list[Vector]
) -> list[Position]:
    """For knights and kings: one jump per delta, onto any level"""
    candidates: list[Position] = []
    for df, dr in deltas:
        candidates.extend(_on_every_level(square.file + df, square.rank + dr, boards))
    return candidates


def sliding_candidates(
    square: Position, boards: list[Board], directions: list[Vector]
) -> list[Position]:
    """
    Sliding pieces: walk 1..9 squares along every direction, trying every level at each distance.

    NOTE: Unlike the classic raycast, we do not stop at the first occupied square:
    blocking is only decided by the legality predicate (and only on the source level).
    """
    candidates: list[Position] = []
    for df, dr in directions:
        for distance in range(1, MAX_SLIDE + 1):
            candidates.extend(
                _on_every_level(
                    square.file + df * distance, square.rank + dr * distance, boards
                )
            )
    return candidates


def candidate_pawn_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    """
    A pawn:
    - moves a single square forward, onto whichever level has that square
    - moves two squares forward on its first move (the predicate decides if it still may)
    - takes diagonally, one file over and one rank forward
    """
    square = piece.position
    direction = forward_direction(piece.color)
    candidates: list[Position] = []
    for steps in (1, 2):
        candidates.extend(
            _on_every_level(square.file, square.rank + steps * direction, boards)
        )
    for df in (-1, 1):
        candidates.extend(
            _on_every_level(square.file + df, square.rank + direction, boards)
        )
    return candidates


def candidate_knight_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    """Knights always jump such that |delta_rank| + |delta_file| = 3"""
    return single_step_candidates(piece.position, boards, KNIGHT_DELTAS)


def candidate_bishop_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    return sliding_candidates(piece.position, boards, DIAGONALS)


def candidate_rook_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    return sliding_candidates(piece.position, boards, ORTHOGONALS)


def candidate_queen_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    return sliding_candidates(piece.position, boards, ORTHOGONALS + DIAGONALS)


def candidate_king_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    return single_step_candidates(piece.position, boards, KING_DELTAS)


# -- STRATEGY PATTERN: CANDIDATE GENERATORS ---
CandidateMovesFn = Callable[[Piece, list[Board]], list[Position]]
CANDIDATE_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- LEGALITY PREDICATES ---
def is_path_clear(
    from_square: Position,
    to_square: Position,
    pieces: list[Piece],
    boards: list[Board],
) -> bool:
    """
    Every square strictly between the two (on a straight line or diagonal) must be empty.

    Only meaningful on a single level. Cross-level slides are accepted without looking at the
    squares in between: that is how the rules are implemented, gap included.
    """
    if from_square.level != to_square.level:
        return True

    df = _sign(to_square.file - from_square.file)
    dr = _sign(to_square.rank - from_square.rank)
    current = from_square.offset(df, dr)
    while not current.same_column(to_square):
        if position_exists(current, boards) and piece_at(current, pieces):
            return False
        current = current.offset(df, dr)
    return True


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_valid_pawn_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    direction = forward_direction(piece.color)
    from_square = piece.position
    file_diff = to.file - from_square.file
    rank_diff = to.rank - from_square.rank

    if file_diff == 0:
        # single push: destination must be empty
        if rank_diff == direction:
            return piece_at(to, pieces) is None

        # double push: never moved, never carried along as passenger, both squares empty
        if (
            rank_diff == 2 * direction
            and not piece.has_moved
            and not piece.moved_as_passenger
        ):
            intermediate = from_square.offset(0, direction)
            return piece_at(to, pieces) is None and piece_at(intermediate, pieces) is None

    # diagonal: capture an enemy piece (on any level) or take en passant
    if abs(file_diff) == 1 and rank_diff == direction:
        target = piece_at(to, pieces)
        if target is not None and target.color != piece.color:
            return True
        if en_passant_target is not None and to == en_passant_target:
            return True

    return False


def is_valid_knight_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    """Knights jump: no intervening squares, no vertical shadow, any level at the landing square"""
    from_square = piece.position
    delta = (to.file - from_square.file, to.rank - from_square.rank)
    return delta in KNIGHT_DELTAS and position_exists(to, boards)


def is_valid_bishop_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    from_square = piece.position
    if abs(to.file - from_square.file) != abs(to.rank - from_square.rank):
        return False
    return is_path_clear(from_square, to, pieces, boards)


def is_valid_rook_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    """Rooks move along a file or a rank, never both"""
    from_square = piece.position
    if to.file != from_square.file and to.rank != from_square.rank:
        return False
    return is_path_clear(from_square, to, pieces, boards)


def is_valid_queen_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_rook_move(
        piece, to, pieces, boards, en_passant_target
    ) or is_valid_bishop_move(piece, to, pieces, boards, en_passant_target)


def is_valid_king_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position],
) -> bool:
    """The king can move by a single square at the time, onto any level"""
    from_square = piece.position
    close_by = (
        abs(to.file - from_square.file) <= 1 and abs(to.rank - from_square.rank) <= 1
    )
    return close_by and position_exists(to, boards)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
IsValidMoveFn = Callable[
    [Piece, Position, list[Piece], list[Board], Optional[Position]], bool
]
MOVEMENT_RULES: dict[PieceType, IsValidMoveFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}


def is_vertical_move(from_square: Position, to: Position) -> bool:
    """Same file and rank, other level: a straight up/down move"""
    return from_square.same_column(to) and from_square.level != to.level


def validate_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> MoveValidationResult:
    """
    Geometric + occupancy legality of a single move.
    ----

    1. cannot stay where you are
    2. destination must exist on one of the (current) boards
    3. cannot capture your own piece
    4. no piece but the knight may move purely vertically (vertical shadow)
    5. the piece's own movement rule

    NOTE: does NOT check whether the move leaves your own king in check.
    """
    if piece.position == to:
        return MoveValidationResult(False, SAME_SQUARE)

    if not position_exists(to, boards):
        return MoveValidationResult(False, OFF_BOARD)

    target = piece_at(to, pieces)
    if target is not None and target.color == piece.color:
        return MoveValidationResult(False, OWN_PIECE)

    if piece.type != PieceType.KNIGHT and is_vertical_move(piece.position, to):
        return MoveValidationResult(False, VERTICAL_SHADOW)

    movement_rule: IsValidMoveFn = MOVEMENT_RULES[piece.type]
    if not movement_rule(piece, to, pieces, boards, en_passant_target):
        return MoveValidationResult(False, invalid_geometry(piece.type))

    return MoveValidationResult(True, captured_piece=target)


def candidate_moves(piece: Piece, boards: list[Board]) -> list[Position]:
    """Every geometrically reachable square, before occupancy and check are considered"""
    generator: CandidateMovesFn = CANDIDATE_RULES[piece.type]
    return generator(piece, boards)


def get_valid_moves(
    piece: Piece,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> list[Position]:
    """Candidates that pass `validate_move`. Self-check is filtered by the detector."""
    return [
        to
        for to in candidate_moves(piece, boards)
        if validate_move(piece, to, pieces, boards, en_passant_target).valid
    ]


def moves_to_notation(moves: Iterable[Move]) -> list[str]:
    return [move.to_notation() for move in moves]
