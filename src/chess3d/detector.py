"""
Check, checkmate and stalemate detection.

Everything here works on a piece list + board list, so the Game can ask the same questions
about the real position and about simulated ones.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Optional

from src.chess3d.boards import Board
from src.chess3d.moves import candidate_moves, forward_direction, validate_move
from src.chess3d.pieces import Piece, find_king, piece_at, pieces_of_color
from src.chess3d.position import Position
from src.core.shared_types import Color, PieceType, opponent


@dataclass(frozen=True)
class Outcome:
    """How the game stands for the player about to move"""

    check: Optional[Color] = None  # color whose king is attacked
    checkmate: Optional[Color] = None  # color that delivered mate (the winner)
    stalemate: bool = False


def is_square_under_attack(
    position: Position, by_color: Color, pieces: list[Piece], boards: list[Board]
) -> bool:
    """Could any piece of `by_color` move onto the square? (Own king safety of the attacker is irrelevant.)"""
    return any(
        validate_move(piece, position, pieces, boards).valid
        for piece in pieces_of_color(by_color, pieces)
    )


def is_king_in_check(color: Color, pieces: list[Piece], boards: list[Board]) -> bool:
    """A position without a king for that color is never check."""
    king = find_king(color, pieces)
    if king is None:
        return False
    return is_square_under_attack(king.position, opponent(color), pieces, boards)


def en_passant_victim_square(piece: Piece, en_passant_target: Position) -> Position:
    """The pawn taken en passant stands one rank behind the target square (seen from the capturer)."""
    return en_passant_target.offset(0, -forward_direction(piece.color))


def is_en_passant_capture(
    piece: Piece, to: Position, en_passant_target: Optional[Position]
) -> bool:
    """Only a diagonal step onto the target takes en passant. A straight push onto it is a plain move."""
    return (
        piece.type == PieceType.PAWN
        and en_passant_target is not None
        and to == en_passant_target
        and abs(to.file - piece.position.file) == 1
    )


def simulate_move(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    en_passant_target: Optional[Position] = None,
) -> list[Piece]:
    """
    Play the move on a cloned piece list.
    ----

    1. Copy the pieces
    2. remove whatever gets captured (including a pawn taken en passant)
    3. relocate the moving piece
    """
    simulated = deepcopy(pieces)
    captured = piece_at(to, simulated)
    if captured is not None and captured.id != piece.id:
        simulated.remove(captured)

    if is_en_passant_capture(piece, to, en_passant_target):
        assert en_passant_target is not None
        victim = piece_at(en_passant_victim_square(piece, en_passant_target), simulated)
        if victim is not None and victim.color != piece.color:
            simulated.remove(victim)

    moving = next(p for p in simulated if p.id == piece.id)
    moving.position = to
    return simulated


def leaves_king_in_check(
    piece: Piece,
    to: Position,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> bool:
    """Return True if making the move would put (or leave) your own king in check"""
    simulated = simulate_move(piece, to, pieces, en_passant_target)
    return is_king_in_check(piece.color, simulated, boards)


def legal_moves(
    piece: Piece,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> list[Position]:
    """Geometrically valid destinations that keep the mover's king safe"""
    return [
        to
        for to in candidate_moves(piece, boards)
        if validate_move(piece, to, pieces, boards, en_passant_target).valid
        and not leaves_king_in_check(piece, to, pieces, boards, en_passant_target)
    ]


def has_no_legal_moves(
    color: Color,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> bool:
    """Stops at the first safe move found"""
    for piece in pieces_of_color(color, pieces):
        for to in candidate_moves(piece, boards):
            if not validate_move(piece, to, pieces, boards, en_passant_target).valid:
                continue
            if not leaves_king_in_check(piece, to, pieces, boards, en_passant_target):
                return False
    return True


def resolve_outcome(
    next_color: Color,
    pieces: list[Piece],
    boards: list[Board],
    en_passant_target: Optional[Position] = None,
) -> Outcome:
    """
    Evaluated for the player about to move:

    * no legal moves and in check --> checkmate (the player who just moved wins)
    * no legal moves, not in check --> stalemate
    * otherwise the game goes on, flagging check if the king is attacked
    """
    in_check = is_king_in_check(next_color, pieces, boards)
    stuck = has_no_legal_moves(next_color, pieces, boards, en_passant_target)
    check = next_color if in_check else None
    if stuck and in_check:
        return Outcome(check=check, checkmate=opponent(next_color))
    if stuck:
        return Outcome(stalemate=True)
    return Outcome(check=check)
