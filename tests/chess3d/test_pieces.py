"""Unit tests for /src/chess3d/pieces.py"""

from collections import Counter

import pytest

from src.chess3d.boards import Board, position_exists
from src.chess3d.pieces import (
    create_initial_pieces,
    find_king,
    piece_at,
    piece_by_id,
    pieces_of_color,
    pieces_on_level,
)
from src.core.shared_types import Color, PieceType
from tests.helpers import make_piece, sq


def test_thirty_two_pieces_with_unique_ids_and_squares(boards: list[Board]) -> None:
    pieces = create_initial_pieces(boards)

    assert len(pieces) == 32
    assert len({piece.id for piece in pieces}) == 32
    assert len({piece.position for piece in pieces}) == 32
    assert pieces[0].id == "piece-0"
    assert all(position_exists(piece.position, boards) for piece in pieces)
    assert not any(piece.has_moved or piece.moved_as_passenger for piece in pieces)


@pytest.mark.parametrize("color", [Color.WHITE, Color.BLACK])
def test_each_side_has_a_full_set(boards: list[Board], color: Color) -> None:
    counts = Counter(piece.type for piece in pieces_of_color(color, create_initial_pieces(boards)))
    assert counts == {
        PieceType.PAWN: 8,
        PieceType.KNIGHT: 2,
        PieceType.BISHOP: 2,
        PieceType.ROOK: 2,
        PieceType.QUEEN: 1,
        PieceType.KING: 1,
    }


@pytest.mark.parametrize(
    "square, piece_type, color",
    [
        ("a2-WL", PieceType.KNIGHT, Color.WHITE),
        ("b2-WL", PieceType.BISHOP, Color.WHITE),
        ("c3-WL", PieceType.PAWN, Color.WHITE),
        ("z0-WQL", PieceType.ROOK, Color.WHITE),
        ("a0-WQL", PieceType.QUEEN, Color.WHITE),
        ("d0-WKL", PieceType.KING, Color.WHITE),
        ("e1-WKL", PieceType.PAWN, Color.WHITE),
        ("b8-BL", PieceType.PAWN, Color.BLACK),
        ("d9-BL", PieceType.KNIGHT, Color.BLACK),
        ("a9-BQL", PieceType.QUEEN, Color.BLACK),
        ("z8-BQL", PieceType.PAWN, Color.BLACK),
        ("d9-BKL", PieceType.KING, Color.BLACK),
        ("e9-BKL", PieceType.ROOK, Color.BLACK),
    ],
)
def test_initial_placement(
    boards: list[Board], square: str, piece_type: PieceType, color: Color
) -> None:
    piece = piece_at(sq(square), create_initial_pieces(boards))
    assert piece is not None
    assert (piece.type, piece.color) == (piece_type, color)


def test_neutral_level_starts_empty(boards: list[Board]) -> None:
    assert pieces_on_level("NL", create_initial_pieces(boards)) == []


def test_symbols() -> None:
    assert make_piece(PieceType.KNIGHT, Color.WHITE, "a2-WL").symbol == "N"
    assert make_piece(PieceType.KING, Color.BLACK, "d9-BKL").symbol == "k"


def test_lookups() -> None:
    king = make_piece(PieceType.KING, Color.WHITE, "d0-WKL", piece_id="k1")
    pawn = make_piece(PieceType.PAWN, Color.BLACK, "b8-BL", piece_id="p1")
    pieces = [king, pawn]

    assert piece_by_id("p1", pieces) is pawn
    assert piece_by_id("nope", pieces) is None
    assert find_king(Color.WHITE, pieces) is king
    assert find_king(Color.BLACK, pieces) is None
    assert piece_at(sq("b8-NL"), pieces) is None


def test_promote_to_queen() -> None:
    pawn = make_piece(PieceType.PAWN, Color.WHITE, "b7-BL")
    pawn.promote_to(PieceType.QUEEN)
    assert pawn.type == PieceType.QUEEN
