"""Unit tests for /src/chess3d/attack_boards.py"""

import pytest

from src.chess3d.attack_boards import (
    BACKWARD_MOVE,
    NOT_AN_ATTACK_BOARD,
    OFF_GRID,
    TOO_MANY_PASSENGERS,
    can_move_attack_board,
    legal_anchors,
    validate_attack_board_move,
)
from src.chess3d.boards import Anchor, Board, board_by_id
from src.core.shared_types import Color, PieceType
from tests.helpers import make_piece


@pytest.fixture
def white_queen_board(boards: list[Board]) -> Board:
    return board_by_id("WQL", boards)


def test_empty_attack_board_moves_anywhere_on_the_grid(white_queen_board: Board) -> None:
    assert can_move_attack_board(white_queen_board, Anchor(4, 8), [])
    assert can_move_attack_board(white_queen_board, Anchor(2, 4), [])


def test_main_boards_cannot_be_relocated(boards: list[Board]) -> None:
    result = validate_attack_board_move(board_by_id("NL", boards), Anchor(1, 2), [])
    assert not result.valid
    assert result.reason == NOT_AN_ATTACK_BOARD


def test_two_passengers_freeze_the_board(white_queen_board: Board) -> None:
    pieces = [
        make_piece(PieceType.PAWN, Color.WHITE, "z1-WQL"),
        make_piece(PieceType.PAWN, Color.WHITE, "a1-WQL"),
    ]
    result = validate_attack_board_move(white_queen_board, Anchor(0, 2), pieces)
    assert not result.valid
    assert result.reason == TOO_MANY_PASSENGERS


def test_single_passenger_moves_forward_or_sideways(white_queen_board: Board) -> None:
    pieces = [make_piece(PieceType.ROOK, Color.WHITE, "z0-WQL")]
    assert can_move_attack_board(white_queen_board, Anchor(0, 2), pieces)
    assert can_move_attack_board(white_queen_board, Anchor(4, 0), pieces)


def test_white_passenger_cannot_go_backward(white_queen_board: Board) -> None:
    advanced = white_queen_board.with_anchor(Anchor(0, 4))
    pieces = [make_piece(PieceType.ROOK, Color.WHITE, "z4-WQL")]
    result = validate_attack_board_move(advanced, Anchor(0, 2), pieces)
    assert not result.valid
    assert result.reason == BACKWARD_MOVE


def test_black_passenger_backward_is_up_the_ranks(boards: list[Board]) -> None:
    board = board_by_id("BQL", boards).with_anchor(Anchor(0, 6))
    pieces = [make_piece(PieceType.QUEEN, Color.BLACK, "a7-BQL")]
    assert not can_move_attack_board(board, Anchor(0, 8), pieces)
    assert can_move_attack_board(board, Anchor(0, 4), pieces)


def test_passenger_color_decides_direction(white_queen_board: Board) -> None:
    """Backward is judged by the color of the passenger, not by who owns the board."""
    advanced = white_queen_board.with_anchor(Anchor(0, 4))
    pieces = [make_piece(PieceType.KNIGHT, Color.BLACK, "a5-WQL")]
    assert can_move_attack_board(advanced, Anchor(0, 2), pieces)
    assert not can_move_attack_board(advanced, Anchor(0, 6), pieces)


@pytest.mark.parametrize("anchor", [Anchor(5, 0), Anchor(0, 9), Anchor(-1, 2)])
def test_board_must_stay_on_the_grid(white_queen_board: Board, anchor: Anchor) -> None:
    result = validate_attack_board_move(white_queen_board, anchor, [])
    assert not result.valid
    assert result.reason == OFF_GRID


def test_legal_anchors_of_an_empty_board(white_queen_board: Board) -> None:
    """5 x 9 anchors fit the grid, minus the one the board already sits on"""
    anchors = legal_anchors(white_queen_board, [])
    assert len(anchors) == 44
    assert white_queen_board.anchor not in anchors


def test_legal_anchors_with_a_white_passenger(white_queen_board: Board) -> None:
    advanced = white_queen_board.with_anchor(Anchor(0, 2))
    pieces = [make_piece(PieceType.PAWN, Color.WHITE, "a3-WQL")]
    anchors = legal_anchors(advanced, pieces)
    assert len(anchors) == 34
    assert all(anchor.rank_offset >= 2 for anchor in anchors)


def test_legal_anchors_of_a_frozen_board(white_queen_board: Board) -> None:
    pieces = [
        make_piece(PieceType.PAWN, Color.WHITE, "z1-WQL"),
        make_piece(PieceType.PAWN, Color.WHITE, "a1-WQL"),
    ]
    assert legal_anchors(white_queen_board, pieces) == []
