"""Unit tests for src/core/models.py"""

import pytest
from pydantic import ValidationError

from src.core.models import (
    AnchorModel,
    AttackBoardMoveModel,
    BoardModel,
    GameModel,
    MoveModel,
    PieceModel,
    PositionModel,
)
from src.core.shared_types import BoardKind, Color, PieceType


def _pawn() -> PieceModel:
    return PieceModel(
        id="piece-5",
        type=PieceType.PAWN,
        color=Color.WHITE,
        position=PositionModel(file=2, rank=3, level="WL"),
    )


def test_document_uses_camel_case_keys() -> None:
    model = GameModel(
        pieces=[_pawn()],
        boards=[
            BoardModel(
                id="WQL",
                kind=BoardKind.ATTACK,
                files=2,
                ranks=2,
                file_offset=0,
                rank_offset=0,
                attached_to="WL",
            )
        ],
        current_turn=Color.WHITE,
    )
    document = model.to_document()

    assert set(document) == {"pieces", "boards", "currentTurn", "moveHistory", "stalemate"}
    assert document["pieces"][0]["hasMoved"] is False
    assert document["pieces"][0]["movedAsPassenger"] is False
    assert document["boards"][0]["fileOffset"] == 0
    assert document["boards"][0]["attachedTo"] == "WL"


def test_optional_fields_present_when_set() -> None:
    model = GameModel(
        pieces=[],
        boards=[],
        current_turn=Color.BLACK,
        check=Color.BLACK,
        en_passant_target=PositionModel(file=2, rank=4, level="NL"),
    )
    document = model.to_document()
    assert document["check"] == "black"
    assert document["enPassantTarget"] == {"file": 2, "rank": 4, "level": "NL"}
    assert "checkmate" not in document


def test_move_uses_from_and_to() -> None:
    move = MoveModel(
        piece=_pawn(),
        from_position=PositionModel(file=2, rank=3, level="WL"),
        to_position=PositionModel(file=2, rank=4, level="WL"),
        attack_board_move=AttackBoardMoveModel(
            board_id="WQL",
            from_anchor=AnchorModel(file_offset=0, rank_offset=0),
            to_anchor=AnchorModel(file_offset=0, rank_offset=2),
        ),
    )
    document = move.model_dump(mode="json", by_alias=True, exclude_none=True)

    assert document["from"] == {"file": 2, "rank": 3, "level": "WL"}
    assert document["to"]["rank"] == 4
    assert document["attackBoardMove"]["to"] == {"fileOffset": 0, "rankOffset": 2}
    assert "capturedPiece" not in document


def test_parse_json_document() -> None:
    json_document = """
    {
        "pieces": [
            {"id": "piece-12", "type": "king", "color": "white",
             "position": {"file": 4, "rank": 0, "level": "WKL"}, "hasMoved": true}
        ],
        "boards": [],
        "currentTurn": "black",
        "moveHistory": [
            {"piece": {"id": "piece-12", "type": "king", "color": "white",
                       "position": {"file": 4, "rank": 1, "level": "WKL"}},
             "from": {"file": 4, "rank": 1, "level": "WKL"},
             "to": {"file": 4, "rank": 0, "level": "WKL"}}
        ],
        "stalemate": false
    }
    """
    model = GameModel.model_validate_json(json_document)

    assert model.current_turn == Color.BLACK
    assert model.pieces[0].has_moved
    assert not model.pieces[0].moved_as_passenger
    assert model.move_history[0].to_position.rank == 0
    assert model.check is None


@pytest.mark.parametrize(
    "json_document",
    [
        "not json at all",
        '{"pieces": [], "boards": []}',  # no current turn
        '{"pieces": [], "boards": [], "currentTurn": "green"}',
        '{"pieces": [{"id": "x", "type": "wizard", "color": "white",'
        ' "position": {"file": 1, "rank": 1, "level": "WL"}}], "boards": [], "currentTurn": "white"}',
        '{"pieces": [{"id": "x", "type": "pawn", "color": "white",'
        ' "position": {"file": -1, "rank": 1, "level": "WL"}}], "boards": [], "currentTurn": "white"}',
    ],
)
def test_malformed_documents_fail_validation(json_document: str) -> None:
    with pytest.raises(ValidationError):
        _ = GameModel.model_validate_json(json_document)
