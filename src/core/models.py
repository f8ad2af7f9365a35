"""
Boundary layer data model(s).

The save document: a transport-safe projection of the game state that both the Service
(for save/load) and the domain layer (serialize/deserialize) agree on.
It carries only JSON types and never the UI-only fields (selected piece, valid moves).

Document shape (camelCase keys):
{pieces, boards, currentTurn, moveHistory, check?, checkmate?, stalemate, enPassantTarget?}
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.core.shared_types import BoardKind, Color, PieceType


class DocumentModel(BaseModel):
    """camelCase on the wire, snake_case in Python"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PositionModel(DocumentModel):
    file: int = Field(ge=0)
    rank: int = Field(ge=0)
    level: str


class PieceModel(DocumentModel):
    id: str
    type: PieceType
    color: Color
    position: PositionModel
    has_moved: bool = False
    moved_as_passenger: bool = False


class BoardModel(DocumentModel):
    id: str
    kind: BoardKind
    files: int = Field(gt=0)
    ranks: int = Field(gt=0)
    file_offset: int
    rank_offset: int
    attached_to: Optional[str] = None


class AnchorModel(DocumentModel):
    file_offset: int
    rank_offset: int


class AttackBoardMoveModel(DocumentModel):
    board_id: str
    from_anchor: AnchorModel = Field(alias="from")
    to_anchor: AnchorModel = Field(alias="to")


class MoveModel(DocumentModel):
    piece: PieceModel
    from_position: PositionModel = Field(alias="from")
    to_position: PositionModel = Field(alias="to")
    captured_piece: Optional[PieceModel] = None
    promotion_type: Optional[PieceType] = None
    attack_board_move: Optional[AttackBoardMoveModel] = None


class GameModel(DocumentModel):
    """The saved game. No schema version: an incompatible document simply fails validation."""

    pieces: list[PieceModel]
    boards: list[BoardModel]
    current_turn: Color
    move_history: list[MoveModel] = []
    check: Optional[Color] = None
    checkmate: Optional[Color] = None
    stalemate: bool = False
    en_passant_target: Optional[PositionModel] = None

    def to_document(self) -> dict[str, Any]:
        """JSON-ready dict with the optional fields left out when absent"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
