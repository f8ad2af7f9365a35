"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess3d.position import ALGEBRAIC_PATTERN, LEVEL_ALIASES
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import BoardKind, Color, PieceType, Status

PieceId = str
Algebraic = str


# --- REQUEST MODELS ---
class SelectPieceRequest(BaseModel):
    piece_id: PieceId


class MoveRequest(BaseModel):
    piece_id: PieceId
    to_square: Algebraic

    @field_validator("to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        """Accept 'b3-WL', 'b3WL' or 'b3-W'. The level itself is checked by the rules, not here."""
        match = ALGEBRAIC_PATTERN.match(value.strip())
        if match is None:
            raise InvalidRequestError(
                f"Cannot interpret to_square: {value!r} as a valid square name."
            )
        _, _, level = match.groups()
        if len(level) == 1 and level not in LEVEL_ALIASES:
            raise InvalidRequestError(
                f"Unknown level alias {level!r} in to_square: {value!r}"
            )
        return value.strip()


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    id: PieceId
    type: PieceType
    color: Color
    square: Algebraic
    has_moved: bool
    moved_as_passenger: bool


class BoardView(BaseModel):
    id: str
    kind: BoardKind
    files: list[int]
    ranks: list[int]
    attached_to: Optional[str]


class GameStateResponse(BaseModel):
    """Everything a rendering layer reads from the engine"""

    pieces: list[PieceView]
    boards: list[BoardView]
    current_turn: Color
    status: Status
    check: Optional[Color]
    checkmate: Optional[Color]
    stalemate: bool
    selected_piece_id: Optional[PieceId]
    valid_moves: list[Algebraic]
    move_history: list[str]


class MoveResponse(BaseModel):
    accepted: bool
    reason: Optional[str]
    game: GameStateResponse
