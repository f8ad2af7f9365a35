"""
Orchestration between the caller (UI / API layer), the rules engine and the persistence layer.

The service is the one place that holds the current GameState. Every command swaps it for the
new value produced by the engine.
"""

import logging

from pydantic import ValidationError

from src.api.models import (
    BoardView,
    GameStateResponse,
    MoveRequest,
    MoveResponse,
    PieceView,
    SelectPieceRequest,
)
from src.chess3d.game import (
    GameState,
    create_initial_game_state,
    deselect_piece,
    deserialize_game_state,
    execute_move,
    game_status,
    select_piece,
    serialize_game_state,
    undo_last_move,
)
from src.chess3d.moves import moves_to_notation
from src.chess3d.pieces import Piece, piece_by_id
from src.chess3d.position import Position
from src.core.exceptions import GameError, PieceNotFoundError
from src.core.models import GameModel
from src.db.repository import GameRepository

logger = logging.getLogger(__name__)

STORAGE_KEY = "tri_dim_chess_save"


class ChessService:
    """Session for a single game, with save/load through a repository"""

    def __init__(self, repository: GameRepository, storage_key: str = STORAGE_KEY) -> None:
        self.repo = repository
        self.storage_key = storage_key
        self.state: GameState = create_initial_game_state()

    # -- Commands ---
    def get_state(self) -> GameStateResponse:
        return self._create_state_response(self.state)

    def new_game(self) -> GameStateResponse:
        logger.info("Starting a new game")
        self.state = create_initial_game_state()
        return self.get_state()

    def select_piece(self, request: SelectPieceRequest) -> GameStateResponse:
        """Selecting the opponent's piece is silently ignored by the engine."""
        piece = self._fetch_piece(request.piece_id)
        self.state = select_piece(self.state, piece)
        return self.get_state()

    def deselect_piece(self) -> GameStateResponse:
        self.state = deselect_piece(self.state)
        return self.get_state()

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Attempt a move.
        ----

        An illegal move is not an error: the response says why it was refused and the state stays as it was.
        """
        piece = self._fetch_piece(request.piece_id)
        destination = Position.from_algebraic(request.to_square)
        outcome = execute_move(self.state, piece, destination)
        if outcome.state is None:
            logger.warning(
                "Move %s -> %s refused: %s",
                request.piece_id,
                request.to_square,
                outcome.reason,
            )
        else:
            self.state = outcome.state
        return MoveResponse(
            accepted=outcome.accepted,
            reason=outcome.reason,
            game=self.get_state(),
        )

    def undo_move(self) -> GameStateResponse:
        self.state = undo_last_move(self.state)
        return self.get_state()

    def save_game(self) -> None:
        document = serialize_game_state(self.state).to_json()
        self.repo.save_document(self.storage_key, document)
        logger.info(
            "Saved game under %r (%d moves)",
            self.storage_key,
            len(self.state.move_history),
        )

    def load_game(self) -> bool:
        """
        Replace the current game with the saved one.

        A missing, malformed or incompatible document is logged and ignored: the current game carries on untouched.
        """
        document = self.repo.get_document(self.storage_key)
        if document is None:
            logger.info("No saved game under %r", self.storage_key)
            return False

        try:
            model = GameModel.model_validate_json(document)
            loaded = deserialize_game_state(model)
        except (ValidationError, GameError):
            logger.exception("Failed to load game saved under %r", self.storage_key)
            return False

        self.state = loaded
        logger.info("Loaded game saved under %r", self.storage_key)
        return True

    # -- Internal helpers --
    def _fetch_piece(self, piece_id: str) -> Piece:
        """Attempt to find the piece in the current game and raise error if it fails."""
        piece = piece_by_id(piece_id, self.state.pieces)
        if piece is None:
            raise PieceNotFoundError(f"Piece with {piece_id=} not found.")
        return piece

    def _create_state_response(self, state: GameState) -> GameStateResponse:
        return GameStateResponse(
            pieces=[
                PieceView(
                    id=piece.id,
                    type=piece.type,
                    color=piece.color,
                    square=piece.position.to_algebraic(),
                    has_moved=piece.has_moved,
                    moved_as_passenger=piece.moved_as_passenger,
                )
                for piece in state.pieces
            ],
            boards=[
                BoardView(
                    id=board.id,
                    kind=board.kind,
                    files=list(board.file_range),
                    ranks=list(board.rank_range),
                    attached_to=board.attached_to,
                )
                for board in state.boards
            ],
            current_turn=state.current_turn,
            status=game_status(state),
            check=state.check,
            checkmate=state.checkmate,
            stalemate=state.stalemate,
            selected_piece_id=state.selected_piece.id if state.selected_piece else None,
            valid_moves=[square.to_algebraic() for square in state.valid_moves],
            move_history=moves_to_notation(state.move_history),
        )
