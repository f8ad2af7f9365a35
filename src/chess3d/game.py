"""
The game state manager is the entrypoint into the domain layer for the service layer.

Every operation is a pure transition: it takes the current GameState (plus input) and returns a new
GameState, or reports why it refused. A state that may still be referenced by history is never mutated.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field, replace
from typing import Optional

from src.chess3d.boards import (
    INITIAL_BOARDS,
    Anchor,
    Board,
    Level,
    board_by_id,
    create_initial_boards,
    find_board,
)
from src.chess3d.detector import (
    en_passant_victim_square,
    is_en_passant_capture,
    is_king_in_check,
    legal_moves,
    resolve_outcome,
    simulate_move,
)
from src.chess3d.moves import (
    LEAVES_KING_IN_CHECK,
    AttackBoardMove,
    Move,
    forward_direction,
    is_promotion_square,
    validate_move,
)
from src.chess3d.pieces import (
    Piece,
    create_initial_pieces,
    piece_at,
    piece_by_id,
    pieces_of_color,
)
from src.chess3d.position import Position
from src.core.exceptions import GameStateError
from src.core.models import (
    AnchorModel,
    AttackBoardMoveModel,
    BoardModel,
    GameModel,
    MoveModel,
    PieceModel,
    PositionModel,
)
from src.core.shared_types import BoardKind, Color, PieceType, Status, opponent

logger = logging.getLogger(__name__)

GAME_OVER = "Game is over"
PIECE_NOT_FOUND = "Piece is not on the board"
NOT_YOUR_TURN = "Piece does not belong to the side to move"

# Pawns reaching their promotion rank always become a queen (no choice offered)
AUTO_PROMOTION = PieceType.QUEEN


@dataclass(frozen=True)
class GameState:
    # --- persisted ---
    pieces: list[Piece]
    boards: list[Board]
    current_turn: Color
    move_history: list[Move] = field(default_factory=list)
    en_passant_target: Optional[Position] = None
    check: Optional[Color] = None
    checkmate: Optional[Color] = None  # the winner
    stalemate: bool = False

    # --- UI only, never serialized ---
    selected_piece: Optional[Piece] = None
    valid_moves: list[Position] = field(default_factory=list)


@dataclass(frozen=True)
class MoveOutcome:
    """Either the state after the move, or the reason the move was refused"""

    state: Optional[GameState]
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.state is not None


def create_initial_game_state() -> GameState:
    boards = create_initial_boards()
    return GameState(
        pieces=create_initial_pieces(boards),
        boards=boards,
        current_turn=Color.WHITE,
    )


def game_status(state: GameState) -> Status:
    if state.checkmate is not None:
        return Status.CHECKMATE
    if state.stalemate:
        return Status.STALEMATE
    if state.check is not None:
        return Status.CHECK
    return Status.IN_PROGRESS


def is_game_over(state: GameState) -> bool:
    return game_status(state) in (Status.CHECKMATE, Status.STALEMATE)


def execute_move(state: GameState, piece: Piece, to: Position) -> MoveOutcome:
    """
    Attempt a move
    -----

    1. refuse if the game has ended, the piece is unknown or it is not that side's turn
    2. geometric / occupancy legality (validate_move)
    3. play it on a copy of the pieces: remove the captured piece (en passant: the pawn behind the target square)
    4. refuse if your own king is (still) in check
    5. mark the piece as moved, set a new en passant target after a double push, auto-promote to a queen
    6. record the move, hand the turn over, and evaluate check / checkmate / stalemate for the next player
    """
    if is_game_over(state):
        return _reject(GAME_OVER, piece, to)

    # always work with the state's own version of the piece
    mover = piece_by_id(piece.id, state.pieces)
    if mover is None:
        return _reject(PIECE_NOT_FOUND, piece, to)
    if mover.color != state.current_turn:
        return _reject(NOT_YOUR_TURN, mover, to)

    validation = validate_move(
        mover, to, state.pieces, state.boards, state.en_passant_target
    )
    if not validation.valid:
        return _reject(validation.reason or "Illegal move", mover, to)

    pieces = simulate_move(mover, to, state.pieces, state.en_passant_target)
    if is_king_in_check(mover.color, pieces, state.boards):
        return _reject(LEAVES_KING_IN_CHECK, mover, to)

    captured = validation.captured_piece
    if is_en_passant_capture(mover, to, state.en_passant_target):
        assert state.en_passant_target is not None
        captured = piece_at(
            en_passant_victim_square(mover, state.en_passant_target), state.pieces
        )

    moved = piece_by_id(mover.id, pieces)
    assert moved is not None
    moved.has_moved = True

    promotion: Optional[PieceType] = None
    if mover.type == PieceType.PAWN and is_promotion_square(to, mover.color):
        moved.promote_to(AUTO_PROMOTION)
        promotion = AUTO_PROMOTION

    move = Move(
        piece=deepcopy(mover),
        from_position=mover.position,
        to_position=to,
        captured_piece=deepcopy(captured),
        promotion_type=promotion,
    )

    en_passant_target = _en_passant_target_after(mover, to)
    next_turn = opponent(mover.color)
    outcome = resolve_outcome(next_turn, pieces, state.boards, en_passant_target)
    if outcome.checkmate:
        logger.info("Checkmate after %s: %s wins", move.to_notation(), outcome.checkmate)
    elif outcome.stalemate:
        logger.info("Stalemate after %s", move.to_notation())

    return MoveOutcome(
        GameState(
            pieces=pieces,
            boards=list(state.boards),
            current_turn=next_turn,
            move_history=[*state.move_history, move],
            en_passant_target=en_passant_target,
            check=outcome.check,
            checkmate=outcome.checkmate,
            stalemate=outcome.stalemate,
        )
    )


def select_piece(state: GameState, piece: Piece) -> GameState:
    """
    Selecting one of your own pieces computes where it may go.

    Selecting a piece of the side NOT to move does nothing.
    """
    if piece.color != state.current_turn:
        return state

    selected = piece_by_id(piece.id, state.pieces)
    if selected is None:
        return state

    destinations = legal_moves(
        selected, state.pieces, state.boards, state.en_passant_target
    )
    logger.debug(
        "%d legal moves for %s on %s",
        len(destinations),
        selected.type,
        selected.position.to_algebraic(),
    )
    return replace(state, selected_piece=selected, valid_moves=destinations)


def deselect_piece(state: GameState) -> GameState:
    return replace(state, selected_piece=None, valid_moves=[])


def undo_last_move(state: GameState) -> GameState:
    """
    Rebuild the game from the starting position, replaying every move but the last one.

    NOTE: a full replay costs O(len(history)) per undo. Fine for interactive games.
    """
    if not state.move_history:
        return state

    replayed = create_initial_game_state()
    for move in state.move_history[:-1]:
        piece = piece_by_id(move.piece.id, replayed.pieces) or piece_at(
            move.from_position, replayed.pieces
        )
        if piece is None:
            raise GameStateError(
                f"Cannot replay history: no piece on {move.from_position.to_algebraic()}"
            )
        outcome = execute_move(replayed, piece, move.to_position)
        if outcome.state is None:
            raise GameStateError(
                f"Cannot replay history: {move.to_notation()} was refused ({outcome.reason})"
            )
        replayed = outcome.state
    return replayed


# --- SERIALIZATION ---
def serialize_game_state(state: GameState) -> GameModel:
    """Encode into the transport-safe document. Selection fields are left behind."""
    return GameModel(
        pieces=[_piece_to_model(piece) for piece in state.pieces],
        boards=[_board_to_model(board) for board in state.boards],
        current_turn=state.current_turn,
        move_history=[_move_to_model(move) for move in state.move_history],
        check=state.check,
        checkmate=state.checkmate,
        stalemate=state.stalemate,
        en_passant_target=_position_to_model(state.en_passant_target)
        if state.en_passant_target
        else None,
    )


def deserialize_game_state(model: GameModel) -> GameState:
    """
    Decode a (validated) save document.

    The document may come from anywhere, so the board/piece invariants are checked here
    and a GameStateError is raised when they do not hold.
    """
    boards = [_board_from_model(board) for board in model.boards]
    _check_boards(boards)

    pieces = [_piece_from_model(piece) for piece in model.pieces]
    _check_pieces(pieces, boards)
    if model.checkmate is None and not model.stalemate:
        _check_kings(pieces)

    return GameState(
        pieces=pieces,
        boards=boards,
        current_turn=model.current_turn,
        move_history=[_move_from_model(move) for move in model.move_history],
        en_passant_target=_position_from_model(model.en_passant_target)
        if model.en_passant_target
        else None,
        check=model.check,
        checkmate=model.checkmate,
        stalemate=model.stalemate,
    )


# -- PRIVATE HELPERS ---
def _reject(reason: str, piece: Piece, to: Position) -> MoveOutcome:
    logger.debug(
        "Rejected %s %s -> %s: %s",
        piece.type,
        piece.position.to_algebraic(),
        to.to_algebraic(),
        reason,
    )
    return MoveOutcome(None, reason)


def _en_passant_target_after(piece: Piece, to: Position) -> Optional[Position]:
    """After a double push, the skipped square (on the landing level) can be taken en passant next turn."""
    if piece.type != PieceType.PAWN or abs(to.rank - piece.position.rank) != 2:
        return None
    return Position(
        to.file, piece.position.rank + forward_direction(piece.color), to.level
    )


def _check_boards(boards: list[Board]) -> None:
    known_ids = {level.value for level in Level}
    ids = [board.id for board in boards]
    if len(set(ids)) != len(ids):
        raise GameStateError(f"Board identifiers must be unique: {ids}")
    unknown = set(ids) - known_ids
    if unknown:
        raise GameStateError(f"Unknown board identifiers: {sorted(unknown)}")
    for board in boards:
        expected = board_by_id(board.id, INITIAL_BOARDS)
        if board.kind != expected.kind or (board.files, board.ranks) != (
            expected.files,
            expected.ranks,
        ):
            raise GameStateError(
                f"Board {board.id} must be a {expected.files}x{expected.ranks} {expected.kind} board"
            )
        if not board.is_attack_board and board != expected:
            raise GameStateError(f"Main board {board.id} is not where it belongs")
        if board.is_attack_board and not board.anchor.is_within_grid():
            raise GameStateError(f"Attack board {board.id} is anchored off the grid")


def _check_pieces(pieces: list[Piece], boards: list[Board]) -> None:
    seen: set[Position] = set()
    for piece in pieces:
        position = piece.position
        board = find_board(position.level, boards)
        if board is None:
            raise GameStateError(f"{piece.id} stands on unknown level {position.level!r}")
        if not board.contains(position.file, position.rank):
            raise GameStateError(
                f"{piece.id} stands off its board: {position.to_algebraic()}"
            )
        if position in seen:
            raise GameStateError(f"More than one piece on {position.to_algebraic()}")
        seen.add(position)


def _check_kings(pieces: list[Piece]) -> None:
    """Until the game has ended, both sides have exactly one king."""
    for color in Color:
        kings = [
            piece
            for piece in pieces_of_color(color, pieces)
            if piece.type == PieceType.KING
        ]
        if len(kings) != 1:
            raise GameStateError(f"{color} must have exactly one king, found {len(kings)}")


def _position_to_model(position: Position) -> PositionModel:
    return PositionModel(file=position.file, rank=position.rank, level=position.level)


def _position_from_model(model: PositionModel) -> Position:
    return Position(model.file, model.rank, model.level)


def _piece_to_model(piece: Piece) -> PieceModel:
    return PieceModel(
        id=piece.id,
        type=piece.type,
        color=piece.color,
        position=_position_to_model(piece.position),
        has_moved=piece.has_moved,
        moved_as_passenger=piece.moved_as_passenger,
    )


def _piece_from_model(model: PieceModel) -> Piece:
    return Piece(
        id=model.id,
        type=model.type,
        color=model.color,
        position=_position_from_model(model.position),
        has_moved=model.has_moved,
        moved_as_passenger=model.moved_as_passenger,
    )


def _anchor_to_model(anchor: Anchor) -> AnchorModel:
    return AnchorModel(file_offset=anchor.file_offset, rank_offset=anchor.rank_offset)


def _anchor_from_model(model: AnchorModel) -> Anchor:
    return Anchor(model.file_offset, model.rank_offset)


def _board_to_model(board: Board) -> BoardModel:
    return BoardModel(
        id=board.id,
        kind=board.kind,
        files=board.files,
        ranks=board.ranks,
        file_offset=board.file_offset,
        rank_offset=board.rank_offset,
        attached_to=board.attached_to,
    )


def _board_from_model(model: BoardModel) -> Board:
    return Board(
        id=model.id,
        kind=BoardKind(model.kind),
        files=model.files,
        ranks=model.ranks,
        file_offset=model.file_offset,
        rank_offset=model.rank_offset,
        attached_to=model.attached_to,
    )


def _move_to_model(move: Move) -> MoveModel:
    board_move = move.attack_board_move
    return MoveModel(
        piece=_piece_to_model(move.piece),
        from_position=_position_to_model(move.from_position),
        to_position=_position_to_model(move.to_position),
        captured_piece=_piece_to_model(move.captured_piece)
        if move.captured_piece
        else None,
        promotion_type=move.promotion_type,
        attack_board_move=AttackBoardMoveModel(
            board_id=board_move.board_id,
            from_anchor=_anchor_to_model(board_move.from_anchor),
            to_anchor=_anchor_to_model(board_move.to_anchor),
        )
        if board_move
        else None,
    )


def _move_from_model(model: MoveModel) -> Move:
    board_move = model.attack_board_move
    return Move(
        piece=_piece_from_model(model.piece),
        from_position=_position_from_model(model.from_position),
        to_position=_position_from_model(model.to_position),
        captured_piece=_piece_from_model(model.captured_piece)
        if model.captured_piece
        else None,
        promotion_type=model.promotion_type,
        attack_board_move=AttackBoardMove(
            board_id=board_move.board_id,
            from_anchor=_anchor_from_model(board_move.from_anchor),
            to_anchor=_anchor_from_model(board_move.to_anchor),
        )
        if board_move
        else None,
    )
