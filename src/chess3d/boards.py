"""
The seven playing surfaces and how they map onto the shared (file, rank) grid.

Main boards have a fixed place. Attack boards are docked by an anchor (the global file/rank of their
bottom-left square), which is the only part of a board that can ever change.
"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Iterable, Optional, Self

from src.chess3d.position import GRID_DIMENSIONS, Position
from src.core.exceptions import CoordinateOutOfRangeError, UnknownBoardError
from src.core.shared_types import BoardKind


class Level(StrEnum):
    """Board identifiers. Pieces and boards only refer to each other through these strings."""

    WHITE_MAIN = "WL"
    NEUTRAL_MAIN = "NL"
    BLACK_MAIN = "BL"
    WHITE_QUEEN_ATTACK = "WQL"
    WHITE_KING_ATTACK = "WKL"
    BLACK_QUEEN_ATTACK = "BQL"
    BLACK_KING_ATTACK = "BKL"


MAIN_BOARD_SIZE = (4, 4)
ATTACK_BOARD_SIZE = (2, 2)


@dataclass(frozen=True)
class Anchor:
    """Where an attack board is docked: global file/rank of its bottom-left square"""

    file_offset: int
    rank_offset: int

    def is_within_grid(self) -> bool:
        """The full 2x2 extent must stay on the grid: files 0-4, ranks 0-8"""
        max_file = GRID_DIMENSIONS[0] - ATTACK_BOARD_SIZE[0]
        max_rank = GRID_DIMENSIONS[1] - ATTACK_BOARD_SIZE[1]
        return (0 <= self.file_offset <= max_file) and (
            0 <= self.rank_offset <= max_rank
        )


@dataclass(frozen=True)
class Board:
    id: str
    kind: BoardKind
    files: int
    ranks: int
    file_offset: int
    rank_offset: int
    attached_to: Optional[str] = None  # main level an attack board is docked to

    @classmethod
    def main(cls, level: Level, rank_offset: int) -> Self:
        """Main boards all cover files a-d"""
        files, ranks = MAIN_BOARD_SIZE
        return cls(level.value, BoardKind.MAIN, files, ranks, 1, rank_offset)

    @classmethod
    def attack(cls, level: Level, anchor: Anchor, attached_to: Level) -> Self:
        files, ranks = ATTACK_BOARD_SIZE
        return cls(
            level.value,
            BoardKind.ATTACK,
            files,
            ranks,
            anchor.file_offset,
            anchor.rank_offset,
            attached_to.value,
        )

    @property
    def is_attack_board(self) -> bool:
        return self.kind == BoardKind.ATTACK

    @property
    def anchor(self) -> Anchor:
        return Anchor(self.file_offset, self.rank_offset)

    @property
    def file_range(self) -> range:
        return range(self.file_offset, self.file_offset + self.files)

    @property
    def rank_range(self) -> range:
        return range(self.rank_offset, self.rank_offset + self.ranks)

    def contains(self, file: int, rank: int) -> bool:
        return file in self.file_range and rank in self.rank_range

    def with_anchor(self, anchor: Anchor) -> Self:
        """Boards are values: relocating an attack board yields a new Board."""
        return replace(self, file_offset=anchor.file_offset, rank_offset=anchor.rank_offset)


# Boards overlap: each main board shares two ranks with its neighbour.
# Attack boards mirror each other: queen side covers z-a, king side d-e, so every attack board
# shares exactly one outer file (a or d) with the main boards. A king-side anchor at file 3 (c-d)
# would cover two main files and break that symmetry.
INITIAL_BOARDS: tuple[Board, ...] = (
    Board.main(Level.WHITE_MAIN, rank_offset=2),  # ranks 2-5
    Board.main(Level.NEUTRAL_MAIN, rank_offset=4),  # ranks 4-7
    Board.main(Level.BLACK_MAIN, rank_offset=6),  # ranks 6-9
    Board.attack(Level.WHITE_QUEEN_ATTACK, Anchor(0, 0), Level.WHITE_MAIN),  # z-a, 0-1
    Board.attack(Level.WHITE_KING_ATTACK, Anchor(4, 0), Level.WHITE_MAIN),  # d-e, 0-1
    Board.attack(Level.BLACK_QUEEN_ATTACK, Anchor(0, 8), Level.BLACK_MAIN),  # z-a, 8-9
    Board.attack(Level.BLACK_KING_ATTACK, Anchor(4, 8), Level.BLACK_MAIN),  # d-e, 8-9
)


def create_initial_boards() -> list[Board]:
    return list(INITIAL_BOARDS)


def board_by_id(board_id: str, boards: Iterable[Board]) -> Board:
    """Unknown ids are a programming error, not a rules question."""
    for board in boards:
        if board.id == board_id:
            return board
    raise UnknownBoardError(f"Unknown board ID: {board_id!r}")


def find_board(board_id: str, boards: Iterable[Board]) -> Optional[Board]:
    return next((board for board in boards if board.id == board_id), None)


def board_local_to_global(
    board_id: str, x: int, y: int, boards: Iterable[Board] = INITIAL_BOARDS
) -> Position:
    """Board-local (x, y) has its origin at the bottom-left (White's side) of the board."""
    board = board_by_id(board_id, boards)
    if not (0 <= x < board.files and 0 <= y < board.ranks):
        raise CoordinateOutOfRangeError(
            f"Coordinates ({x}, {y}) out of bounds for board {board_id} (size: {board.files}x{board.ranks})"
        )
    return Position(board.file_offset + x, board.rank_offset + y, board.id)


def global_to_local(position: Position, boards: Iterable[Board]) -> tuple[int, int]:
    """Reverse operation, for consumers that address squares per board"""
    board = board_by_id(position.level, boards)
    if not board.contains(position.file, position.rank):
        raise CoordinateOutOfRangeError(
            f"Position {position.to_algebraic()} is out of range for board {board.id}"
        )
    return position.file - board.file_offset, position.rank - board.rank_offset


def position_exists(position: Position, boards: Iterable[Board]) -> bool:
    """The reachability filter used by all move generation. Unknown levels simply do not exist."""
    board = find_board(position.level, boards)
    if board is None:
        return False
    return board.contains(position.file, position.rank)


def levels_at(file: int, rank: int, boards: Iterable[Board]) -> list[str]:
    """
    All levels covering (file, rank).

    NOTE: Main boards overlap by two ranks (and attack boards can sit on top of them),
    so more than one level is a perfectly normal answer.
    """
    return [board.id for board in boards if board.contains(file, rank)]
