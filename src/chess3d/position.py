"""
A square on one of the seven boards

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.core.exceptions import InvalidNotationError

# The shared (file, rank) grid all boards are laid out on: files z-e, ranks 0-9
GRID_DIMENSIONS = (6, 10)
FILE_NAMES: tuple[str, ...] = ("z", "a", "b", "c", "d", "e")

# Short names for the main levels, accepted when parsing
LEVEL_ALIASES: dict[str, str] = {"W": "WL", "N": "NL", "B": "BL"}

ALGEBRAIC_PATTERN = re.compile(r"^([zabcde])(\d+)-?([A-Z]+)$")


def is_within_grid(file: int, rank: int) -> bool:
    return (0 <= file < GRID_DIMENSIONS[0]) and (0 <= rank < GRID_DIMENSIONS[1])


@dataclass(frozen=True)
class Position:
    """A square is only identified by all three coordinates: boards overlap on (file, rank)."""

    file: int
    rank: int
    level: str

    @classmethod
    def from_algebraic(cls, notation: str) -> Position:
        """
        Algebraic notation: <file letter><rank digits>-<level>

        ex) 'b3-WL' is file b (2), rank 3 on White's main board.
        The dash may be left out ('b3WL') and the main levels may be shortened ('b3-W').
        """
        match = ALGEBRAIC_PATTERN.match(notation.strip())
        if match is None:
            raise InvalidNotationError(
                f"Cannot interpret {notation!r} as a position. Expected e.g. 'b3-WL'."
            )
        file_char, rank_chars, level = match.groups()
        level = LEVEL_ALIASES.get(level, level)
        return cls(FILE_NAMES.index(file_char), int(rank_chars), level)

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file]}{self.rank}-{self.level}"

    def offset(self, df: int, dr: int, level: str | None = None) -> Position:
        """Shift over the grid. Stays on the same level unless told otherwise."""
        return Position(self.file + df, self.rank + dr, level or self.level)

    def same_column(self, other: Position) -> bool:
        """True if both squares share file and rank (they may still differ in level)"""
        return self.file == other.file and self.rank == other.rank
