from dataclasses import dataclass

from matchgrid.components.color import Color


@dataclass(frozen=True, slots=True)
class PieceColor:
    """Color assigned when the piece is spawned; never changes afterwards."""
    color: Color


@dataclass(slots=True)
class GridPosition:
    """Logical slot of a piece. Row 0 is the top row."""
    col: int
    row: int

    def as_tuple(self) -> tuple[int, int]:
        return self.col, self.row


@dataclass(slots=True)
class MatchMark:
    """Number of runs currently covering the piece.

    A piece sitting where a horizontal and a vertical run cross carries a count of 2.
    """
    count: int = 0

    @property
    def marked(self) -> bool:
        return self.count > 0


@dataclass(slots=True)
class Selected:
    """Tag component for the single piece the player has picked up."""
    pass
