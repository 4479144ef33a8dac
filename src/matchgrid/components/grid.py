from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from matchgrid.components.color import Color

Position = Tuple[int, int]


@dataclass(slots=True)
class Grid:
    """Singleton component holding the width x height slot table.

    ``slots[col][row]`` stores the entity id of the piece occupying the slot or
    ``None`` while the slot waits for a drop/refill. Each entity appears in at
    most one slot.
    """
    width: int
    height: int
    palette: Tuple[Color, ...]
    slots: List[List[Optional[int]]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.slots:
            self.slots = [[None] * self.height for _ in range(self.width)]

    def in_bounds(self, pos: Position) -> bool:
        col, row = pos
        return 0 <= col < self.width and 0 <= row < self.height

    def get(self, pos: Position) -> Optional[int]:
        col, row = pos
        return self.slots[col][row]

    def put(self, pos: Position, entity: Optional[int]) -> None:
        col, row = pos
        self.slots[col][row] = entity

    def vacate(self, pos: Position) -> Optional[int]:
        col, row = pos
        entity = self.slots[col][row]
        self.slots[col][row] = None
        return entity

    def empty_count(self, col: int) -> int:
        return sum(1 for entity in self.slots[col] if entity is None)

    def is_full(self) -> bool:
        return all(entity is not None for column in self.slots for entity in column)

    def occupied(self) -> List[Tuple[Position, int]]:
        """Occupied slots in (row, col) order."""
        entries: List[Tuple[Position, int]] = []
        for row in range(self.height):
            for col in range(self.width):
                entity = self.slots[col][row]
                if entity is not None:
                    entries.append(((col, row), entity))
        return entries
