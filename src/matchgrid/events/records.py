"""Event records returned from ``GridEngine.advance()``.

Each record is also published on the event bus under its ``topic`` with its
fields as keyword payload.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, List, Tuple, Union

from matchgrid.components.color import Color
from matchgrid.events.bus import (
    EVENT_NO_MOVES_LEFT,
    EVENT_PIECE_CLEARED,
    EVENT_PIECE_MOVED,
    EVENT_SCORE_DELTA,
)

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Cleared:
    topic: ClassVar[str] = EVENT_PIECE_CLEARED
    piece_id: int
    position: Position
    color: Color
    mark_count: int


@dataclass(frozen=True, slots=True)
class ScoreDelta:
    topic: ClassVar[str] = EVENT_SCORE_DELTA
    amount: int


@dataclass(frozen=True, slots=True)
class PieceMoved:
    """Logical move of a piece. Spawned pieces start above row 0 (negative rows)."""
    topic: ClassVar[str] = EVENT_PIECE_MOVED
    piece_id: int
    source: Position
    target: Position


@dataclass(frozen=True, slots=True)
class NoMovesLeft:
    topic: ClassVar[str] = EVENT_NO_MOVES_LEFT


Event = Union[Cleared, ScoreDelta, PieceMoved, NoMovesLeft]
EventBatch = List[Event]


def event_payload(event: Event) -> Dict[str, Any]:
    return {f.name: getattr(event, f.name) for f in fields(event)}
