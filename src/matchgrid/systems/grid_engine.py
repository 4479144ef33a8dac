from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from threading import RLock
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from esper import World

from matchgrid.components.color import Color
from matchgrid.components.engine_state import REST_PHASES, SETTLED_PHASES, Phase
from matchgrid.components.piece import GridPosition, MatchMark, PieceColor, Selected
from matchgrid.config import EngineConfig
from matchgrid.constants import MAX_RESOLVE_STEPS, POINTS_PER_MARK
from matchgrid.errors import EngineStateError
from matchgrid.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_PHASE_CHANGED,
    EVENT_PIECE_DESELECTED,
    EVENT_PIECE_SELECTED,
    EVENT_SWAP_RESOLVED,
)
from matchgrid.events.records import (
    Cleared,
    Event,
    EventBatch,
    NoMovesLeft,
    PieceMoved,
    ScoreDelta,
    event_payload,
)
from matchgrid.systems.board_generation import generate_board, load_layout, random_color
from matchgrid.systems.grid_ops import (
    Position,
    Swap,
    check_rest_invariants,
    clear_marks,
    column_is_compact,
    compact_column,
    destroy_piece,
    exchange,
    find_available_moves,
    get_engine_state,
    get_grid,
    has_available_move,
    is_orthogonal_neighbour,
    mark_matches,
    marked_pieces,
    selected_entities,
    spawn_piece,
)

logger = logging.getLogger(__name__)


class SwapResult(Enum):
    ACCEPTED = "accepted"
    REJECTED_NOT_ADJACENT = "rejected_not_adjacent"
    REJECTED_NO_MATCH = "rejected_no_match"
    REJECTED_BUSY = "rejected_busy"
    REJECTED_OFF_GRID = "rejected_off_grid"


@dataclass(frozen=True, slots=True)
class PieceView:
    """Read-only view of one occupied slot, as returned by ``GridEngine.snapshot``."""
    piece_id: int
    position: Position
    color: Color
    marked: bool
    selected: bool


class GridEngine:
    """Owns the board and resolves it one phase per ``advance()`` call.

    The host drives the cascade by calling ``advance()`` on its own cadence
    (typically once per animation frame) until the phase is back at rest.
    Every event produced is returned from ``advance()`` and also published on
    the event bus.
    """

    def __init__(self, world: World, event_bus: EventBus, config: EngineConfig | None = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or EngineConfig()
        self._lock = RLock()
        self._queued: EventBatch = []
        self._steps: Dict[Phase, Callable[[EventBatch], None]] = {
            Phase.MATCHING: self._step_matching,
            Phase.CLEARING: self._step_clearing,
            Phase.DROPPING: self._step_dropping,
            Phase.REFILLING: self._step_refilling,
            Phase.MOVES_CHECK: self._step_moves_check,
        }
        generate_board(self.world, max_attempts=self.config.max_generation_attempts)
        check_rest_invariants(self.world)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def phase(self) -> Phase:
        with self._lock:
            return get_engine_state(self.world).phase

    def is_settled(self) -> bool:
        with self._lock:
            return self.phase() in SETTLED_PHASES

    def snapshot(self) -> Tuple[PieceView, ...]:
        with self._lock:
            grid = get_grid(self.world)
            views: List[PieceView] = []
            for pos, entity in grid.occupied():
                views.append(
                    PieceView(
                        piece_id=entity,
                        position=pos,
                        color=self.world.component_for_entity(entity, PieceColor).color,
                        marked=self.world.component_for_entity(entity, MatchMark).marked,
                        selected=self.world.has_component(entity, Selected),
                    )
                )
            return tuple(views)

    def selected(self) -> Optional[Position]:
        with self._lock:
            for entity in selected_entities(self.world):
                return self.world.component_for_entity(entity, GridPosition).as_tuple()
            return None

    def available_moves(self) -> List[Swap]:
        with self._lock:
            if self.phase() not in REST_PHASES:
                return []
            return find_available_moves(self.world)

    # ------------------------------------------------------------------
    # Player input
    # ------------------------------------------------------------------
    def select(self, pos: Position) -> bool:
        with self._lock:
            if self.phase() not in REST_PHASES:
                return False
            grid = get_grid(self.world)
            if not grid.in_bounds(pos):
                return False
            entity = grid.get(pos)
            if entity is None:
                return False
            self._clear_selection()
            self.world.add_component(entity, Selected())
            self._set_phase(Phase.AWAITING_SWAP)
            self.event_bus.emit(EVENT_PIECE_SELECTED, piece_id=entity, position=pos)
            return True

    def deselect(self) -> None:
        with self._lock:
            self._clear_selection()
            if self.phase() is Phase.AWAITING_SWAP:
                self._set_phase(Phase.IDLE)

    def attempt_swap(self, source: Position, target: Position) -> SwapResult:
        with self._lock:
            result = self._attempt_swap(source, target)
            self.event_bus.emit(EVENT_SWAP_RESOLVED, source=source, target=target, result=result)
            return result

    def _attempt_swap(self, source: Position, target: Position) -> SwapResult:
        if self.phase() not in REST_PHASES:
            return SwapResult.REJECTED_BUSY
        grid = get_grid(self.world)
        if not (grid.in_bounds(source) and grid.in_bounds(target)):
            return SwapResult.REJECTED_OFF_GRID
        if not is_orthogonal_neighbour(source, target):
            return SwapResult.REJECTED_NOT_ADJACENT
        ent_a = grid.get(source)
        ent_b = grid.get(target)
        if ent_a is None or ent_b is None:
            return SwapResult.REJECTED_BUSY
        if self._is_marked(ent_a) or self._is_marked(ent_b):
            return SwapResult.REJECTED_BUSY

        exchange(self.world, source, target)
        matched = mark_matches(self.world)
        clear_marks(self.world)
        if not matched:
            exchange(self.world, source, target)
            return SwapResult.REJECTED_NO_MATCH

        self._clear_selection()
        self._publish(self._queued, PieceMoved(piece_id=ent_a, source=source, target=target))
        self._publish(self._queued, PieceMoved(piece_id=ent_b, source=target, target=source))
        state = get_engine_state(self.world)
        state.cascade_depth = 0
        self._set_phase(Phase.MATCHING)
        return SwapResult.ACCEPTED

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    def advance(self) -> EventBatch:
        """Run one phase of the resolution cycle and return the events it produced."""
        with self._lock:
            events = self._queued
            self._queued = []
            phase = self.phase()
            if not isinstance(phase, Phase):
                raise EngineStateError(f"corrupted engine phase {phase!r}")
            step = self._steps.get(phase)
            if step is None:
                check_rest_invariants(self.world)
            else:
                step(events)
            return events

    def resolve(self, max_steps: int = MAX_RESOLVE_STEPS) -> EventBatch:
        """Call ``advance()`` until the board settles and return every event."""
        with self._lock:
            events: EventBatch = []
            for _ in range(max_steps):
                events.extend(self.advance())
                if self.is_settled():
                    return events
            raise EngineStateError(f"board did not settle within {max_steps} steps")

    def reset(self) -> None:
        """Throw the board away and generate a new one; leaves GAME_OVER."""
        with self._lock:
            self._clear_selection()
            generate_board(self.world, max_attempts=self.config.max_generation_attempts)
            self._queued = []
            self._return_to_idle()
            logger.info("Board reset")
            self.event_bus.emit(EVENT_BOARD_RESET, reason="reset")

    def load_layout(self, rows: Sequence[Sequence[Color]]) -> None:
        """Replace the board with fixed colors (rows top to bottom).

        The engine enters MATCHING so the next ``advance()`` calls resolve any
        runs in the layout and check it for available moves.
        """
        with self._lock:
            self._clear_selection()
            load_layout(self.world, rows)
            self._queued = []
            state = get_engine_state(self.world)
            state.cascade_depth = 0
            self._set_phase(Phase.MATCHING)
            self.event_bus.emit(EVENT_BOARD_RESET, reason="layout")

    def _step_matching(self, events: EventBatch) -> None:
        if mark_matches(self.world):
            get_engine_state(self.world).cascade_depth += 1
            self._set_phase(Phase.CLEARING)
        else:
            self._set_phase(Phase.MOVES_CHECK)

    def _step_clearing(self, events: EventBatch) -> None:
        marked = marked_pieces(self.world)
        if not marked:
            raise EngineStateError("clearing phase entered without marked pieces")
        for entity in marked:
            position = self.world.component_for_entity(entity, GridPosition).as_tuple()
            color = self.world.component_for_entity(entity, PieceColor).color
            count = self.world.component_for_entity(entity, MatchMark).count
            self._publish(events, Cleared(piece_id=entity, position=position, color=color, mark_count=count))
            self._publish(events, ScoreDelta(amount=POINTS_PER_MARK * count))
            destroy_piece(self.world, entity)
        self._set_phase(Phase.DROPPING)

    def _step_dropping(self, events: EventBatch) -> None:
        grid = get_grid(self.world)
        for col in range(grid.width):
            for entity, source, target in compact_column(self.world, col):
                self._publish(events, PieceMoved(piece_id=entity, source=source, target=target))
            if not column_is_compact(grid, col):
                raise EngineStateError(f"column {col} still has gaps after dropping")
        self._set_phase(Phase.REFILLING)

    def _step_refilling(self, events: EventBatch) -> None:
        grid = get_grid(self.world)
        for col in range(grid.width):
            if not column_is_compact(grid, col):
                raise EngineStateError(f"column {col} has gaps below its pieces")
            empties = grid.empty_count(col)
            for row in range(empties):
                entity = spawn_piece(self.world, (col, row), random_color(self.world))
                self._publish(events, PieceMoved(piece_id=entity, source=(col, row - empties), target=(col, row)))
        self._set_phase(Phase.MATCHING)

    def _step_moves_check(self, events: EventBatch) -> None:
        if has_available_move(self.world):
            self._return_to_idle()
            return
        self._set_phase(Phase.GAME_OVER)
        logger.info("No moves left; game over")
        self._publish(events, NoMovesLeft())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _return_to_idle(self) -> None:
        check_rest_invariants(self.world)
        state = get_engine_state(self.world)
        state.cascade_depth = 0
        self._set_phase(Phase.IDLE)

    def _set_phase(self, phase: Phase) -> None:
        state = get_engine_state(self.world)
        previous = state.phase
        if previous is phase:
            return
        state.phase = phase
        logger.debug("Phase %s -> %s", previous.name, phase.name)
        self.event_bus.emit(EVENT_PHASE_CHANGED, previous=previous, current=phase)

    def _publish(self, events: EventBatch, event: Event) -> None:
        events.append(event)
        self.event_bus.emit(event.topic, **event_payload(event))

    def _clear_selection(self) -> None:
        for entity in selected_entities(self.world):
            position = self.world.component_for_entity(entity, GridPosition).as_tuple()
            self.world.remove_component(entity, Selected)
            self.event_bus.emit(EVENT_PIECE_DESELECTED, piece_id=entity, position=position)

    def _is_marked(self, entity: int) -> bool:
        return self.world.component_for_entity(entity, MatchMark).marked
