from __future__ import annotations

import random
from typing import Optional, Tuple

from esper import World

from matchgrid.components.engine_state import REST_PHASES
from matchgrid.events.bus import EventBus, EVENT_TICK, EVENT_TILE_CLICK
from matchgrid.systems.grid_engine import GridEngine

Position = Tuple[int, int]


class AutoPlayer:
    """Plays random available moves by clicking tiles, one click per tick."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        engine: GridEngine,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.engine = engine
        self.random = rng or random.Random()
        self.enabled = True
        self.pending_target: Optional[Position] = None
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **payload) -> None:
        if not self.enabled:
            return
        if self.engine.phase() not in REST_PHASES:
            self.pending_target = None
            return
        if self.pending_target is not None:
            col, row = self.pending_target
            self.pending_target = None
            self.event_bus.emit(EVENT_TILE_CLICK, col=col, row=row)
            return
        move = self.choose_move()
        if move is None:
            return
        source, target = move
        if self.engine.selected() is not None:
            self.engine.deselect()
        self.pending_target = target
        self.event_bus.emit(EVENT_TILE_CLICK, col=source[0], row=source[1])

    def choose_move(self) -> Optional[Tuple[Position, Position]]:
        moves = self.engine.available_moves()
        if not moves:
            return None
        return self.random.choice(moves)
