from __future__ import annotations

import logging
import random
from typing import Optional

from matchgrid.components.engine_state import Phase
from matchgrid.config import EngineConfig
from matchgrid.events.bus import EventBus, EVENT_TICK, EVENT_TILE_CLICK
from matchgrid.events.records import EventBatch
from matchgrid.systems.auto_player import AutoPlayer
from matchgrid.systems.grid_engine import GridEngine, Position, SwapResult
from matchgrid.systems.scoring import ScoringSystem
from matchgrid.systems.selection import SelectionSystem
from matchgrid.world import create_world

logger = logging.getLogger(__name__)


class GameSession:
    """One game: world, event bus, engine and the systems wired around it.

    A host calls ``step()`` once per frame. ``step()`` emits a tick for
    tick-driven systems and then advances the engine by one phase.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        *,
        event_bus: EventBus | None = None,
        autoplay: bool = False,
    ) -> None:
        self.config = config or EngineConfig()
        self.event_bus = event_bus or EventBus()
        self.world = create_world(self.config)
        self.engine = GridEngine(self.world, self.event_bus, self.config)
        self.scoring_system = ScoringSystem(self.world, self.event_bus)
        self.selection_system = SelectionSystem(self.world, self.event_bus, self.engine)
        self.auto_player: Optional[AutoPlayer] = None
        if autoplay:
            seed = self.config.rng_seed
            self.auto_player = AutoPlayer(
                self.world,
                self.event_bus,
                self.engine,
                rng=random.Random(seed + 1 if seed is not None else None),
            )

    @property
    def score(self) -> int:
        return self.scoring_system.score.total

    @property
    def moves(self) -> int:
        return self.scoring_system.score.moves

    @property
    def game_over(self) -> bool:
        return self.engine.phase() is Phase.GAME_OVER

    def click(self, col: int, row: int) -> None:
        self.event_bus.emit(EVENT_TILE_CLICK, col=col, row=row)

    def swap(self, source: Position, target: Position) -> SwapResult:
        return self.engine.attempt_swap(source, target)

    def step(self) -> EventBatch:
        self.event_bus.emit(EVENT_TICK)
        return self.engine.advance()

    def play(self, max_moves: int, max_steps: int = 100_000) -> int:
        """Step until ``max_moves`` swaps were accepted, the game ended, or the step budget ran out.

        Returns the number of steps taken. Meant for autoplay sessions.
        """
        steps = 0
        while steps < max_steps and not self.game_over:
            if self.moves >= max_moves and self.engine.is_settled():
                break
            self.step()
            steps += 1
        logger.info("Session stopped after %d steps: score=%d moves=%d", steps, self.score, self.moves)
        return steps

    def reset(self) -> None:
        self.engine.reset()
