from esper import World

from matchgrid.components.score import Score
from matchgrid.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_GAME_OVER,
    EVENT_NO_MOVES_LEFT,
    EVENT_SCORE_CHANGED,
    EVENT_SCORE_DELTA,
    EVENT_SWAP_RESOLVED,
)
from matchgrid.systems.grid_engine import SwapResult


def get_or_create_score(world: World) -> Score:
    """Return the shared Score component, creating it if absent."""
    existing = list(world.get_component(Score))
    if existing:
        return existing[0][1]
    world.create_entity(Score())
    return list(world.get_component(Score))[0][1]


class ScoringSystem:
    """Accumulates score deltas from the engine and reports the end of a game."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.score = get_or_create_score(world)
        event_bus.subscribe(EVENT_SCORE_DELTA, self.on_score_delta)
        event_bus.subscribe(EVENT_SWAP_RESOLVED, self.on_swap_resolved)
        event_bus.subscribe(EVENT_NO_MOVES_LEFT, self.on_no_moves_left)
        event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_score_delta(self, sender, **kwargs):
        amount = kwargs.get('amount', 0)
        if not amount or self.score.game_over:
            return
        self.score.total += amount
        self.event_bus.emit(EVENT_SCORE_CHANGED, total=self.score.total, delta=amount)

    def on_swap_resolved(self, sender, **kwargs):
        result = kwargs.get('result')
        if result is SwapResult.ACCEPTED:
            self.score.moves += 1

    def on_no_moves_left(self, sender, **kwargs):
        if self.score.game_over:
            return
        self.score.game_over = True
        self.event_bus.emit(EVENT_GAME_OVER, total=self.score.total, moves=self.score.moves)

    def on_board_reset(self, sender, **kwargs):
        self.score.total = 0
        self.score.moves = 0
        self.score.game_over = False
        self.event_bus.emit(EVENT_SCORE_CHANGED, total=0, delta=0)
