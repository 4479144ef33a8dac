from typing import Tuple

from esper import World

from matchgrid.events.bus import EventBus, EVENT_TILE_CLICK
from matchgrid.systems.grid_engine import GridEngine, SwapResult

Position = Tuple[int, int]


class SelectionSystem:
    """Turns tile clicks into selections and swap attempts.

    The first click selects a piece. A second click on one of the eight cells
    around it offers the pair to the engine; anything else, or a refused swap,
    selects the clicked piece instead. Whether the pair may actually be
    swapped is decided by the engine alone.
    """

    def __init__(self, world: World, event_bus: EventBus, engine: GridEngine):
        self.world = world
        self.event_bus = event_bus
        self.engine = engine
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    def on_tile_click(self, sender, **kwargs):
        col = kwargs.get('col')
        row = kwargs.get('row')
        if col is None or row is None:
            return
        clicked = (col, row)
        selected = self.engine.selected()
        if selected is None:
            self.engine.select(clicked)
            return
        if self.is_swap_candidate(selected, clicked):
            if self.engine.attempt_swap(selected, clicked) is SwapResult.ACCEPTED:
                return
        self.engine.select(clicked)

    @staticmethod
    def is_swap_candidate(a: Position, b: Position) -> bool:
        return abs(a[0] - b[0]) <= 1 and abs(a[1] - b[1]) <= 1
