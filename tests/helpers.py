from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from matchgrid.components.color import Color
from matchgrid.config import EngineConfig
from matchgrid.events.bus import EventBus
from matchgrid.events.records import Event, EventBatch
from matchgrid.systems.grid_engine import GridEngine
from matchgrid.world import create_world

# Letters used in test layouts: A -> RED, B -> PURPLE, C -> BLUE, ...
LETTER_COLORS: Dict[str, Color] = {letter: color for letter, color in zip("ABCDEFGH", Color)}


def layout(*rows: str) -> List[List[Color]]:
    """Translate rows of letters (top to bottom) into a color layout."""
    return [[LETTER_COLORS[letter] for letter in row] for row in rows]


def build_engine(width: int = 8, height: int = 8, palette_size: int = 8, seed: int | None = 7):
    bus = EventBus()
    config = EngineConfig(width=width, height=height, palette_size=palette_size, rng_seed=seed)
    world = create_world(config)
    engine = GridEngine(world, bus, config)
    return world, bus, engine


def engine_with_layout(*rows: str, seed: int | None = 7):
    """Build an engine whose board is the given letter layout, not yet resolved."""
    world, bus, engine = build_engine(width=len(rows[0]), height=len(rows), seed=seed)
    engine.load_layout(layout(*rows))
    return world, bus, engine


def drain(engine: GridEngine, max_steps: int = 10_000) -> EventBatch:
    return engine.resolve(max_steps=max_steps)


def of_type(events: Sequence[Event], kind: type) -> list:
    return [event for event in events if isinstance(event, kind)]


def colors_by_position(engine: GridEngine) -> Dict[Tuple[int, int], Color]:
    return {view.position: view.color for view in engine.snapshot()}


def record(bus: EventBus, name: str) -> List[dict]:
    received: List[dict] = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received
