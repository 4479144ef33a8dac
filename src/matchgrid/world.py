import random

from esper import World

from matchgrid.components.color import palette_for
from matchgrid.components.engine_state import EngineState
from matchgrid.components.grid import Grid
from matchgrid.components.score import Score
from matchgrid.config import EngineConfig


def create_world(config: EngineConfig | None = None, *, rng: random.Random | None = None) -> World:
    """Create a world holding the grid, engine state and score singletons.

    The board itself is empty until a ``GridEngine`` generates it.
    """
    config = config or EngineConfig()
    world = World()
    setattr(world, "random", rng or random.Random(config.rng_seed))

    world.create_entity(
        Grid(width=config.width, height=config.height, palette=palette_for(config.palette_size))
    )
    world.create_entity(EngineState())
    world.create_entity(Score())
    return world
