from __future__ import annotations

import logging
import random
from typing import List, Sequence

from esper import World

from matchgrid.components.color import Color
from matchgrid.errors import InvalidConfiguration
from matchgrid.systems.grid_ops import (
    Position,
    clear_board,
    destroy_piece,
    get_grid,
    has_available_move,
    mark_matches,
    marked_pieces,
    spawn_piece,
)

logger = logging.getLogger(__name__)


def world_random(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def random_color(world: World) -> Color:
    grid = get_grid(world)
    return world_random(world).choice(grid.palette)


def fill_empty_slots(world: World) -> List[Position]:
    """Spawn a random piece into every empty slot, column by column."""
    grid = get_grid(world)
    spawned: List[Position] = []
    for col in range(grid.width):
        for row in range(grid.height):
            if grid.slots[col][row] is None:
                spawn_piece(world, (col, row), random_color(world))
                spawned.append((col, row))
    return spawned


def generate_board(world: World, *, max_attempts: int) -> int:
    """Fill the grid with a board that has no runs and at least one move.

    Runs left by the random fill are cleared and only their slots are
    refilled; a board with no move at all is thrown away and rebuilt.
    Returns the number of full fills that were needed.
    """
    for attempt in range(1, max_attempts + 1):
        clear_board(world)
        fill_empty_slots(world)
        while mark_matches(world):
            for entity in marked_pieces(world):
                destroy_piece(world, entity)
            fill_empty_slots(world)
        if has_available_move(world):
            logger.debug("Generated board after %d attempt(s)", attempt)
            return attempt
        logger.debug("Discarding board without moves (attempt %d)", attempt)
    clear_board(world)
    raise InvalidConfiguration(f"unable to generate a playable board in {max_attempts} attempts")


def load_layout(world: World, rows: Sequence[Sequence[Color]]) -> None:
    """Replace the board with fixed colors given as rows from top to bottom."""
    grid = get_grid(world)
    if len(rows) != grid.height or any(len(row) != grid.width for row in rows):
        raise InvalidConfiguration(f"layout must be {grid.width} columns by {grid.height} rows")
    for row in rows:
        for color in row:
            if not isinstance(color, Color):
                raise InvalidConfiguration(f"layout contains a non-color value {color!r}")
    clear_board(world)
    for row_index, row in enumerate(rows):
        for col_index, color in enumerate(row):
            spawn_piece(world, (col_index, row_index), color)
