from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from esper import World

from matchgrid.components.color import Color
from matchgrid.components.engine_state import EngineState
from matchgrid.components.grid import Grid
from matchgrid.components.piece import GridPosition, MatchMark, PieceColor, Selected
from matchgrid.constants import MATCH_LENGTH
from matchgrid.errors import EngineStateError

Position = Tuple[int, int]
Swap = Tuple[Position, Position]
ColumnMove = Tuple[int, Position, Position]


def get_grid(world: World) -> Grid:
    for _, grid in world.get_component(Grid):
        return grid
    raise EngineStateError("Grid component not found")


def get_engine_state(world: World) -> EngineState:
    for _, state in world.get_component(EngineState):
        return state
    raise EngineStateError("EngineState component not found")


def is_orthogonal_neighbour(a: Position, b: Position) -> bool:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def piece_color(world: World, entity: int) -> Color:
    return world.component_for_entity(entity, PieceColor).color


def color_at(world: World, pos: Position) -> Optional[Color]:
    grid = get_grid(world)
    if not grid.in_bounds(pos):
        return None
    entity = grid.get(pos)
    if entity is None:
        return None
    return piece_color(world, entity)


def color_table(world: World) -> List[List[Optional[Color]]]:
    """Return ``colors[col][row]`` for the whole grid, ``None`` for empty slots."""
    grid = get_grid(world)
    return [
        [piece_color(world, entity) if entity is not None else None for entity in column]
        for column in grid.slots
    ]


def spawn_piece(world: World, pos: Position, color: Color) -> int:
    grid = get_grid(world)
    if grid.get(pos) is not None:
        raise EngineStateError(f"slot {pos} is already occupied")
    entity = world.create_entity(PieceColor(color), GridPosition(*pos), MatchMark())
    grid.put(pos, entity)
    return entity


def destroy_piece(world: World, entity: int) -> Position:
    grid = get_grid(world)
    position = world.component_for_entity(entity, GridPosition).as_tuple()
    if grid.get(position) != entity:
        raise EngineStateError(f"piece {entity} is not stored at {position}")
    grid.vacate(position)
    world.delete_entity(entity, immediate=True)
    return position


def clear_board(world: World) -> None:
    grid = get_grid(world)
    for _, entity in grid.occupied():
        destroy_piece(world, entity)


def exchange(world: World, a: Position, b: Position) -> None:
    """Swap the occupants of two slots and keep their GridPosition in step."""
    grid = get_grid(world)
    ent_a = grid.get(a)
    ent_b = grid.get(b)
    grid.put(a, ent_b)
    grid.put(b, ent_a)
    if ent_a is not None:
        pos = world.component_for_entity(ent_a, GridPosition)
        pos.col, pos.row = b
    if ent_b is not None:
        pos = world.component_for_entity(ent_b, GridPosition)
        pos.col, pos.row = a


def _mark(world: World, entity: int) -> None:
    world.component_for_entity(entity, MatchMark).count += 1


def mark_matches(world: World) -> bool:
    """Single pass over every horizontal and vertical window of MATCH_LENGTH slots.

    Each window of equal, non-empty colors adds one mark to each of its pieces,
    so pieces shared by overlapping runs collect several marks.
    """
    grid = get_grid(world)
    colors = color_table(world)
    found = False
    for col in range(grid.width - MATCH_LENGTH + 1):
        for row in range(grid.height):
            first = colors[col][row]
            if first is None:
                continue
            if all(colors[col + k][row] == first for k in range(1, MATCH_LENGTH)):
                found = True
                for k in range(MATCH_LENGTH):
                    _mark(world, grid.slots[col + k][row])
    for col in range(grid.width):
        for row in range(grid.height - MATCH_LENGTH + 1):
            first = colors[col][row]
            if first is None:
                continue
            if all(colors[col][row + k] == first for k in range(1, MATCH_LENGTH)):
                found = True
                for k in range(MATCH_LENGTH):
                    _mark(world, grid.slots[col][row + k])
    return found


def clear_marks(world: World) -> None:
    for _, mark in world.get_component(MatchMark):
        mark.count = 0


def marked_pieces(world: World) -> List[int]:
    """Entities with at least one mark, in (row, col) order."""
    grid = get_grid(world)
    marked: List[int] = []
    for _, entity in grid.occupied():
        if world.component_for_entity(entity, MatchMark).marked:
            marked.append(entity)
    return marked


def swap_creates_match(world: World, a: Position, b: Position) -> bool:
    """Try the swap, detect, then revert it and drop the trial marks."""
    exchange(world, a, b)
    try:
        return mark_matches(world)
    finally:
        clear_marks(world)
        exchange(world, a, b)


def _candidate_swaps(grid: Grid) -> Iterable[Swap]:
    for col in range(grid.width):
        for row in range(grid.height):
            if grid.slots[col][row] is None:
                continue
            if col + 1 < grid.width and grid.slots[col + 1][row] is not None:
                yield (col, row), (col + 1, row)
            if row + 1 < grid.height and grid.slots[col][row + 1] is not None:
                yield (col, row), (col, row + 1)


def has_available_move(world: World) -> bool:
    grid = get_grid(world)
    for a, b in _candidate_swaps(grid):
        if swap_creates_match(world, a, b):
            return True
    return False


def find_available_moves(world: World) -> List[Swap]:
    grid = get_grid(world)
    return [(a, b) for a, b in _candidate_swaps(grid) if swap_creates_match(world, a, b)]


def compact_column(world: World, col: int) -> List[ColumnMove]:
    """Pull the column's pieces down over empty slots, keeping their order.

    Returns ``(entity, source, target)`` for every piece whose row changed.
    """
    grid = get_grid(world)
    occupied = [(row, entity) for row, entity in enumerate(grid.slots[col]) if entity is not None]
    empties = grid.height - len(occupied)
    column: List[Optional[int]] = [None] * grid.height
    moves: List[ColumnMove] = []
    for index, (row, entity) in enumerate(occupied):
        target_row = empties + index
        column[target_row] = entity
        if target_row != row:
            pos = world.component_for_entity(entity, GridPosition)
            pos.row = target_row
            moves.append((entity, (col, row), (col, target_row)))
    grid.slots[col] = column
    return moves


def column_is_compact(grid: Grid, col: int) -> bool:
    """True when the column's empty slots, if any, all sit above its pieces."""
    seen_piece = False
    for entity in grid.slots[col]:
        if entity is not None:
            seen_piece = True
        elif seen_piece:
            return False
    return True


def selected_entities(world: World) -> List[int]:
    return [entity for entity, _ in world.get_component(Selected)]


def check_rest_invariants(world: World) -> None:
    """Raise EngineStateError if the board is not in a consistent resting state."""
    grid = get_grid(world)
    if not grid.is_full():
        raise EngineStateError("board at rest has empty slots")
    seen: set[int] = set()
    for pos, entity in grid.occupied():
        if entity in seen:
            raise EngineStateError(f"piece {entity} occupies more than one slot")
        seen.add(entity)
        try:
            position = world.component_for_entity(entity, GridPosition)
            mark = world.component_for_entity(entity, MatchMark)
        except KeyError as exc:
            raise EngineStateError(f"piece {entity} at {pos} is missing components") from exc
        if position.as_tuple() != pos:
            raise EngineStateError(f"piece {entity} believes it is at {position.as_tuple()} but sits at {pos}")
        if mark.marked:
            raise EngineStateError(f"piece {entity} at {pos} is still marked")
    if len(selected_entities(world)) > 1:
        raise EngineStateError("more than one piece is selected")
