import pytest

from matchgrid.config import EngineConfig
from matchgrid.constants import GRID_COLS, GRID_ROWS, PALETTE_SIZE
from matchgrid.errors import InvalidConfiguration
from matchgrid.systems.grid_engine import GridEngine
from matchgrid.events.bus import EventBus
from matchgrid.world import create_world
from matchgrid.components.piece import PieceColor
from matchgrid.systems.grid_ops import get_grid


def test_defaults_match_constants():
    config = EngineConfig()
    assert (config.width, config.height, config.palette_size) == (GRID_COLS, GRID_ROWS, PALETTE_SIZE)
    assert config.rng_seed is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 2},
        {"height": 2},
        {"palette_size": 2},
        {"palette_size": 9},
        {"width": 4.0},
        {"height": True},
        {"rng_seed": "seed"},
        {"max_generation_attempts": 0},
    ],
)
def test_invalid_configuration_fails_fast(kwargs):
    with pytest.raises(InvalidConfiguration):
        EngineConfig(**kwargs)


def test_invalid_configuration_is_a_value_error():
    with pytest.raises(ValueError):
        EngineConfig(width=0)


def test_from_mapping_builds_config():
    config = EngineConfig.from_mapping({"width": 5, "height": 6, "palette_size": 4, "rng_seed": 3})
    assert config == EngineConfig(width=5, height=6, palette_size=4, rng_seed=3)


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(InvalidConfiguration, match="colour_count"):
        EngineConfig.from_mapping({"width": 5, "colour_count": 4})


def test_generation_gives_up_without_partial_board(monkeypatch):
    monkeypatch.setattr(
        "matchgrid.systems.board_generation.has_available_move", lambda world: False
    )
    config = EngineConfig(width=4, height=4, palette_size=4, rng_seed=1, max_generation_attempts=3)
    world = create_world(config)
    with pytest.raises(InvalidConfiguration, match="3 attempts"):
        GridEngine(world, EventBus(), config)
    assert get_grid(world).occupied() == []
    assert not list(world.get_component(PieceColor))
