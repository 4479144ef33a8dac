from matchgrid.components.engine_state import Phase
from matchgrid.config import EngineConfig
from matchgrid.events.bus import EVENT_BOARD_RESET, EVENT_GAME_OVER
from matchgrid.events.records import NoMovesLeft
from matchgrid.systems.grid_engine import SwapResult
from matchgrid.systems.grid_ops import find_available_moves, mark_matches
from matchgrid.systems.session import GameSession
from tests.helpers import engine_with_layout, layout, record

# Diagonal stripes of three colors: no runs and no swap that makes one.
STALEMATE_BOARD = ("ABCAB", "BCABC", "CABCA", "ABCAB", "BCABC")


def test_stalemate_reaches_game_over():
    world, _, engine = engine_with_layout(*STALEMATE_BOARD)
    assert not mark_matches(world)
    assert find_available_moves(world) == []

    assert engine.advance() == []
    assert engine.phase() is Phase.MOVES_CHECK
    events = engine.advance()
    assert events == [NoMovesLeft()]
    assert engine.phase() is Phase.GAME_OVER
    assert engine.is_settled()


def test_game_over_refuses_input():
    _, _, engine = engine_with_layout(*STALEMATE_BOARD)
    engine.resolve()
    before = engine.snapshot()
    assert engine.attempt_swap((0, 0), (1, 0)) is SwapResult.REJECTED_BUSY
    assert engine.select((0, 0)) is False
    assert engine.available_moves() == []
    assert engine.advance() == []
    assert engine.snapshot() == before
    assert engine.phase() is Phase.GAME_OVER


def test_reset_leaves_game_over():
    _, bus, engine = engine_with_layout(*STALEMATE_BOARD)
    resets = record(bus, EVENT_BOARD_RESET)
    engine.resolve()

    engine.reset()

    assert engine.phase() is Phase.IDLE
    assert resets[-1] == {"reason": "reset"}
    assert engine.available_moves()
    assert len(engine.snapshot()) == 25


def test_session_reports_game_over_and_resets_score():
    session = GameSession(EngineConfig(width=5, height=5, palette_size=5, rng_seed=11))
    finished = record(session.event_bus, EVENT_GAME_OVER)
    session.engine.load_layout(layout(*STALEMATE_BOARD))
    session.scoring_system.score.total = 120

    session.engine.resolve()

    assert session.game_over
    assert finished == [{"total": 120, "moves": 0}]
    assert session.scoring_system.score.game_over

    session.reset()
    assert not session.game_over
    assert session.score == 0
    assert not session.scoring_system.score.game_over
