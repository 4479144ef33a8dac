from matchgrid.events.bus import EVENT_SCORE_CHANGED
from matchgrid.events.records import ScoreDelta
from matchgrid.systems.scoring import ScoringSystem, get_or_create_score
from tests.helpers import drain, engine_with_layout, of_type, record


def scored_engine():
    world, bus, engine = engine_with_layout("ABAB", "BABA", "AABB", "BBAA")
    drain(engine)
    scoring = ScoringSystem(world, bus)
    return world, bus, engine, scoring


def test_score_accumulates_deltas():
    _, bus, engine, scoring = scored_engine()
    changes = record(bus, EVENT_SCORE_CHANGED)
    engine.attempt_swap((2, 2), (2, 3))
    events = drain(engine)
    expected = sum(event.amount for event in of_type(events, ScoreDelta))
    assert expected >= 60
    assert scoring.score.total == expected
    assert changes[-1]["total"] == expected
    assert scoring.score.moves == 1


def test_rejected_swaps_do_not_count_as_moves():
    _, _, engine, scoring = scored_engine()
    engine.attempt_swap((0, 0), (1, 1))
    engine.attempt_swap((0, 2), (0, 1))
    assert scoring.score.moves == 0
    assert scoring.score.total == 0


def test_score_component_is_shared():
    world, _, _, scoring = scored_engine()
    assert get_or_create_score(world) is scoring.score


def test_reset_zeroes_score():
    _, _, engine, scoring = scored_engine()
    engine.attempt_swap((2, 2), (2, 3))
    drain(engine)
    engine.reset()
    assert scoring.score.total == 0
    assert scoring.score.moves == 0
