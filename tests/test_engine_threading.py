import threading

from matchgrid.components.engine_state import SETTLED_PHASES
from matchgrid.systems.grid_ops import check_rest_invariants
from tests.helpers import build_engine


def test_simulation_and_ui_threads_share_one_engine():
    world, _, engine = build_engine(width=6, height=6, palette_size=5, seed=21)
    stop = threading.Event()
    errors = []

    def simulate():
        try:
            for _ in range(400):
                if engine.is_settled():
                    moves = engine.available_moves()
                    if moves:
                        engine.attempt_swap(*moves[0])
                engine.advance()
        except Exception as exc:  # collected for the assertion below
            errors.append(exc)
        finally:
            stop.set()

    def observe():
        try:
            while not stop.is_set():
                views = engine.snapshot()
                ids = [view.piece_id for view in views]
                assert len(ids) == len(set(ids))
                assert len([view for view in views if view.selected]) <= 1
                engine.selected()
                engine.phase()
                engine.select((0, 0))
                engine.deselect()
        except Exception as exc:  # collected for the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=simulate), threading.Thread(target=observe)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)

    assert not any(thread.is_alive() for thread in threads)
    assert errors == []
    engine.resolve()
    assert engine.phase() in SETTLED_PHASES
    engine.deselect()
    check_rest_invariants(world)
    assert len(engine.snapshot()) == 36
