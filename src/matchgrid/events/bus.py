from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong reference so bound methods of systems nobody else holds keep receiving events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# HOST DRIVING
# ============================================================================
EVENT_TICK = "tick"                        # payload: None
EVENT_TILE_CLICK = "tile_click"            # payload: col, row


# ============================================================================
# SELECTION & SWAPS
# ============================================================================
EVENT_PIECE_SELECTED = "piece_selected"        # payload: piece_id=int, position=(c,r)
EVENT_PIECE_DESELECTED = "piece_deselected"    # payload: piece_id=int, position=(c,r)
EVENT_SWAP_RESOLVED = "swap_resolved"          # payload: source=(c,r), target=(c,r), result=SwapResult


# ============================================================================
# BOARD RESOLUTION
# ============================================================================
EVENT_PHASE_CHANGED = "phase_changed"      # payload: previous=Phase, current=Phase
EVENT_PIECE_CLEARED = "piece_cleared"      # payload: piece_id=int, position=(c,r), color=Color, mark_count=int
EVENT_SCORE_DELTA = "score_delta"          # payload: amount=int
EVENT_PIECE_MOVED = "piece_moved"          # payload: piece_id=int, source=(c,r), target=(c,r)
EVENT_NO_MOVES_LEFT = "no_moves_left"      # payload: None
EVENT_BOARD_RESET = "board_reset"          # payload: reason=str


# ============================================================================
# SESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"      # payload: total=int, delta=int
EVENT_GAME_OVER = "game_over"              # payload: total=int, moves=int
