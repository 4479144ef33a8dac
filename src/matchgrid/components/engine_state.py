"""Resolution phase resource shared by the engine and the systems around it."""
from dataclasses import dataclass
from enum import Enum, auto


class Phase(Enum):
    """Steps of the swap / match / clear / drop / refill cycle."""
    IDLE = auto()
    AWAITING_SWAP = auto()
    MATCHING = auto()
    CLEARING = auto()
    DROPPING = auto()
    REFILLING = auto()
    MOVES_CHECK = auto()
    GAME_OVER = auto()


# Phases in which the board is at rest and the player may act.
REST_PHASES = frozenset({Phase.IDLE, Phase.AWAITING_SWAP})
# Phases after which advance() has no further work until the player acts.
SETTLED_PHASES = frozenset({Phase.IDLE, Phase.AWAITING_SWAP, Phase.GAME_OVER})


@dataclass(slots=True)
class EngineState:
    """Singleton component storing the current resolution phase."""
    phase: Phase = Phase.IDLE
    cascade_depth: int = 0
