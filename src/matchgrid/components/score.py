from dataclasses import dataclass


@dataclass(slots=True)
class Score:
    """Singleton component with the running session score."""
    total: int = 0
    moves: int = 0
    game_over: bool = False
