from enum import Enum
from typing import Tuple


class Color(Enum):
    """Fixed palette of piece colors. Compared by identity only; no ordering."""
    RED = "red"
    PURPLE = "purple"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    PINK = "pink"
    MAGENTA = "magenta"


def palette_for(size: int) -> Tuple[Color, ...]:
    """Return the first ``size`` colors of the palette in declaration order."""
    return tuple(list(Color)[:size])
