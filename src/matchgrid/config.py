from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from matchgrid.constants import (
    GRID_COLS,
    GRID_ROWS,
    MAX_GENERATION_ATTEMPTS,
    MIN_GRID_SIZE,
    MIN_PALETTE_SIZE,
    PALETTE_SIZE,
)
from matchgrid.errors import InvalidConfiguration


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Construction inputs for a board.

    Validated on creation.
    """

    width: int = GRID_COLS
    height: int = GRID_ROWS
    palette_size: int = PALETTE_SIZE
    rng_seed: Optional[int] = None
    max_generation_attempts: int = MAX_GENERATION_ATTEMPTS

    def __post_init__(self) -> None:
        for name in ("width", "height", "palette_size", "max_generation_attempts"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
        if self.width < MIN_GRID_SIZE or self.height < MIN_GRID_SIZE:
            raise InvalidConfiguration(
                f"board must be at least {MIN_GRID_SIZE}x{MIN_GRID_SIZE}, got {self.width}x{self.height}"
            )
        if not MIN_PALETTE_SIZE <= self.palette_size <= PALETTE_SIZE:
            raise InvalidConfiguration(
                f"palette_size must be between {MIN_PALETTE_SIZE} and {PALETTE_SIZE}, got {self.palette_size}"
            )
        if self.max_generation_attempts < 1:
            raise InvalidConfiguration("max_generation_attempts must be positive")
        if self.rng_seed is not None and (isinstance(self.rng_seed, bool) or not isinstance(self.rng_seed, int)):
            raise InvalidConfiguration(f"rng_seed must be an integer or None, got {self.rng_seed!r}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidConfiguration(f"unknown configuration keys: {', '.join(unknown)}")
        return cls(**dict(data))
