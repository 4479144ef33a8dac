class MatchGridError(Exception):
    """Base class for errors raised by the matchgrid engine."""


class InvalidConfiguration(MatchGridError, ValueError):
    """Board dimensions, palette or generation limits cannot produce a playable board."""


class EngineStateError(MatchGridError, RuntimeError):
    """An engine invariant was broken; the grid can no longer be trusted."""
