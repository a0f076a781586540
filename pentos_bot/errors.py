"""Exceptions raised by the Pentos engine."""


class PentosError(Exception):
    """Base class for engine errors."""
    pass


class NoCandidateError(PentosError):
    """No buildable, road-connectable placement exists for a request.

    The host is expected to guarantee at least one placement; when it does
    not, the turn cannot be played and the host should treat it as a
    rejection.
    """
    pass


class InvalidMoveError(PentosError):
    """A move could not be applied to the board."""
    pass


class ConfigError(PentosError, ValueError):
    """Bad configuration key or value."""
    pass
