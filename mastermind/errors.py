"""Exceptions raised by the Mastermind engine."""


class MastermindError(Exception):
    """Base exception for all engine errors."""
    pass


class ConfigurationError(MastermindError, ValueError):
    """Raised when a game configuration (or a predefined secret) is inconsistent."""
    pass


class InvalidGuessError(MastermindError, ValueError):
    """Raised when a guess has the wrong length or contains an illegal peg."""
    pass


class SessionTerminatedError(MastermindError):
    """Raised when a guess is submitted after the game was won or lost."""
    pass
