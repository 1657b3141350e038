"""
Exceptions raised by the JFA engine.

All of them are detected before the pass loop starts; once a computation
begins with valid inputs it always runs to completion. An empty seed set is
not an error (see jfa.NO_SEEDS).
"""


class JFAError(Exception):
    """Base class for engine errors."""


class InvalidDimension(JFAError, ValueError):
    """Grid width or height is not a positive integer, or too large for a backend."""

    def __init__(self, width, height, reason="must be positive integers"):
        super().__init__(f"Grid dimensions {reason}, got {width}x{height}")
        self.width = width
        self.height = height


class InvalidSeed(JFAError, ValueError):
    """Seed is malformed or lies outside the grid."""

    def __init__(self, seed, width, height):
        super().__init__(f"Seed {seed!r} is outside the {width}x{height} grid")
        self.seed = seed


class NotInitialized(JFAError, RuntimeError):
    """Engine used before initialize() (or after release())."""
