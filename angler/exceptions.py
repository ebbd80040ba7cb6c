"""Angler exception hierarchy.

Centralised base classes so failures can be caught narrowly. Most of the
simulation never raises: missed bites, empty candidate sets and lost fish are
ordinary outcomes, and rejected operations are no-ops.
"""


class AnglerError(Exception):
    """Root of all Angler domain exceptions."""


class SimulationError(AnglerError):
    """Errors during simulation execution (session, systems, mini-game)."""


class PersistenceError(AnglerError):
    """Errors during profile save / load operations."""


class ConfigurationError(AnglerError):
    """Invalid or missing configuration."""
