"""RNG utilities for reproducible simulation.

Every random draw in the core (weather, bite timing, species choice, the
mini-game fish AI, missions, events) goes through an injected
``random.Random``. Components fail loudly when one is missing rather than
silently creating an unseeded fallback.
"""

import random
from typing import Optional

from angler.exceptions import SimulationError


class MissingRNGError(SimulationError):
    """Raised when an RNG is required but was not provided."""


def require_rng_param(rng: Optional[random.Random], context: str) -> random.Random:
    """Validate that an RNG parameter was provided, failing loudly if not.

    Args:
        rng: The RNG that should have been provided
        context: Description of where this is called from (for error messages)

    Returns:
        The validated RNG

    Raises:
        MissingRNGError: If rng is None

    Example:
        def __init__(self, rng: Optional[random.Random] = None):
            self._rng = require_rng_param(rng, "ClockWeatherSystem.__init__")
    """
    if rng is None:
        raise MissingRNGError(f"RNG required: {context}. Pass the session RNG explicitly.")
    return rng
