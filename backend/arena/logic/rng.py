"""
Random number generation for dice rolls and AI move selection.

Uses stdlib random.Random: outcomes only need to be uniform, not
reproducible across restarts. Passing a seed makes a session's rolls
deterministic, which tests and debugging rely on.
"""

import random

DIE_FACES = 6


def create_rng(seed: int | None = None) -> random.Random:
    """Create an RNG for one session. Unseeded RNGs draw from OS entropy."""
    if seed is None:
        return random.Random()  # noqa: S311
    return random.Random(seed)  # noqa: S311


def roll_die(rng: random.Random) -> int:
    """Roll one standard six-sided die."""
    return rng.randint(1, DIE_FACES)
