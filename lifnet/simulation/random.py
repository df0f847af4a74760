"""Seeded linear-congruential generator for network construction.

The classic use of this generator recomputed every value from one seed
that was never advanced, so all draws within a build coincided.
PseudoRandomSource keeps the generator (same multiplier, increment and
normalisation) but holds its state explicitly:

    advance=True   the state moves on after every draw (default)
    advance=False  every draw recomputes from the unchanged seed,
                   giving the classic draw sequence (in float64
                   arithmetic rather than float32)

It is only used while building a network, never inside a run.
"""

import numpy as np

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32
U32_MAX = LCG_MODULUS - 1


class PseudoRandomSource:
    """Explicitly-stateful LCG producing floats in [0, 1].

    Parameters
    ----------
    seed : int
        Initial state, reduced modulo 2**32.
    advance : bool
        Store the new state after each draw.
    """

    def __init__(self, seed, advance=True):
        self._state = int(seed) % LCG_MODULUS
        self.advance = advance

    @property
    def state(self):
        return self._state

    def random(self):
        """Draw one value in [0, 1]."""
        result = (LCG_MULTIPLIER * self._state + LCG_INCREMENT) % LCG_MODULUS
        if self.advance:
            self._state = result
        return result / U32_MAX

    def sample(self, n):
        """Draw n values as a float array."""
        return np.array([self.random() for _ in range(n)], dtype=np.float64)

    def __repr__(self):
        return f"PseudoRandomSource(state={self._state}, advance={self.advance})"
