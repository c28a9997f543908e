"""64-bit Mersenne Twister matching the standard mt19937_64 engine."""

from __future__ import annotations

import math

_MASK = (1 << 64) - 1
_N = 312
_M = 156
_MATRIX_A = 0xB5026F5AA96619E9
_UPPER = 0xFFFFFFFF80000000
_LOWER = 0x000000007FFFFFFF
_INIT_MULTIPLIER = 6364136223846793005
_TWO_POW_64 = float(1 << 64)

DEFAULT_SEED = 5489


class Mt19937_64:
    """Deterministic 64-bit pseudo-random generator."""

    def __init__(self, seed=DEFAULT_SEED):
        state = [int(seed) & _MASK]
        for i in range(1, _N):
            prev = state[-1]
            state.append((_INIT_MULTIPLIER * (prev ^ (prev >> 62)) + i) & _MASK)
        self._state = state
        self._index = _N

    def _twist(self):
        mt = self._state
        for i in range(_N):
            x = (mt[i] & _UPPER) | (mt[(i + 1) % _N] & _LOWER)
            shifted = x >> 1
            if x & 1:
                shifted ^= _MATRIX_A
            mt[i] = mt[(i + _M) % _N] ^ shifted
        self._index = 0

    def next(self):
        """Return the next 64-bit unsigned output."""
        if self._index >= _N:
            self._twist()
        y = self._state[self._index]
        self._index += 1
        y ^= (y >> 29) & 0x5555555555555555
        y ^= (y << 17) & 0x71D67FFFEDA60000
        y ^= (y << 37) & 0xFFF7EEE000000000
        y ^= y >> 43
        return y & _MASK

    def canonical(self):
        """Return a double in [0, 1) built from one output."""
        value = float(self.next()) / _TWO_POW_64
        if value >= 1.0:
            return math.nextafter(1.0, 0.0)
        return value

    def bernoulli(self, p):
        """Return True with probability p."""
        return self.canonical() < p

    def __iter__(self):
        while True:
            yield self.next()