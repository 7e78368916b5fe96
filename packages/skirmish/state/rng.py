"""
Random sources for combat.

The only random decisions in combat (summoner replacement, critical hits) go
through a RandomSource, so a session can be made fully deterministic:

- SystemRandom: default, backed by the standard library's Mersenne Twister
- SeededRandom: XorShift128 generator with copyable state, for tests/replays
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, TypeVar, runtime_checkable
import random as _random


T = TypeVar("T")

MASK64 = 0xFFFFFFFFFFFFFFFF


@runtime_checkable
class RandomSource(Protocol):
    """What combat needs from a random number generator."""

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound)."""
        ...

    def next_float(self) -> float:
        """Random float in [0, 1)."""
        ...


def choice(rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one item uniformly using the given source."""
    if not items:
        raise ValueError("cannot choose from an empty sequence")
    return items[rng.next_int(len(items))]


class XorShift128:
    """
    XorShift128 PRNG.

    State is two 64-bit integers; seeding runs the seed through the MurmurHash3
    finalizer so small seeds still produce well-mixed state.
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        if seed1 is not None:
            # Direct state (used by copy())
            self.seed0 = seed & MASK64
            self.seed1 = seed1 & MASK64
        else:
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        x &= MASK64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & MASK64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & MASK64
        x ^= x >> 33
        return x

    def next_long(self) -> int:
        """Next raw unsigned 64-bit value."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0
        s1 ^= (s1 << 23) & MASK64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & MASK64
        return (self.seed0 + self.seed1) & MASK64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound), with rejection of biased values."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        limit = (1 << 63) - ((1 << 63) % bound)
        while True:
            bits = self.next_long() >> 1
            if bits < limit:
                return bits % bound

    def next_float(self) -> float:
        """Random float in [0, 1) from the top 24 bits."""
        return (self.next_long() >> 40) / (1 << 24)

    def copy(self) -> "XorShift128":
        return XorShift128(self.seed0, self.seed1)


class SeededRandom:
    """Deterministic RandomSource with a call counter."""

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0

    def next_int(self, bound: int) -> int:
        self.counter += 1
        return self._rng.next_int(bound)

    def next_float(self) -> float:
        self.counter += 1
        return self._rng.next_float()

    def copy(self) -> "SeededRandom":
        new = SeededRandom.__new__(SeededRandom)
        new.seed = self.seed
        new._rng = self._rng.copy()
        new.counter = self.counter
        return new


class SystemRandom:
    """RandomSource backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = _random.Random(seed)

    def next_int(self, bound: int) -> int:
        if bound <= 0:
            raise ValueError("bound must be positive")
        return self._rng.randrange(bound)

    def next_float(self) -> float:
        return self._rng.random()


def make_random(seed: Optional[int] = None) -> RandomSource:
    """SeededRandom when a seed is given, otherwise SystemRandom."""
    if seed is not None:
        return SeededRandom(seed)
    return SystemRandom()
