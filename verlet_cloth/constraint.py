"""
Pairwise distance constraints relaxed by positional projection.
"""

from typing import Optional

import numpy as np

from .particle import Particle, ParticleArena

# Lengths at or below this are treated as degenerate and skip the update.
MIN_LENGTH = 1e-9


class Constraint:
    """Keeps two particles of one arena at a fixed rest distance.

    The particles are referenced by index, so the constraint stays valid as
    long as the arena does.

    Args:
        arena: Arena holding both particles.
        i: Index of the first particle.
        j: Index of the second particle.
        rest_distance: Target distance. If None, the current distance between
            the particles is used.
    """

    __slots__ = ("arena", "i", "j", "rest_distance")

    def __init__(
        self,
        arena: ParticleArena,
        i: int,
        j: int,
        rest_distance: Optional[float] = None,
    ):
        n = len(arena)
        if not (0 <= i < n and 0 <= j < n):
            raise IndexError(f"constraint ({i}, {j}) out of range [0, {n})")
        if i == j:
            raise ValueError(f"constraint joins particle {i} to itself")
        self.arena = arena
        self.i = i
        self.j = j
        if rest_distance is None:
            rest_distance = np.linalg.norm(arena.position[i] - arena.position[j])
        self.rest_distance = float(rest_distance)

    @property
    def p1(self) -> Particle:
        return Particle(self.arena, self.i)

    @property
    def p2(self) -> Particle:
        return Particle(self.arena, self.j)

    def current_distance(self) -> float:
        return float(np.linalg.norm(self.arena.position[self.j] - self.arena.position[self.i]))

    def satisfy(self):
        """Move both particles halfway towards the rest distance.

        A pinned particle ignores its half of the correction. Coincident
        particles have no defined direction and are left alone.
        """
        d = self.arena.position[self.j] - self.arena.position[self.i]
        length = np.linalg.norm(d)
        if length <= MIN_LENGTH:
            return
        correction = d * (1.0 - np.float32(self.rest_distance) / length) * 0.5
        self.p1.offset(correction)
        self.p2.offset(-correction)

    def __repr__(self):
        return f"Constraint({self.i}, {self.j}, rest_distance={self.rest_distance:.6f})"
