"""
Verlet particles stored as a structure of arrays.

A ``ParticleArena`` owns the per-particle state in contiguous numpy arrays and
hands out ``Particle`` handles that address a single row by index. The cloth
builds its arena over host views of its warp arrays, so handle mutations and
kernel launches act on the same memory.
"""

from typing import Iterator, Optional

import numpy as np


class ParticleArena:
    """Contiguous per-particle state.

    Attributes:
        position: Current positions, shape (n, 3), float32.
        previous_position: Positions one step ago, shape (n, 3), float32.
        force: Accumulated force / mass, shape (n, 3), float32.
        mass: Particle masses, shape (n,), float32.
        damping: Velocity damping factors, shape (n,), float32.
        movable: 1 for free particles, 0 for pinned, shape (n,), int32.
    """

    def __init__(
        self,
        position: np.ndarray,
        previous_position: np.ndarray,
        force: np.ndarray,
        mass: np.ndarray,
        damping: np.ndarray,
        movable: np.ndarray,
    ):
        n = position.shape[0]
        for name, arr, shape in (
            ("previous_position", previous_position, (n, 3)),
            ("force", force, (n, 3)),
            ("mass", mass, (n,)),
            ("damping", damping, (n,)),
            ("movable", movable, (n,)),
        ):
            if arr.shape != shape:
                raise ValueError(f"{name} has shape {arr.shape}, expected {shape}")

        self.position = position
        self.previous_position = previous_position
        self.force = force
        self.mass = mass
        self.damping = damping
        self.movable = movable

    @classmethod
    def from_positions(
        cls, positions, mass: float = 1.0, damping: float = 0.01
    ) -> "ParticleArena":
        """Create an arena of particles at rest at the given positions.

        Args:
            positions: Sequence of 3D points.
            mass: Mass of every particle.
            damping: Damping factor of every particle.

        Returns:
            A new arena with zero velocity and zero accumulated force.
        """
        pos = np.array(positions, dtype=np.float32).reshape(-1, 3)
        n = pos.shape[0]
        return cls(
            position=pos,
            previous_position=pos.copy(),
            force=np.zeros((n, 3), dtype=np.float32),
            mass=np.full(n, mass, dtype=np.float32),
            damping=np.full(n, damping, dtype=np.float32),
            movable=np.ones(n, dtype=np.int32),
        )

    def __len__(self) -> int:
        return self.position.shape[0]

    def __getitem__(self, index: int) -> "Particle":
        return Particle(self, index)

    def __iter__(self) -> Iterator["Particle"]:
        for i in range(len(self)):
            yield Particle(self, i)

    def snapshot(self) -> dict:
        """Copy the mutable state (positions, previous positions, forces)."""
        return {
            "position": self.position.copy(),
            "previous_position": self.previous_position.copy(),
            "force": self.force.copy(),
        }

    def restore(self, state: dict):
        """Write back a state captured by ``snapshot`` in place."""
        self.position[:] = state["position"]
        self.previous_position[:] = state["previous_position"]
        self.force[:] = state["force"]


class Particle:
    """Handle to one particle of a ``ParticleArena``.

    Handles are cheap and hold no state of their own; two handles with the
    same arena and index refer to the same particle.
    """

    __slots__ = ("arena", "index")

    def __init__(self, arena: ParticleArena, index: int):
        if not 0 <= index < len(arena):
            raise IndexError(f"particle index {index} out of range [0, {len(arena)})")
        self.arena = arena
        self.index = index

    @property
    def position(self) -> np.ndarray:
        """Current position (a copy)."""
        return self.arena.position[self.index].copy()

    @property
    def previous_position(self) -> np.ndarray:
        """Position before the last integration step (a copy)."""
        return self.arena.previous_position[self.index].copy()

    @property
    def force_accumulator(self) -> np.ndarray:
        """Accumulated force divided by mass (a copy)."""
        return self.arena.force[self.index].copy()

    @property
    def mass(self) -> float:
        return float(self.arena.mass[self.index])

    @property
    def damping(self) -> float:
        return float(self.arena.damping[self.index])

    @property
    def movable(self) -> bool:
        return bool(self.arena.movable[self.index])

    def offset(self, delta):
        """Move the particle by ``delta`` unless it is pinned."""
        if self.arena.movable[self.index]:
            self.arena.position[self.index] += np.asarray(delta, dtype=np.float32)

    def set_movable(self, movable: bool):
        self.arena.movable[self.index] = 1 if movable else 0

    def add_force(self, force):
        """Accumulate ``force / mass``."""
        self.arena.force[self.index] += (
            np.asarray(force, dtype=np.float32) / self.arena.mass[self.index]
        )

    def integrate(self, dt: float):
        """Advance one damped Verlet step and clear the force accumulator.

        new = x + (x - x_prev) * (1 - damping) + force * dt

        Pinned particles keep their position; their accumulator is still
        cleared so no force carries into a later step.
        """
        i = self.index
        arena = self.arena
        if arena.movable[i]:
            current = arena.position[i].copy()
            arena.position[i] = (
                current
                + (current - arena.previous_position[i]) * (1.0 - arena.damping[i])
                + arena.force[i] * np.float32(dt)
            )
            arena.previous_position[i] = current
        arena.force[i] = 0.0

    def __eq__(self, other: Optional[object]) -> bool:
        if not isinstance(other, Particle):
            return NotImplemented
        return self.arena is other.arena and self.index == other.index

    def __hash__(self):
        return hash((id(self.arena), self.index))

    def __repr__(self):
        x, y, z = self.arena.position[self.index]
        return (
            f"Particle(index={self.index}, position=({x:.4f}, {y:.4f}, {z:.4f}), "
            f"movable={self.movable})"
        )
