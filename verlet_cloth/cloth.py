"""
Cloth made of Verlet particles held together by distance constraints.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np
import warp as wp

from .config import ClothParams
from .constraint import MIN_LENGTH, Constraint
from .geometry import (
    grid_index,
    make_constraint_pairs,
    make_grid_positions,
    make_pins,
    make_triangles,
)
from .particle import Particle, ParticleArena
from . import kernels

logger = logging.getLogger(__name__)


def _vec3(v) -> wp.vec3:
    if len(v) != 3:
        raise ValueError(f"expected a 3-component vector, got {v}")
    return wp.vec3(float(v[0]), float(v[1]), float(v[2]))


class Cloth:
    """Rectangular cloth simulated on the CPU with Warp kernels.

    Particles sit on a ``width x height`` grid spanning x in [0, 1) and
    y in (-1, 0], stored row-major. Structural, shear and bend constraints
    join each particle to its neighbours at distance one and two. The first
    ``pin_count`` particles at each end of the top row are pinned.

    The particle state lives in warp arrays; ``particles`` is a host arena
    over the same memory, so handles returned by ``get_particle`` observe and
    drive the simulation directly.

    Attributes:
        width: Particles along x.
        height: Particles along y.
        params: Parameters the cloth was built with.
        solver_iterations: Relaxation passes per update.
        gravity: Gravity vector.
        use_gravity: Whether update applies gravity.
        enabled: Whether update does anything.
        particles: Host view of the particle state.
        mesh: Last (positions, normals) pair returned by ``build_mesh``.
    """

    def __init__(self, width: int, height: int, params: Optional[ClothParams] = None):
        """Build the particle grid, the constraint graph and the initial mesh.

        Args:
            width: Particles along x, > 0.
            height: Particles along y, > 0.
            params: Cloth parameters. Defaults to ``ClothParams()``.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"cloth dimensions must be positive, got {width}x{height}")

        self.width = width
        self.height = height
        self.params = params if params is not None else ClothParams()
        self.solver_iterations = self.params.solver_iterations
        self.gravity = tuple(float(g) for g in self.params.gravity)
        self.use_gravity = self.params.use_gravity
        self.enabled = self.params.enabled
        self.normal_mode = self.params.normal_mode
        self._device = self.params.wp_device

        self._init_arrays()

        self.particles = ParticleArena(
            position=self.pos.numpy(),
            previous_position=self.prev.numpy(),
            force=self.forces.numpy(),
            mass=self.masses.numpy(),
            damping=self.damping.numpy(),
            movable=self.movable.numpy(),
        )

        # Rest lengths are measured before the pins are nudged.
        if self.num_constraints > 0:
            wp.launch(
                kernels.rest_lengths,
                dim=self.num_constraints,
                inputs=[self.pos, self.pairs, self.rest],
                device=self._device,
            )

        self._pin_top_row()

        # Store initial state for reset
        self._initial_state = self.particles.snapshot()

        self.mesh = self.build_mesh()

        logger.info(
            "Created %dx%d cloth: %d particles, %d constraints, %d pinned",
            width,
            height,
            self.num_particles,
            self.num_constraints,
            int(self.num_particles - self.get_free_mask().sum()),
        )

    def _init_arrays(self):
        """Initialize all simulation arrays."""
        device = self._device
        params = self.params
        n = self.width * self.height

        # Create geometry in NumPy
        pos_np = make_grid_positions(self.width, self.height)
        self._pairs_np = make_constraint_pairs(self.width, self.height)
        self._tris_np = make_triangles(self.width, self.height)

        # Transfer to Warp arrays
        self.pos = wp.array(pos_np, dtype=wp.vec3, device=device)
        self.prev = wp.array(pos_np, dtype=wp.vec3, device=device)
        self.forces = wp.zeros(n, dtype=wp.vec3, device=device)
        self.masses = wp.array(
            np.full(n, params.mass, dtype=np.float32), dtype=wp.float32, device=device
        )
        self.damping = wp.array(
            np.full(n, params.damping, dtype=np.float32), dtype=wp.float32, device=device
        )
        self.movable = wp.array(np.ones(n, dtype=np.int32), dtype=wp.int32, device=device)
        self.pairs = wp.array(self._pairs_np, dtype=wp.int32, device=device)
        self.rest = wp.zeros(self._pairs_np.shape[0], dtype=wp.float32, device=device)
        self.tris = wp.array(self._tris_np, dtype=wp.int32, device=device)

        # Mesh extraction buffers
        self.normals = wp.zeros(n, dtype=wp.vec3, device=device)
        self.out_pos = wp.zeros(self.num_vertices, dtype=wp.vec3, device=device)
        self.out_nrm = wp.zeros(self.num_vertices, dtype=wp.vec3, device=device)

    def _pin_top_row(self):
        """Pin both ends of the top row.

        The left particle is nudged by ``pin_nudge`` along x and pinned before
        the opposite nudge is applied, so the inverse offset is swallowed and
        the left group stays shifted. The right group is pinned in place.
        """
        nudge = np.array([self.params.pin_nudge, 0.0, 0.0], dtype=np.float32)
        for left, right in make_pins(self.width, self.params.pin_count):
            p = self.particles[left]
            p.offset(nudge)
            p.set_movable(False)
            p.offset(-nudge)
            self.particles[right].set_movable(False)

    @property
    def num_particles(self) -> int:
        return self.width * self.height

    @property
    def num_constraints(self) -> int:
        return self._pairs_np.shape[0]

    @property
    def num_triangles(self) -> int:
        return self._tris_np.shape[0]

    @property
    def num_vertices(self) -> int:
        """Vertices in the extracted triangle list."""
        return 6 * (self.width - 1) * (self.height - 1)

    @property
    def constraints(self) -> List[Constraint]:
        """Constraint handles over the cloth particles, in relaxation order."""
        rest = self.rest.numpy()
        return [
            Constraint(self.particles, int(i), int(j), float(r))
            for (i, j), r in zip(self._pairs_np, rest)
        ]

    def get_particle(self, x: int, y: int) -> Particle:
        """Particle at grid coordinate (x, y)."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"grid coordinate ({x}, {y}) out of range for {self.width}x{self.height} cloth"
            )
        return self.particles[grid_index(x, y, self.width)]

    def add_wind_force(self, direction):
        """Accumulate wind force on every triangle of the grid.

        Args:
            direction: Wind direction and strength.
        """
        if self.num_triangles == 0:
            return
        wp.launch(
            kernels.wind_forces,
            dim=self.num_triangles,
            inputs=[self.pos, self.tris, self.masses, _vec3(direction), MIN_LENGTH, self.forces],
            device=self._device,
        )

    def update(self, dt: float):
        """Relax the constraints, then apply gravity and integrate.

        Does nothing while the cloth is disabled.

        Args:
            dt: Time step.
        """
        if not self.enabled:
            return

        device = self._device

        if self.num_constraints > 0 and self.solver_iterations > 0:
            wp.launch(
                kernels.relax_constraints,
                dim=1,
                inputs=[
                    self.pos,
                    self.movable,
                    self.pairs,
                    self.rest,
                    int(self.solver_iterations),
                    MIN_LENGTH,
                ],
                device=device,
            )

        wp.launch(
            kernels.integrate,
            dim=self.num_particles,
            inputs=[
                self.pos,
                self.prev,
                self.forces,
                self.masses,
                self.damping,
                self.movable,
                _vec3(self.gravity),
                1 if self.use_gravity else 0,
                float(dt),
            ],
            device=device,
        )

    def collision_detection_with_sphere(self, center, radius: float):
        """Push particles inside the sphere out to its surface.

        Args:
            center: Sphere center.
            radius: Sphere radius, >= 0.
        """
        if radius < 0.0:
            raise ValueError(f"sphere radius must be >= 0, got {radius}")
        wp.launch(
            kernels.sphere_collision,
            dim=self.num_particles,
            inputs=[self.pos, self.movable, _vec3(center), float(radius), MIN_LENGTH],
            device=self._device,
        )

    def build_mesh(self) -> Tuple[np.ndarray, np.ndarray]:
        """Extract a renderable triangle list.

        Returns:
            Tuple of (positions, normals), float32 arrays of shape
            (num_vertices, 3). Both are copies owned by the caller.
        """
        device = self._device

        wp.launch(
            kernels.zero_vec3, dim=self.num_particles, inputs=[self.normals], device=device
        )

        if self.num_triangles > 0:
            if self.normal_mode == "incremental":
                wp.launch(
                    kernels.mesh_incremental,
                    dim=1,
                    inputs=[self.pos, self.tris, MIN_LENGTH, self.normals, self.out_pos, self.out_nrm],
                    device=device,
                )
            else:
                wp.launch(
                    kernels.accumulate_normals,
                    dim=self.num_triangles,
                    inputs=[self.pos, self.tris, MIN_LENGTH, self.normals],
                    device=device,
                )
                wp.launch(
                    kernels.mesh_smooth,
                    dim=self.num_triangles,
                    inputs=[self.pos, self.tris, self.normals, MIN_LENGTH, self.out_pos, self.out_nrm],
                    device=device,
                )

        positions = self.out_pos.numpy().reshape(-1, 3).copy()
        normals = self.out_nrm.numpy().reshape(-1, 3).copy()
        self.mesh = (positions, normals)
        return self.mesh

    def particle_normals(self) -> np.ndarray:
        """Per-particle normal sums left by the last ``build_mesh``."""
        return self.normals.numpy().copy()

    def reset(self):
        """Restore the state captured right after construction."""
        self.particles.restore(self._initial_state)

    def get_positions(self) -> np.ndarray:
        """Get current positions as numpy array."""
        return self.particles.position.copy()

    def get_free_mask(self) -> np.ndarray:
        """Get mask for free (non-pinned) particles.

        Returns:
            Array of shape (num_particles,) with 1.0 for free, 0.0 for pinned.
        """
        return self.particles.movable.astype(np.float32)
