"""
Configuration dataclasses for the cloth simulation.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

import warp as wp

Vec3 = Tuple[float, float, float]

NORMAL_MODES = ("incremental", "smooth")


@dataclass
class ClothParams:
    """Physical and solver parameters owned by a single cloth.

    Attributes:
        solver_iterations: Relaxation passes over every constraint per update.
        gravity: Gravity vector, applied as ``gravity * dt`` each update.
        use_gravity: Whether ``update`` applies gravity.
        enabled: Whether ``update`` does anything at all.
        mass: Mass of every particle.
        damping: Velocity loss per step, in [0, 1].
        pin_count: Particles pinned at each end of the top row.
        pin_nudge: X offset applied to the left pinned group just before pinning.
        normal_mode: ``"incremental"`` emits the running normal sum at each
            vertex, ``"smooth"`` accumulates every face first and normalizes.
        device: Warp device. Only CPU devices are supported.
    """

    solver_iterations: int = 15
    gravity: Vec3 = (0.0, -0.2, 0.0)
    use_gravity: bool = True
    enabled: bool = True
    mass: float = 1.0
    damping: float = 0.01
    pin_count: int = 3
    pin_nudge: float = 0.5
    normal_mode: str = "incremental"
    device: Optional[str] = None

    def __post_init__(self):
        """Validate values and resolve the warp device."""
        if self.solver_iterations < 0:
            raise ValueError(f"solver_iterations must be >= 0, got {self.solver_iterations}")
        if self.mass <= 0.0:
            raise ValueError(f"mass must be positive, got {self.mass}")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"damping must lie in [0, 1], got {self.damping}")
        if self.pin_count < 0:
            raise ValueError(f"pin_count must be >= 0, got {self.pin_count}")
        if self.normal_mode not in NORMAL_MODES:
            raise ValueError(
                f"normal_mode must be one of {NORMAL_MODES}, got {self.normal_mode!r}"
            )
        if len(self.gravity) != 3:
            raise ValueError(f"gravity must have 3 components, got {self.gravity}")

        wp.init()
        if self.device is None:
            self.device = "cpu"
        if not wp.get_device(self.device).is_cpu:
            # Host particle handles alias device memory, which needs a CPU array.
            raise ValueError(f"only CPU devices are supported, got {self.device!r}")
        self.device = str(wp.get_device(self.device))

    @property
    def wp_device(self):
        """Get the warp device object."""
        return wp.get_device(self.device)


@dataclass
class SimConfig:
    """Configuration for a fixed-timestep simulation run.

    Defaults describe the demo scene: a 55 x 45 cloth stepped at
    0.25 with wind (12, 0, 0.6) blowing into a sphere of radius 0.2 at the
    origin.

    Attributes:
        width: Number of particles along x.
        height: Number of particles along y.
        dt: Time step passed to every update.
        steps: Number of steps for ``ClothSimulator.run``.
        wind: Wind direction and strength.
        use_wind: Whether each step applies wind.
        sphere_center: Center of the collision sphere.
        sphere_radius: Radius of the collision sphere.
        use_sphere: Whether each step resolves sphere collisions.
        cloth: Parameters of the simulated cloth.
    """

    width: int = 55
    height: int = 45
    dt: float = 0.25
    steps: int = 200
    wind: Vec3 = (12.0, 0.0, 0.6)
    use_wind: bool = True
    sphere_center: Vec3 = (0.0, 0.0, 0.0)
    sphere_radius: float = 0.2
    use_sphere: bool = True
    cloth: ClothParams = field(default_factory=ClothParams)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"cloth dimensions must be positive, got {self.width}x{self.height}"
            )
        if self.steps < 0:
            raise ValueError(f"steps must be >= 0, got {self.steps}")
        if self.sphere_radius < 0.0:
            raise ValueError(f"sphere_radius must be >= 0, got {self.sphere_radius}")

    @property
    def num_particles(self) -> int:
        """Total number of particles in the cloth."""
        return self.width * self.height

    @property
    def num_vertices(self) -> int:
        """Number of triangle-list vertices produced by mesh extraction."""
        return 6 * (self.width - 1) * (self.height - 1)
