"""
Fixed-timestep driver for running cloth simulations.
"""

import logging
from typing import Optional

import numpy as np

from .cloth import Cloth
from .config import SimConfig

logger = logging.getLogger(__name__)


class ClothSimulator:
    """Steps a cloth through wind, update and sphere collision.

    Every step applies wind (if enabled), advances the cloth by ``config.dt``
    and resolves collisions against the configured sphere (if enabled), in
    that order.

    Attributes:
        config: Simulation configuration.
        cloth: The simulated cloth.
        step_count: Steps taken since construction or the last reset.
    """

    def __init__(self, config: SimConfig):
        """Initialize the cloth simulator.

        Args:
            config: Simulation configuration.
        """
        self.config = config
        self.cloth = Cloth(config.width, config.height, config.cloth)
        self.step_count = 0

    def reset(self):
        """Reset simulation to initial state."""
        self.cloth.reset()
        self.step_count = 0

    def step(self):
        """Perform one simulation step."""
        config = self.config
        cloth = self.cloth

        if config.use_wind:
            cloth.add_wind_force(config.wind)
        cloth.update(config.dt)
        if config.use_sphere:
            cloth.collision_detection_with_sphere(config.sphere_center, config.sphere_radius)

        self.step_count += 1

    def run(self, steps: Optional[int] = None, record: bool = True) -> Optional[np.ndarray]:
        """Run simulation for multiple steps.

        Args:
            steps: Number of steps to run. If None, uses config.steps.
            record: Whether to record trajectory.

        Returns:
            If record=True, returns trajectory array of shape (steps, num_particles, 3).
            Otherwise returns None.
        """
        if steps is None:
            steps = self.config.steps

        logger.info("Running %d steps with dt=%g", steps, self.config.dt)
        trajectory = [] if record else None

        for _ in range(steps):
            self.step()
            if record:
                trajectory.append(self.cloth.get_positions())

        positions = self.cloth.get_positions()
        if not np.all(np.isfinite(positions)):
            logger.warning("Non-finite particle positions after %d steps", self.step_count)
        logger.debug("Lowest particle after %d steps: y=%.4f", self.step_count, positions[:, 1].min())

        if record:
            if not trajectory:
                return np.zeros((0, self.cloth.num_particles, 3), dtype=np.float32)
            return np.array(trajectory)
        return None

    def get_positions(self) -> np.ndarray:
        """Get current positions as numpy array."""
        return self.cloth.get_positions()

    def get_mesh(self):
        """Extract the current triangle list as (positions, normals)."""
        return self.cloth.build_mesh()


def save_trajectory(trajectory: np.ndarray, path: str):
    """Save a trajectory to a numpy file.

    Args:
        trajectory: Array of shape (frames, particles, 3).
        path: Path to save the file.
    """
    np.save(path, trajectory)
    logger.info("Saved trajectory to %s with shape %s", path, trajectory.shape)


def load_trajectory(path: str) -> np.ndarray:
    """Load a trajectory from a numpy file.

    Args:
        path: Path to the trajectory file.

    Returns:
        Trajectory array of shape (frames, particles, 3).
    """
    trajectory = np.load(path)
    logger.info("Loaded trajectory from %s with shape %s", path, trajectory.shape)
    return trajectory
