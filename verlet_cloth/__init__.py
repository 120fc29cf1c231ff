"""
Verlet Cloth Simulation Package

A position-based cloth simulation: Verlet particles relaxed through distance
constraints, driven by wind and gravity and pushed out of a collision sphere,
with NVIDIA Warp kernels doing the per-step work.
"""

from .config import ClothParams, SimConfig
from .particle import Particle, ParticleArena
from .constraint import Constraint
from .geometry import make_grid_positions, make_constraint_pairs, make_pins, make_triangles
from .cloth import Cloth
from .simulation import ClothSimulator, save_trajectory, load_trajectory
from .logging_config import LOG_LEVELS, setup_logging

__all__ = [
    "ClothParams",
    "SimConfig",
    "Particle",
    "ParticleArena",
    "Constraint",
    "make_grid_positions",
    "make_constraint_pairs",
    "make_pins",
    "make_triangles",
    "Cloth",
    "ClothSimulator",
    "save_trajectory",
    "load_trajectory",
    "LOG_LEVELS",
    "setup_logging",
]
