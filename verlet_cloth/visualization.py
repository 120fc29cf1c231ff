"""
Visualization utilities for cloth simulation.
"""

from typing import List, Optional

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from mpl_toolkits.mplot3d.art3d import Poly3DCollection


def plot_mesh(
    positions: np.ndarray,
    normals: Optional[np.ndarray] = None,
    light_dir=(0.3, 0.5, 1.0),
    figsize: tuple = (8, 8),
) -> plt.Figure:
    """Draw an extracted triangle list with simple diffuse shading.

    Args:
        positions: Vertex positions of shape (num_vertices, 3), 3 per triangle.
        normals: Vertex normals of the same shape. If None, faces are flat gray.
        light_dir: Direction towards the light, used with ``normals``.
        figsize: Figure size.

    Returns:
        The matplotlib figure.
    """
    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(111, projection="3d")

    tris = positions.reshape(-1, 3, 3)
    if len(tris):
        collection = Poly3DCollection(tris, edgecolor="none")
        if normals is not None:
            face_n = normals.reshape(-1, 3, 3).sum(axis=1)
            lengths = np.linalg.norm(face_n, axis=1, keepdims=True)
            face_n = np.divide(face_n, lengths, out=np.zeros_like(face_n), where=lengths > 0)
            light = np.asarray(light_dir, dtype=np.float32)
            light = light / np.linalg.norm(light)
            shade = 0.2 + 0.8 * np.abs(face_n @ light)
            collection.set_facecolor(plt.get_cmap("Blues")(shade))
        else:
            collection.set_facecolor("lightgray")
        ax.add_collection3d(collection)

        lo = positions.min(axis=0)
        hi = positions.max(axis=0)
        ax.set_xlim(lo[0], hi[0])
        ax.set_ylim(lo[1], hi[1])
        ax.set_zlim(min(lo[2], -0.5), max(hi[2], 0.5))

    ax.set_xlabel("X")
    ax.set_ylabel("Y")
    ax.set_zlabel("Z")
    ax.set_title(f"Cloth mesh ({len(tris)} triangles)")
    return fig


def animate_particles(trajectory, save_path: Optional[str] = None):
    """Create an animated 3D scatter plot of particle positions"""
    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection="3d")
    lo = trajectory.reshape(-1, 3).min(axis=0) - 0.1
    hi = trajectory.reshape(-1, 3).max(axis=0) + 0.1

    def animate(frame):
        ax.clear()
        positions = trajectory[frame]
        ax.scatter(positions[:, 0], positions[:, 1], positions[:, 2], s=4, alpha=0.7)
        ax.set_xlim(lo[0], hi[0])
        ax.set_ylim(lo[1], hi[1])
        ax.set_zlim(lo[2], hi[2])
        ax.set_title(f'Cloth Simulation - Frame {frame}/{len(trajectory)}')
        ax.set_xlabel('X Position')
        ax.set_ylabel('Y Position')
        ax.set_zlabel('Z Position')

    anim = animation.FuncAnimation(fig, animate, frames=len(trajectory),
                                   interval=50, repeat=True)

    if save_path:
        writer = "pillow" if save_path.endswith(".gif") else "ffmpeg"
        anim.save(save_path, writer=writer)

    return anim


def plot_trajectories(
    trajectory: np.ndarray,
    particle_indices: Optional[List[int]] = None,
    figsize: tuple = (12, 8),
) -> plt.Figure:
    """Plot 3D paths of selected particles.

    Args:
        trajectory: Array of shape (frames, num_particles, 3) containing positions.
        particle_indices: Indices of particles to plot. If None, plots a sample.
        figsize: Figure size.

    Returns:
        The matplotlib figure.
    """
    if particle_indices is None:
        # Sample some particles across the cloth
        num_particles = trajectory.shape[1]
        particle_indices = list(range(0, num_particles, max(1, num_particles // 10)))

    fig = plt.figure(figsize=figsize)
    ax = fig.add_subplot(111, projection="3d")

    for idx in particle_indices:
        path = trajectory[:, idx]
        ax.plot(path[:, 0], path[:, 1], path[:, 2], label=f"Particle {idx}", alpha=0.7)

    ax.set_xlabel("X Position")
    ax.set_ylabel("Y Position")
    ax.set_zlabel("Z Position")
    ax.set_title("Particle Trajectories")
    ax.legend(loc="upper left", fontsize="small")

    return fig


def plot_particle_over_time(
    trajectory: np.ndarray,
    particle_index: int,
    figsize: tuple = (15, 4),
) -> plt.Figure:
    """Plot x, y and z position of a single particle over time.

    Args:
        trajectory: Array of shape (frames, num_particles, 3) containing positions.
        particle_index: Index of the particle to plot.
        figsize: Figure size.

    Returns:
        The matplotlib figure.
    """
    fig, axes = plt.subplots(1, 3, figsize=figsize)

    frames = np.arange(len(trajectory))
    for axis, (ax, label) in enumerate(zip(axes, ("X", "Y", "Z"))):
        ax.plot(frames, trajectory[:, particle_index, axis])
        ax.set_xlabel("Time (frame)")
        ax.set_ylabel(f"{label} Position")
        ax.set_title(f"Particle {particle_index} - {label} Position")
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig
