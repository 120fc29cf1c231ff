"""
Cloth geometry creation functions.

These functions create the initial particle positions, the constraint graph,
the pinned particle pairs and the render triangulation. Particles are stored
row-major, ``index = y * width + x``.
"""

from typing import List, Tuple

import numpy as np


def grid_index(x: int, y: int, width: int) -> int:
    """Linear index of the particle at grid coordinate (x, y)."""
    return y * width + x


def make_grid_positions(width: int, height: int) -> np.ndarray:
    """Create initial grid positions for cloth particles.

    The grid spans x in [0, 1) and y in (-1, 0] on the z = 0 plane, with row 0
    at the top.

    Args:
        width: Number of particles along x.
        height: Number of particles along y.

    Returns:
        Array of shape (width * height, 3) containing 3D positions.
    """
    pos = np.zeros((width * height, 3), dtype=np.float32)

    for x in range(width):
        for y in range(height):
            idx = grid_index(x, y, width)
            pos[idx, 0] = x / width
            pos[idx, 1] = -(y / height)

    return pos


def make_constraint_pairs(width: int, height: int) -> np.ndarray:
    """Create the particle index pairs of every distance constraint.

    Two sweeps over the grid, columns outer and rows inner. The first sweep
    adds structural (right, below) and shear (both diagonals of the cell)
    constraints, the second adds the same four relations at distance two to
    resist bending. The order fixes the relaxation trajectory.

    Args:
        width: Number of particles along x.
        height: Number of particles along y.

    Returns:
        Array of shape (num_constraints, 2) with particle indices.
    """
    pairs = []

    for step in (1, 2):
        for x in range(width):
            for y in range(height):
                curr = grid_index(x, y, width)
                if x + step < width:
                    pairs.append((curr, grid_index(x + step, y, width)))
                if y + step < height:
                    pairs.append((curr, grid_index(x, y + step, width)))
                if x + step < width and y + step < height:
                    pairs.append((curr, grid_index(x + step, y + step, width)))
                    pairs.append(
                        (grid_index(x + step, y, width), grid_index(x, y + step, width))
                    )

    return np.array(pairs, dtype=np.int32).reshape(-1, 2)


def make_pins(width: int, pin_count: int) -> List[Tuple[int, int]]:
    """Pair up the particles pinned at both ends of the top row.

    Args:
        width: Number of particles along x.
        pin_count: Particles to pin at each end, clipped to ``width``.

    Returns:
        List of (left_index, right_index) pairs, the i-th pair being
        (i, 0) and (width - 1 - i, 0).
    """
    return [
        (grid_index(i, 0, width), grid_index(width - 1 - i, 0, width))
        for i in range(min(pin_count, width))
    ]


def make_triangles(width: int, height: int) -> np.ndarray:
    """Triangulate the grid in render order.

    Each cell (x, y) yields triangle A = (x+1, y), (x, y), (x, y+1) and
    triangle B = (x+1, y+1), (x+1, y), (x, y+1). Cells are visited columns
    outer, rows inner. Wind and mesh extraction share this order so their
    face normals agree.

    Args:
        width: Number of particles along x.
        height: Number of particles along y.

    Returns:
        Array of shape (2 * (width - 1) * (height - 1), 3) with particle indices.
    """
    tris = []

    for x in range(width - 1):
        for y in range(height - 1):
            tris.append(
                (
                    grid_index(x + 1, y, width),
                    grid_index(x, y, width),
                    grid_index(x, y + 1, width),
                )
            )
            tris.append(
                (
                    grid_index(x + 1, y + 1, width),
                    grid_index(x + 1, y, width),
                    grid_index(x, y + 1, width),
                )
            )

    return np.array(tris, dtype=np.int32).reshape(-1, 3)
