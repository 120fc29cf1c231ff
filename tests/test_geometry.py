import numpy as np
import pytest

from verlet_cloth.geometry import (
    grid_index,
    make_constraint_pairs,
    make_grid_positions,
    make_pins,
    make_triangles,
)


def test_grid_positions_row_major():
    w, h = 4, 3
    pos = make_grid_positions(w, h)
    assert pos.shape == (w * h, 3)
    assert pos.dtype == np.float32
    for x in range(w):
        for y in range(h):
            np.testing.assert_allclose(pos[y * w + x], [x / w, -y / h, 0.0], atol=1e-7)


def test_grid_index():
    assert grid_index(0, 0, 5) == 0
    assert grid_index(4, 0, 5) == 4
    assert grid_index(0, 1, 5) == 5
    assert grid_index(2, 3, 5) == 17


@pytest.mark.parametrize("w, h", [(2, 2), (4, 3), (5, 7), (1, 4)])
def test_constraint_count(w, h):
    structural = (w - 1) * h + w * (h - 1)
    shear = 2 * max(w - 1, 0) * max(h - 1, 0)
    bend = max(w - 2, 0) * h + w * max(h - 2, 0) + 2 * max(w - 2, 0) * max(h - 2, 0)
    pairs = make_constraint_pairs(w, h)
    assert pairs.shape == (structural + shear + bend, 2)
    assert pairs.dtype == np.int32


def test_constraint_order():
    pairs = make_constraint_pairs(3, 3)
    # particle (0, 0): right, below, diagonal, anti-diagonal
    assert pairs[:4].tolist() == [[0, 1], [0, 3], [0, 4], [1, 3]]
    # columns outer, rows inner: (0, 1) follows (0, 0)
    assert pairs[4:8].tolist() == [[3, 4], [3, 6], [3, 7], [4, 6]]
    # the bend sweep starts after every structural and shear pair
    first_sweep = 2 * 3 * 2 + 2 * 2 * 2
    assert pairs[first_sweep:first_sweep + 4].tolist() == [[0, 2], [0, 6], [0, 8], [2, 6]]


def test_constraint_pairs_are_distinct_particles():
    pairs = make_constraint_pairs(6, 5)
    assert np.all(pairs[:, 0] != pairs[:, 1])
    assert pairs.min() >= 0
    assert pairs.max() < 30


def test_single_particle_has_no_constraints():
    assert make_constraint_pairs(1, 1).shape == (0, 2)


def test_pins_mirror_top_row():
    assert make_pins(10, 3) == [(0, 9), (1, 8), (2, 7)]
    assert make_pins(10, 0) == []


def test_pins_clip_to_width():
    assert make_pins(2, 3) == [(0, 1), (1, 0)]


def test_triangles_render_order():
    w, h = 3, 2
    tris = make_triangles(w, h)
    assert tris.shape == (2 * (w - 1) * (h - 1), 3)
    # cell (0, 0): A = (1,0),(0,0),(0,1); B = (1,1),(1,0),(0,1)
    assert tris[0].tolist() == [1, 0, 3]
    assert tris[1].tolist() == [4, 1, 3]
    # cell (1, 0)
    assert tris[2].tolist() == [2, 1, 4]
    assert tris[3].tolist() == [5, 2, 4]


def test_degenerate_grid_has_no_triangles():
    assert make_triangles(1, 5).shape == (0, 3)
    assert make_triangles(5, 1).shape == (0, 3)
