import numpy as np

from verlet_cloth import ClothParams, ClothSimulator, SimConfig, load_trajectory, save_trajectory


def small_config(**kwargs):
    defaults = dict(width=10, height=8, steps=12)
    defaults.update(kwargs)
    return SimConfig(**defaults)


def test_run_records_trajectory():
    sim = ClothSimulator(small_config())
    trajectory = sim.run()
    assert trajectory.shape == (12, 80, 3)
    assert sim.step_count == 12
    assert np.all(np.isfinite(trajectory))
    np.testing.assert_array_equal(trajectory[-1], sim.get_positions())


def test_run_without_recording():
    sim = ClothSimulator(small_config())
    assert sim.run(steps=3, record=False) is None
    assert sim.step_count == 3


def test_run_zero_steps():
    sim = ClothSimulator(small_config())
    assert sim.run(steps=0).shape == (0, 80, 3)


def test_step_order_leaves_particles_outside_sphere():
    config = small_config(sphere_center=(0.45, -0.3, 0.05), sphere_radius=0.25)
    sim = ClothSimulator(config)
    free = sim.cloth.get_free_mask() == 1.0
    for _ in range(8):
        sim.step()
        dist = np.linalg.norm(sim.get_positions() - np.float32(config.sphere_center), axis=1)
        assert np.all(dist[free] >= config.sphere_radius - 1e-5)


def test_wind_and_sphere_can_be_disabled():
    flat = ClothParams(pin_nudge=0.0)
    quiet = ClothSimulator(small_config(use_wind=False, use_sphere=False, cloth=flat))
    windy = ClothSimulator(small_config(use_sphere=False, cloth=ClothParams(pin_nudge=0.0)))
    quiet.run(steps=5, record=False)
    windy.run(steps=5, record=False)
    # the z component of the wind pushes the flat cloth off its plane
    np.testing.assert_array_equal(quiet.get_positions()[:, 2], 0.0)
    assert windy.get_positions()[:, 2].mean() > 0.0


def test_simulators_are_deterministic():
    a = ClothSimulator(small_config())
    b = ClothSimulator(small_config())
    np.testing.assert_array_equal(a.run(), b.run())
    np.testing.assert_array_equal(a.get_mesh()[0], b.get_mesh()[0])


def test_reset_replays_identically():
    sim = ClothSimulator(small_config())
    first = sim.run(steps=6)
    sim.reset()
    assert sim.step_count == 0
    np.testing.assert_array_equal(sim.run(steps=6), first)


def test_disabled_cloth_stays_put():
    config = small_config(use_sphere=False, cloth=ClothParams(enabled=False))
    sim = ClothSimulator(config)
    before = sim.get_positions()
    sim.run(steps=4, record=False)
    np.testing.assert_array_equal(sim.get_positions(), before)


def test_mesh_has_expected_vertex_count():
    config = small_config()
    positions, normals = ClothSimulator(config).get_mesh()
    assert positions.shape == (config.num_vertices, 3)
    assert normals.shape == (config.num_vertices, 3)


def test_save_and_load_trajectory(tmp_path):
    trajectory = ClothSimulator(small_config()).run(steps=2)
    path = tmp_path / "trajectory.npy"
    save_trajectory(trajectory, str(path))
    np.testing.assert_array_equal(load_trajectory(str(path)), trajectory)


def test_run_logs_summary(caplog):
    sim = ClothSimulator(small_config())
    with caplog.at_level("INFO", logger="verlet_cloth"):
        sim.run(steps=1, record=False)
    assert "Running 1 steps" in caplog.text
