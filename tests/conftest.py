import matplotlib

matplotlib.use("Agg")

import pytest

from verlet_cloth import Cloth, ClothParams


@pytest.fixture
def free_params():
    """Parameters for a cloth with no pinned particles."""
    return ClothParams(pin_count=0)


@pytest.fixture
def small_cloth():
    return Cloth(6, 5)


@pytest.fixture
def flat_cloth(free_params):
    """Unpinned cloth lying flat in the z = 0 plane."""
    return Cloth(4, 4, free_params)
