"""
Pytest configuration and shared fixtures for stridemat tests.
"""

import pytest
import numpy as np
from pathlib import Path
import sys

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

from stridemat import Matrix, get_config


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def reset_config():
    """Restore global config after each test."""
    yield
    get_config().reset()


@pytest.fixture
def grid_matrix():
    """Create a packed 4x5 matrix with m[i, j] == 10 * i + j.

    Matrix:
    [[ 0,  1,  2,  3,  4],
     [10, 11, 12, 13, 14],
     [20, 21, 22, 23, 24],
     [30, 31, 32, 33, 34]]
    """
    data = [float(10 * i + j) for i in range(4) for j in range(5)]
    return Matrix.from_data(4, 5, data)


@pytest.fixture
def complex_matrix():
    """Create a packed 2x3 complex matrix."""
    data = np.array([1 + 1j, 2, 3 - 1j, 4j, 5, 6 + 2j], dtype=np.complex128)
    return Matrix.from_data(2, 3, data)


@pytest.fixture
def strided_operand():
    """2x2 matrix with stride 3: logical rows [4, 4] and [7, 7]."""
    return Matrix.wrap_strided(2, 2, 3, [4.0, 4.0, 4.0, 7.0, 7.0])
