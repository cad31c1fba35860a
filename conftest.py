"""Pytest configuration and shared test utilities."""

import pytest
import numpy as np
import jax.numpy as jnp
from typing import Union


# Batch kernel outputs are whole numbers held in floats
RTOL_DEFAULT = 1e-9
ATOL_DEFAULT = 1e-9


def assert_close(
    actual: Union[float, jnp.ndarray, np.ndarray],
    expected: Union[float, jnp.ndarray, np.ndarray],
    rtol: float = RTOL_DEFAULT,
    atol: float = ATOL_DEFAULT,
    msg: str = ""
):
    """Assert that two scalars are close within tolerance.

    Handles JAX arrays, NumPy arrays, and Python numbers uniformly.

    Example:
        >>> batch = compute_fee_batch(runtime, prices, peg, down)
        >>> assert_close(batch.fee[0], 2100)
    """
    actual_val = float(actual) if hasattr(actual, '__float__') else actual
    expected_val = float(expected) if hasattr(expected, '__float__') else expected

    assert actual_val == pytest.approx(expected_val, rel=rtol, abs=atol), (
        f"{msg}\nExpected: {expected_val}\nActual: {actual_val}\n"
        f"Diff: {abs(actual_val - expected_val)}"
    )


def assert_array_close(
    actual: Union[jnp.ndarray, np.ndarray, list],
    expected: Union[jnp.ndarray, np.ndarray, list],
    rtol: float = RTOL_DEFAULT,
    atol: float = ATOL_DEFAULT,
    msg: str = ""
):
    """Assert that two arrays are close within tolerance.

    Uses numpy.testing.assert_allclose for detailed error messages.
    """
    np.testing.assert_allclose(
        np.asarray(actual, dtype=np.float64),
        np.asarray(expected, dtype=np.float64),
        rtol=rtol, atol=atol,
        err_msg=msg
    )


@pytest.fixture
def close():
    """Fixture providing assert_close function."""
    return assert_close


@pytest.fixture
def array_close():
    """Fixture providing assert_array_close function.

    Usage:
        def test_something(array_close):
            array_close(batch.fee, expected_fees)
    """
    return assert_array_close
