"""
Shared test configuration.

Finite differences at ε ~ 1e-6 need double precision, so 64-bit JAX is
enabled before any model is built.
"""
import jax
import pytest

jax.config.update("jax_enable_x64", True)

from hmc_core.model import JaxModel, gaussian_model


@pytest.fixture
def normal_2d():
    """Standard normal over q = (q_1, q_2)"""
    return gaussian_model(dim=2)


@pytest.fixture
def sum_of_squares():
    """f(q) = q_1^2 + q_2^2 with gradient [2 q_1, 2 q_2]"""
    return JaxModel(lambda q: q[0] ** 2 + q[1] ** 2, [("q", (2,))], name="sum_of_squares")
