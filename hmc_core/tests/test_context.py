"""
Tests for initialization contexts and Model.transform_inits.
"""
import jax.numpy as jnp
import numpy as np
import pytest

from hmc_core.context import ChainedContext, ExplicitContext, RandomContext, randomized_context
from hmc_core.errors import InitializationError
from hmc_core.model import JaxModel, ParamSpec
from hmc_core.rng import create_rng


@pytest.fixture
def two_block_model():
    def log_density(q):
        return -0.5 * jnp.sum(q ** 2)
    return JaxModel(log_density, [ParamSpec("a", (50,)), ParamSpec("b")])


@pytest.fixture
def int_model():
    def log_density(q, ints):
        return -0.5 * jnp.sum(q ** 2) * ints[0]
    return JaxModel(log_density, [("q", 2)], int_params=["n"])


@pytest.mark.parametrize("radius", [0.0, 2.0, 100.0])
def test_explicit_values_win(two_block_model, radius):
    explicit = {"a": np.arange(50.0), "b": 7.5}
    ctx = randomized_context(two_block_model, create_rng(3), radius, explicit)

    assert np.array_equal(ctx.resolve("a"), np.arange(50.0))
    assert float(ctx.resolve("b")) == 7.5


@pytest.mark.parametrize("radius", [0.5, 2.0])
def test_random_values_within_radius(two_block_model, radius):
    ctx = RandomContext(two_block_model, create_rng(11), radius)
    a = ctx.resolve("a")

    assert a.shape == (50,)
    assert np.all(np.abs(a) <= radius)
    assert abs(float(ctx.resolve("b"))) <= radius


def test_zero_radius_gives_zeros(two_block_model):
    ctx = RandomContext(two_block_model, create_rng(11), 0.0)
    assert np.all(ctx.resolve("a") == 0.0)
    assert float(ctx.resolve("b")) == 0.0


def test_negative_radius_rejected(two_block_model):
    with pytest.raises(ValueError):
        RandomContext(two_block_model, create_rng(0), -1.0)


def test_draws_follow_canonical_order(two_block_model):
    expected = create_rng(5, chain=2).uniform(-2.0, 2.0, size=51)
    ctx = RandomContext(two_block_model, create_rng(5, chain=2), 2.0)

    assert np.array_equal(ctx.resolve("a"), expected[:50])
    assert float(ctx.resolve("b")) == expected[50]


def test_random_fill_independent_of_explicit(two_block_model):
    partial = randomized_context(two_block_model, create_rng(8), 2.0, {"a": np.zeros(50)})
    fully_random = randomized_context(two_block_model, create_rng(8), 2.0)

    assert float(partial.resolve("b")) == float(fully_random.resolve("b"))


def test_chained_context_order():
    first = ExplicitContext({"x": [1.0]})
    second = ExplicitContext({"x": [2.0], "y": [3.0]})
    ctx = ChainedContext(first, second)

    assert ctx.resolve("x")[0] == 1.0
    assert ctx.resolve("y")[0] == 3.0
    assert not ctx.contains("z")
    with pytest.raises(KeyError):
        ctx.resolve("z")


def test_transform_inits(two_block_model):
    explicit = {"b": -1.0}
    ctx = randomized_context(two_block_model, create_rng(1), 2.0, explicit)
    q, disc = two_block_model.transform_inits(ctx)

    assert q.shape == (51,)
    assert q[-1] == -1.0
    assert disc == []


def test_transform_inits_missing_value(two_block_model):
    with pytest.raises(InitializationError, match="b"):
        two_block_model.transform_inits(ExplicitContext({"a": np.zeros(50)}))


def test_transform_inits_wrong_size(two_block_model):
    with pytest.raises(InitializationError):
        two_block_model.transform_inits(ExplicitContext({"a": np.zeros(3), "b": 0.0}))


def test_transform_inits_not_finite(two_block_model):
    with pytest.raises(InitializationError):
        two_block_model.transform_inits(ExplicitContext({"a": np.zeros(50), "b": np.inf}))


def test_int_params_need_explicit_values(int_model):
    ctx = randomized_context(int_model, create_rng(0), 2.0)
    with pytest.raises(InitializationError, match="n"):
        int_model.transform_inits(ctx)

    ctx = randomized_context(int_model, create_rng(0), 2.0, {"n": 3})
    q, disc = int_model.transform_inits(ctx)
    assert q.shape == (2,)
    assert disc == [3]

    with pytest.raises(InitializationError):
        int_model.transform_inits(ExplicitContext({"q": [0.0, 0.0], "n": 2.5}))


def test_param_names():
    model = JaxModel(lambda q: jnp.sum(q), [("mu", ()), ("beta", (2, 2))])
    assert model.num_params_r() == 5
    assert model.param_names() == ["mu", "beta.1.1", "beta.1.2", "beta.2.1", "beta.2.2"]
