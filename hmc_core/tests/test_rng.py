"""
Tests for chain-aware random streams.
"""
import numpy as np
import pytest

from hmc_core.rng import DISCARD_STRIDE, advance_stream, create_rng


def test_stride_constant():
    assert DISCARD_STRIDE == 2 ** 50


def test_chain_one_is_not_advanced():
    expected = np.random.Generator(np.random.PCG64(7)).random(10)
    assert np.array_equal(create_rng(7, chain=1).random(10), expected)


def test_chain_stream_matches_manual_advance():
    base = np.random.Generator(np.random.PCG64(7))
    base.bit_generator.advance(2 * DISCARD_STRIDE)
    assert np.array_equal(create_rng(7, chain=3).random(10), base.random(10))


def test_chains_are_disjoint():
    K = 5000
    streams = [create_rng(1234, chain=c).random(K) for c in (1, 2, 3)]
    for i in range(3):
        for j in range(i + 1, 3):
            assert len(np.intersect1d(streams[i], streams[j])) == 0


def test_same_seed_and_chain_reproduce():
    a = create_rng(99, chain=4).uniform(-2, 2, size=100)
    b = create_rng(99, chain=4).uniform(-2, 2, size=100)
    assert np.array_equal(a, b)


def test_advance_stream_in_place():
    rng = np.random.Generator(np.random.PCG64(0))
    assert advance_stream(rng, 2) is rng


@pytest.mark.parametrize("chain", [0, -1])
def test_chain_below_one_rejected(chain):
    with pytest.raises(ValueError):
        create_rng(0, chain=chain)
