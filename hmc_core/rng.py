"""
Description:
    Chain-aware random number streams.
    USE THE CORRECT ENVIRONMENT:  HMC-Research

Author: John Gallagher
Created: 2026-10-19
Last Modified: 2026-10-19
Version: 0.2

Every chain shares the base seed but starts DISCARD_STRIDE * (chain - 1)
draws further along the PCG64 stream, so parallel chains read disjoint
subsequences without any seed bookkeeping.

Example:
    >>> rng = create_rng(1234, chain=2)
    >>> u = rng.uniform(-2, 2)
"""
import numpy as np

# Must exceed the number of draws any single chain will ever make.
# Chains longer than 2**50 draws need a larger stride.
DISCARD_STRIDE = 1 << 50

def advance_stream(rng: np.random.Generator, chain: int) -> np.random.Generator:
    """
    Advance a generator in place to the start of a chain's stream.

    Args:
        rng: Generator backed by a bit generator with an advance() method (PCG64)
        chain: 1-indexed chain id

    Returns:
        The same generator, advanced by DISCARD_STRIDE * (chain - 1) draws
    """
    if chain < 1:
        raise ValueError(f"chain must be >= 1, got {chain}")
    rng.bit_generator.advance(DISCARD_STRIDE * (chain - 1))
    return rng

def create_rng(seed: int, chain: int = 1) -> np.random.Generator:
    """Build a PCG64 generator from seed and advance it to chain's stream"""
    return advance_stream(np.random.Generator(np.random.PCG64(seed)), chain)
