import numpy as np
import pytest

from loudmeter.kweighting import KWeightingCache


@pytest.fixture
def fresh_cache():
    return KWeightingCache()


@pytest.fixture
def k_weighted_blocks():
    block_size = 2048
    t = np.arange(block_size) / 48_000.0
    base = np.sin(2 * np.pi * 997.0 * t)
    return {
        "block_size": block_size,
        "silent": np.zeros((2, block_size)),
        "constant": np.full((2, block_size), 0.1),
        "sine": np.vstack([0.5 * base, 0.5 * base]),
    }
