"""
Pytest configuration and shared fixtures for mcsample tests.
"""

import pytest
import numpy as np
import jax
import jax.numpy as jnp

# Import the package first so jax_config sets x64 before JAX is used
import mcsample  # noqa: F401
from mcsample.registry import register_target, _REGISTRY
from mcsample.targets import TargetDensity, normal


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def key(rng_seed):
    """JAX PRNG key built from the default seed."""
    return jax.random.PRNGKey(rng_seed)


@pytest.fixture
def basic_sampler_config():
    """Small Metropolis runner configuration for tests."""
    return {
        'sampler': 'metropolis',
        'target': 'std_normal',
        'x0': 0.0,
        'n': 500,
        'proposal_std': 1.0,
        'rng_seed': 42,
    }


@pytest.fixture
def hmc_sampler_config():
    """Small HMC runner configuration for tests."""
    return {
        'sampler': 'hmc',
        'target': 'std_normal',
        'x0': 0.0,
        'n': 500,
        'epsilon': 0.2,
        'l': 10,
        'rng_seed': 42,
    }


def nan_log_prob(x):
    """A log density that is undefined everywhere."""
    return jnp.nan * x


nan_target = TargetDensity(name='nan_target', log_prob=nan_log_prob)


TEST_TARGETS = {
    'shifted_normal_3': normal(loc=3.0, scale=2.0),
    'nan_target': nan_target,
}


@pytest.fixture
def register_test_targets():
    """
    Fixture to register test targets and clean up after test.

    Usage:
        def test_something(register_test_targets):
            # Test targets are now registered
            ...
    """
    # Save any existing registrations
    original_registrations = {}
    for name, target in TEST_TARGETS.items():
        if name in _REGISTRY:
            original_registrations[name] = _REGISTRY.pop(name)
        register_target(name, target)

    yield  # Run the test

    # Restore original registry state
    for name in TEST_TARGETS.keys():
        if name in original_registrations:
            _REGISTRY[name] = original_registrations[name]
        elif name in _REGISTRY:
            del _REGISTRY[name]


def manual_rhat(chains, t):
    """Reference Gelman-Rubin R-hat in plain numpy."""
    samples = np.stack([np.asarray(c)[:t] for c in chains])
    m = samples.shape[0]
    means = samples.mean(axis=1)
    B = t / (m - 1) * np.sum((means - means.mean()) ** 2)
    W = np.mean(samples.var(axis=1, ddof=1))
    V_hat = (t - 1) / t * W + B / t
    return np.sqrt(V_hat / W)


def make_test_operand(current=0.0, proposal_std=1.0, mean_shift=0.0, key=None):
    """Create a standard operand tuple for testing proposals."""
    if key is None:
        key = jax.random.PRNGKey(42)
    return (key, jnp.asarray(current, dtype=jnp.float64), proposal_std, mean_shift)
