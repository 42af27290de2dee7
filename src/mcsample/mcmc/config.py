"""
MCMC Configuration and Initialization.

This module handles setting up and validating chain runner configurations:
- configure_sampler: Main configuration entry point
- gen_chain_keys: One independent key per chain
- resolve_key: Key for a standalone sampler call

All config keys use lowercase with underscores (e.g., 'proposal_std', 'rng_seed').
"""

import jax
import jax.random as random
import numpy as np
from typing import Dict, Any

from ..error_handling import validate_sampler_config
from ..sampler_specs import SamplerType, Executor
from ..targets import resolve_target
from .types import ChainParams
from .utils import clean_config


def gen_chain_keys(rng_seed: int, num_chains: int):
    """
    Split one independent PRNG key per chain from ``rng_seed``.

    Returns:
        (num_chains, ...) array of keys; row i belongs to chain i only.
    """
    return random.split(jax.random.PRNGKey(rng_seed), num_chains)


def fresh_seed() -> int:
    """Draw a seed from OS entropy (for calls that give neither key nor seed)."""
    return int(np.random.SeedSequence().generate_state(1, dtype=np.uint32)[0])


def resolve_key(key=None, rng_seed=None):
    """
    Pick the PRNG key for a standalone sampler call.

    Priority: explicit ``key``, then ``rng_seed``, then a fresh OS-entropy seed.
    """
    if key is not None:
        return key
    if rng_seed is None:
        rng_seed = fresh_seed()
    return jax.random.PRNGKey(rng_seed)


def configure_sampler(sampler_config: Dict[str, Any], num_chains: int) -> Dict[str, Any]:
    """
    Validate a chain runner configuration and resolve it into runtime objects.

    Args:
        sampler_config: Input configuration dict (see utils.CONFIG_DEFAULTS)
        num_chains: Number of chains m

    Returns:
        runtime_ctx: Dict with
            'user_config': cleaned, serializable config
            'sampler': SamplerType
            'executor': Executor
            'target': resolved target object
            'params': ChainParams
            'x0': (num_chains,) numpy array of initial states
            'chain_keys': (num_chains, ...) PRNG keys

    Raises:
        ConfigurationError: If any value is invalid
        KeyError: If the target name is not registered
    """
    user_config = clean_config(sampler_config)
    validate_sampler_config(user_config, num_chains)

    sampler = SamplerType.parse(user_config['sampler'])
    executor = Executor.parse(user_config['executor'])
    target = resolve_target(user_config['target'])

    x0 = user_config['x0']
    if np.ndim(x0) == 0:
        x0 = np.full(num_chains, float(x0))
    else:
        x0 = np.asarray(x0, dtype=float)

    params = ChainParams(
        proposal_std=float(user_config['proposal_std']),
        mean_shift=float(user_config['mean_shift']),
        epsilon=float(user_config['epsilon']),
        l=int(user_config['l']),
    )

    return {
        'user_config': user_config,
        'sampler': sampler,
        'executor': executor,
        'target': target,
        'params': params,
        'x0': x0,
        'chain_keys': gen_chain_keys(user_config['rng_seed'], num_chains),
    }
