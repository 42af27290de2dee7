"""
MCMC Scan Body.

The sequential loop of one chain:
- sample_chain: Run a step function n times with jax.lax.scan
- run_chain_program: Jitted single-chain program for a sampler/target pair
- check_chain_result: Host-side check that turns degenerate steps into an error

Step k+1 depends on the accepted/rejected state of step k, so nothing inside
a chain is parallelized. Chains are parallelized one level up (mcmc.backend).
"""

import jax
import jax.numpy as jnp
import jax.random as random
import numpy as np

from ..error_handling import NumericalDegeneracyError
from .sampling import make_step_fn
from .types import SamplerState, ChainResult


def sample_chain(step_fn, log_prob_fn, key, x0, n):
    """
    Run ``n`` steps of ``step_fn`` starting from ``x0``.

    Each step gets its own key, split up front from ``key``.

    Args:
        step_fn: fn(key, SamplerState) -> (SamplerState, StepInfo)
        log_prob_fn: Target log density (evaluated once at x0)
        key: JAX random key owned by this chain
        x0: Initial state
        n: Number of steps (static)

    Returns:
        ChainResult with chain of length n + 1 (x0 first)
    """
    x0 = jnp.asarray(x0, dtype=jnp.result_type(float))
    init_state = SamplerState(position=x0, log_prob=log_prob_fn(x0))
    step_keys = random.split(key, n)

    def scan_body(state, step_key):
        next_state, info = step_fn(step_key, state)
        return next_state, (next_state.position, info)

    _, (positions, infos) = jax.lax.scan(scan_body, init_state, step_keys, length=n)

    chain = jnp.concatenate([x0[None], positions])
    return ChainResult(
        chain=chain,
        accepted=infos.accepted,
        degenerate=infos.degenerate,
        divergent=infos.divergent,
    )


def _chain_program(key, x0, params, sampler, target, n):
    step_fn = make_step_fn(sampler, target, params)
    return sample_chain(step_fn, target.log_prob, key, x0, n)


# Sampler type, target and chain length fix the program's structure; the
# numeric parameters stay traced so one compilation serves every setting.
run_chain_program = jax.jit(_chain_program, static_argnames=('sampler', 'target', 'n'))


def check_chain_result(result, chain_index=None):
    """
    Raise if any step produced a NaN acceptance ratio.

    Args:
        result: ChainResult (device or host arrays)
        chain_index: Optional index used in the error message

    Returns:
        result unchanged

    Raises:
        NumericalDegeneracyError: If a degenerate step is found
    """
    degenerate = np.asarray(result.degenerate)
    if degenerate.any():
        first = int(np.argmax(degenerate)) + 1
        where = f"chain {chain_index}, " if chain_index is not None else ""
        raise NumericalDegeneracyError(
            f"NaN acceptance ratio at {where}step {first} of {degenerate.size} "
            f"(target or proposal density is zero/undefined on both sides)"
        )
    return result
