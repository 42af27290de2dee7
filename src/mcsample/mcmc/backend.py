"""
MCMC Backend - Chain Runner.

run_chains_parallel() fans out m independent chains of the same sampler and
fans their results back in:

- Executor.THREADS: one worker thread per chain. Every worker calls the same
  jitted chain program (compiled once, then shared) with its own key; JAX
  releases the GIL while compiled code runs, so chains execute concurrently.
- Executor.VMAP: one vectorized program over all chain keys.

Each chain owns a PRNG key split from the master seed; no random stream or
other mutable state is shared between chains. Results are always returned
in chain-index order, whatever order the workers finish in.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Dict, Any, List

import jax
import numpy as np

from ..error_handling import ChainExecutionError
from ..sampler_specs import Executor
from .config import configure_sampler
from .diagnostics import print_acceptance_summary
from .samplers import run_single_chain
from .scan import _chain_program, check_chain_result
from .types import ChainResult, ChainStats

import logging
logger = logging.getLogger('mcsample')

__all__ = [
    'run_chains_parallel',
    'run_chains',
]


def _run_threads(runtime_ctx, n):
    """One worker per chain; collect per-chain results and failures."""
    sampler = runtime_ctx['sampler']
    target = runtime_ctx['target']
    params = runtime_ctx['params']
    keys = runtime_ctx['chain_keys']
    x0 = runtime_ctx['x0']
    num_chains = len(x0)

    results: Dict[int, ChainResult] = {}
    failures: Dict[int, BaseException] = {}

    with ThreadPoolExecutor(max_workers=num_chains, thread_name_prefix='mcsample-chain') as pool:
        futures = {
            i: pool.submit(run_single_chain, sampler, target, keys[i], float(x0[i]), n, params, i)
            for i in range(num_chains)
        }
        for i, future in futures.items():
            try:
                results[i] = future.result()
            except Exception as exc:
                failures[i] = exc

    return results, failures


def _run_vmap(runtime_ctx, n):
    """Single vectorized program over all chains; degeneracy checked per chain."""
    program = partial(
        _chain_program,
        sampler=runtime_ctx['sampler'],
        target=runtime_ctx['target'],
        n=n,
    )
    batched = jax.jit(jax.vmap(program, in_axes=(0, 0, None)))
    stacked = batched(runtime_ctx['chain_keys'], runtime_ctx['x0'], runtime_ctx['params'])

    results: Dict[int, ChainResult] = {}
    failures: Dict[int, BaseException] = {}
    for i in range(len(runtime_ctx['x0'])):
        result = ChainResult(*(field[i] for field in stacked))
        try:
            results[i] = check_chain_result(result, chain_index=i)
        except Exception as exc:
            failures[i] = exc

    return results, failures


def _chain_stats(index, sampler, result) -> ChainStats:
    accepted = np.asarray(result.accepted)
    return ChainStats(
        chain_index=index,
        sampler=sampler,
        num_steps=int(accepted.size),
        acceptance_rate=float(accepted.mean()) if accepted.size else float('nan'),
        num_divergent=int(np.sum(np.asarray(result.divergent))),
    )


def run_chains(sampler_config: Dict[str, Any], m: int):
    """
    Run m independent chains and return chains together with per-chain stats.

    Args:
        sampler_config: Configuration dict (see mcmc.utils.CONFIG_DEFAULTS)
        m: Number of chains

    Returns:
        chains: List of m chains (index i -> chain i), each of length n + 1
        stats: List of m ChainStats

    Raises:
        ConfigurationError: Invalid configuration (before any chain starts)
        ChainExecutionError: One or more chains failed; the others are
            attached to the exception
    """
    runtime_ctx = configure_sampler(sampler_config, m)
    user_config = runtime_ctx['user_config']
    sampler = runtime_ctx['sampler']
    executor = runtime_ctx['executor']
    n = int(user_config['n'])

    logger.info(
        f"Running {m} {sampler} chain(s) of {n} steps "
        f"(target={getattr(runtime_ctx['target'], 'name', runtime_ctx['target'])}, "
        f"executor={executor.name.lower()}, seed={user_config['rng_seed']})"
    )
    start = time.perf_counter()

    if executor == Executor.VMAP:
        results, failures = _run_vmap(runtime_ctx, n)
    else:
        results, failures = _run_threads(runtime_ctx, n)

    logger.info(f"Chains finished in {time.perf_counter() - start:.3f}s")

    if failures:
        for i, exc in sorted(failures.items()):
            logger.error(f"  chain {i} failed: {type(exc).__name__}: {exc}")
        raise ChainExecutionError(
            failures,
            {i: result.chain for i, result in results.items()},
        )

    chains = [results[i].chain for i in range(m)]
    stats = [_chain_stats(i, sampler, results[i]) for i in range(m)]
    print_acceptance_summary(stats)
    return chains, stats


def run_chains_parallel(sampler_config: Dict[str, Any], m: int) -> List[Any]:
    """
    Run m independent sampler chains in parallel.

    Every chain uses the same sampler and configuration but its own PRNG key
    (split from ``sampler_config['rng_seed']``). ``x0`` may be a scalar
    shared by all chains or a sequence of m starting points.

    Args:
        sampler_config: Configuration dict (see mcmc.utils.CONFIG_DEFAULTS)
        m: Number of chains

    Returns:
        List of m chains; entry i is chain i regardless of completion order.
    """
    chains, _ = run_chains(sampler_config, m)
    return chains
