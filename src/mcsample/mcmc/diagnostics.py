"""
MCMC Diagnostics.

Convergence diagnostics for MCMC chains:
- partitioned_sum / chain_mean / chain_variance: Map-reduce reductions over
  fixed-size partitions
- rhat_components: Gelman-Rubin intermediate quantities at truncation t
- r_hat: Gelman-Rubin R-hat of the first t samples of each chain
- find_convergence: Scan increasing t until |R-hat - 1| < tolerance
- summarize_chains: Pooled mean and variance over all chains
- acceptance_rate / print_acceptance_summary: Acceptance statistics

The truncation length t is a traced argument of the compiled R-hat kernel
(samples past t are masked out), so scanning many values of t over the same
chains compiles once.
"""

from functools import partial
from typing import List, NamedTuple, Optional, Sequence, Tuple

import jax
import jax.numpy as jnp
import numpy as np

from ..error_handling import (
    ConfigurationError,
    DegenerateChainError,
    validate_rhat_inputs,
)

import logging
logger = logging.getLogger('mcsample')


# Number of samples summed per partition before the partial sums are combined
PARTITION_SIZE = 4096

# Reference convergence tolerance on |R-hat - 1|
RHAT_TOLERANCE = 1e-3


# =============================================================================
# REDUCTIONS
# =============================================================================

@partial(jax.jit, static_argnames=('partition_size',))
def partitioned_sum(values: jnp.ndarray, partition_size: int = PARTITION_SIZE) -> jnp.ndarray:
    """
    Sum a 1-D array as a map-reduce over fixed-size partitions.

    The array is zero-padded to a multiple of ``partition_size`` and reshaped
    to (num_partitions, partition_size). Each partition is summed
    independently (map), then the partial sums are added (reduce). The
    result matches jnp.sum up to floating point summation order.
    """
    n = values.shape[0]
    num_partitions = max(1, -(-n // partition_size))
    padded = jnp.zeros(num_partitions * partition_size, dtype=values.dtype).at[:n].set(values)
    partial_sums = jnp.sum(padded.reshape(num_partitions, partition_size), axis=1)
    return jnp.sum(partial_sums)


@jax.jit
def chain_mean(chain: jnp.ndarray) -> jnp.ndarray:
    """Mean of a 1-D chain."""
    return partitioned_sum(chain) / chain.shape[0]


@jax.jit
def chain_variance(chain: jnp.ndarray, mean: jnp.ndarray) -> jnp.ndarray:
    """Sample variance of a 1-D chain with Bessel's correction (divide by n - 1)."""
    return partitioned_sum((chain - mean) ** 2) / (chain.shape[0] - 1)


# =============================================================================
# R-HAT
# =============================================================================

class RhatComponents(NamedTuple):
    """Intermediate Gelman-Rubin quantities for m chains truncated to t."""
    chain_means: jnp.ndarray   # (m,) mean of each chain's first t samples
    overall_mean: jnp.ndarray  # mean of chain_means
    B: jnp.ndarray             # between-chain variance
    W: jnp.ndarray             # mean within-chain variance
    V_hat: jnp.ndarray         # pooled variance estimate
    constant: jnp.ndarray      # every chain constant over its first t samples


@jax.jit
def _gelman_rubin(samples: jnp.ndarray, t) -> RhatComponents:
    """Gelman-Rubin quantities for the first t columns of a (m, L) array."""
    m, length = samples.shape
    t_float = jnp.asarray(t, dtype=samples.dtype)
    mask = jnp.arange(length) < t

    def truncated_mean(chain):
        return partitioned_sum(jnp.where(mask, chain, 0.0)) / t_float

    def truncated_variance(chain, mean):
        return partitioned_sum(jnp.where(mask, (chain - mean) ** 2, 0.0)) / (t_float - 1)

    # 1. Per-chain means
    chain_means = jax.vmap(truncated_mean)(samples)

    # 2. Overall mean
    overall_mean = jnp.mean(chain_means)

    # 3. Between-chain variance B = t/(m-1) * sum (mean_i - overall)^2
    B = (t_float / (m - 1)) * jnp.sum((chain_means - overall_mean) ** 2)

    # 4. Within-chain variance W = average Bessel-corrected variance
    W = jnp.mean(jax.vmap(truncated_variance)(samples, chain_means))

    # 5. Pooled variance
    V_hat = ((t_float - 1) / t_float) * W + B / t_float

    # Constant chains can leave W at rounding noise instead of exactly 0
    constant = jnp.all(jnp.where(mask, samples == samples[:, :1], True))

    return RhatComponents(chain_means, overall_mean, B, W, V_hat, constant)


def _stack_chains(chains: Sequence) -> jnp.ndarray:
    """Stack chains into (m, L), L being the shortest chain length."""
    min_len = min(int(np.shape(chain)[0]) for chain in chains)
    return jnp.stack([jnp.asarray(chain)[:min_len] for chain in chains])


def _rhat_from_components(comps: RhatComponents, t: int) -> float:
    W = float(comps.W)
    if bool(comps.constant) or not np.isfinite(W) or W <= 0.0:
        raise DegenerateChainError(
            f"Within-chain variance W = {W} at t = {t}; R-hat is undefined "
            f"(chains are constant or contain non-finite values)"
        )
    return float(np.sqrt(float(comps.V_hat) / W))


def rhat_components(chains: Sequence, t: int) -> RhatComponents:
    """
    Gelman-Rubin intermediate quantities for the first t samples of each chain.

    Raises:
        ConfigurationError: m < 2 or t outside 1 < t <= min chain length
    """
    validate_rhat_inputs([int(np.shape(chain)[0]) for chain in chains], t)
    return _gelman_rubin(_stack_chains(chains), t)


def r_hat(chains: Sequence, t: int) -> float:
    """
    Gelman-Rubin R-hat of the first t samples of each chain.

        B     = t/(m-1) * sum_i (mean_i - mean)^2
        W     = (1/m) * sum_i var_i          (var_i with divisor t - 1)
        V_hat = ((t-1)/t) * W + B/t
        R-hat = sqrt(V_hat / W)

    Args:
        chains: Sequence of m >= 2 one-dimensional chains
        t: Truncation length, 1 < t <= shortest chain length

    Returns:
        R-hat as a Python float

    Raises:
        ConfigurationError: Invalid m or t
        DegenerateChainError: W == 0 (every chain constant over its first t
            samples), which leaves R-hat undefined
    """
    return _rhat_from_components(rhat_components(chains, t), t)


class ConvergenceResult(NamedTuple):
    """Outcome of find_convergence."""
    t: Optional[int]                # First t meeting the tolerance (None if never)
    r_hat: Optional[float]          # R-hat at that t (None if never)
    converged: bool
    trace: List[Tuple[int, float]]  # Every (t, R-hat) evaluated, in order


def find_convergence(
    chains: Sequence,
    tolerance: float = RHAT_TOLERANCE,
    start: int = 1000,
    step: int = 1000,
) -> ConvergenceResult:
    """
    Evaluate R-hat at t = start, start + step, ... and stop at the first t
    with |R-hat - 1| < tolerance.

    Chains of n + 1 samples are scanned for start <= t < n, i.e. t stops
    before the step count of the shortest chain.

    Raises:
        ConfigurationError: Invalid chains, tolerance, start or step
        DegenerateChainError: Chains constant over some scanned prefix
    """
    errors = []
    if len(chains) < 2:
        errors.append(f"R-hat needs at least 2 chains, got {len(chains)}")
    if not tolerance > 0:
        errors.append(f"tolerance must be > 0, got {tolerance}")
    if int(start) != start or start < 2:
        errors.append(f"start must be an integer >= 2, got {start}")
    if int(step) != step or step < 1:
        errors.append(f"step must be an integer >= 1, got {step}")
    if errors:
        raise ConfigurationError("Invalid convergence search:\n  " + "\n  ".join(errors))

    samples = _stack_chains(chains)
    min_len = samples.shape[1]
    num_steps = min_len - 1

    trace = []
    for t in range(int(start), num_steps, int(step)):
        value = _rhat_from_components(_gelman_rubin(samples, t), t)
        trace.append((t, value))
        logger.debug(f"R-hat at t = {t}: {value:.6f}")
        if abs(value - 1.0) < tolerance:
            return ConvergenceResult(t=t, r_hat=value, converged=True, trace=trace)

    return ConvergenceResult(t=None, r_hat=None, converged=False, trace=trace)


# =============================================================================
# SUMMARIES
# =============================================================================

def summarize_chains(chains: Sequence) -> Tuple[float, float]:
    """
    Pooled mean and Bessel-corrected variance of all samples of all chains.

    Returns:
        (mean, variance) as Python floats
    """
    if len(chains) == 0:
        raise ConfigurationError("summarize_chains needs at least one chain")
    all_samples = jnp.concatenate([jnp.ravel(jnp.asarray(chain)) for chain in chains])
    if all_samples.shape[0] < 2:
        raise ConfigurationError("summarize_chains needs at least two samples")
    mean = chain_mean(all_samples)
    var = chain_variance(all_samples, mean)
    return float(mean), float(var)


def acceptance_rate(chain) -> float:
    """
    Fraction of steps whose state changed.

    A continuous proposal repeats the exact previous value only on
    rejection, so this recovers the acceptance rate from the chain alone.
    """
    arr = np.asarray(chain)
    if arr.size < 2:
        return float('nan')
    return float(np.mean(arr[1:] != arr[:-1]))


def print_acceptance_summary(chain_stats: Sequence) -> None:
    """
    Log summary statistics for per-chain acceptance rates.

    Args:
        chain_stats: Sequence of ChainStats
    """
    if not chain_stats:
        return

    rates = np.array([s.acceptance_rate for s in chain_stats])
    if not np.any(np.isfinite(rates)):
        return

    logger.info(f"--- Acceptance Rates ({len(rates)} chains) ---")
    logger.info(f"  Mean: {np.nanmean(rates):.1%}  Median: {np.nanmedian(rates):.1%}  "
                f"Min: {np.nanmin(rates):.1%}  Max: {np.nanmax(rates):.1%}")

    low = [s.chain_index for s in chain_stats if s.acceptance_rate < 0.10]
    if low:
        logger.warning(f"  WARNING: {len(low)} chain(s) have acceptance rate < 10%: {low}")

    n_divergent = sum(s.num_divergent for s in chain_stats)
    if n_divergent:
        logger.warning(f"  WARNING: {n_divergent} divergent HMC trajectories (consider a smaller epsilon)")
