"""
Single-Chain Samplers.

Public entry points for running one chain:
- metropolis: Symmetric random-walk Metropolis
- metropolis_hastings: Shifted normal proposal with Hastings correction
- hamiltonian_monte_carlo: HMC with leapfrog integration
- run_single_chain: Shared driver used by the three samplers and the chain runner

Chain convention: every sampler returns n + 1 samples, the first being the
initial state. A rejected step repeats the previous value.

Randomness: pass ``key`` (a JAX PRNG key) or ``rng_seed`` for reproducible
chains. With neither, a seed is drawn from OS entropy.
"""

from ..error_handling import validate_metropolis_args, validate_hmc_args
from ..sampler_specs import SamplerType
from ..targets import std_normal, resolve_target
from .config import resolve_key
from .scan import run_chain_program, check_chain_result
from .types import ChainParams


def run_single_chain(sampler, target, key, x0, n, params, chain_index=None):
    """
    Run one compiled chain and check it for numerical degeneracy.

    Arguments must already be validated.

    Returns:
        ChainResult

    Raises:
        NumericalDegeneracyError: If any step had a NaN acceptance ratio
    """
    result = run_chain_program(key, x0, params, sampler=sampler, target=target, n=n)
    return check_chain_result(result, chain_index=chain_index)


def metropolis(x0, n, proposal_std, *, target=std_normal, key=None, rng_seed=None):
    """
    Metropolis sampler with a symmetric N(0, proposal_std^2) random walk.

    Args:
        x0: Starting point
        n: Number of steps
        proposal_std: Standard deviation of the proposal (> 0)
        target: TargetDensity or registered target name
        key: JAX PRNG key (takes priority over rng_seed)
        rng_seed: Integer seed

    Returns:
        Chain of n + 1 samples (x0 first)

    Raises:
        ConfigurationError: Invalid arguments (before any sampling)
        NumericalDegeneracyError: NaN acceptance ratio during sampling
    """
    validate_metropolis_args(x0, n, proposal_std)
    target = resolve_target(target)
    params = ChainParams(proposal_std=float(proposal_std))
    result = run_single_chain(SamplerType.METROPOLIS, target, resolve_key(key, rng_seed), float(x0), int(n), params)
    return result.chain


def metropolis_hastings(x0, n, mean_shift, proposal_std, *, target=std_normal, key=None, rng_seed=None):
    """
    Metropolis-Hastings sampler with proposal x' ~ N(x + mean_shift, proposal_std^2).

    The acceptance ratio includes the Hastings correction q(x|x') / q(x'|x).
    With mean_shift = 0 and the same key this returns exactly the
    metropolis() chain.

    Args:
        x0: Starting point
        n: Number of steps
        mean_shift: Offset of the proposal mean from the current state
        proposal_std: Standard deviation of the proposal (> 0)
        target: TargetDensity or registered target name
        key: JAX PRNG key (takes priority over rng_seed)
        rng_seed: Integer seed

    Returns:
        Chain of n + 1 samples (x0 first)
    """
    validate_metropolis_args(x0, n, proposal_std, mean_shift=mean_shift)
    target = resolve_target(target)
    params = ChainParams(proposal_std=float(proposal_std), mean_shift=float(mean_shift))
    result = run_single_chain(
        SamplerType.METROPOLIS_HASTINGS, target, resolve_key(key, rng_seed), float(x0), int(n), params
    )
    return result.chain


def hamiltonian_monte_carlo(q0, n, epsilon, l, *, target=std_normal, key=None, rng_seed=None):
    """
    Hamiltonian Monte Carlo with unit mass and fresh N(0, 1) momentum per step.

    Args:
        q0: Starting position
        n: Number of samples to draw
        epsilon: Leapfrog step size (> 0)
        l: Number of leapfrog steps (>= 1)
        target: TargetDensity or registered target name. A gradient is
            derived with jax.grad if the target has none.
        key: JAX PRNG key (takes priority over rng_seed)
        rng_seed: Integer seed

    Returns:
        Chain of n + 1 samples (q0 first)
    """
    validate_hmc_args(q0, n, epsilon, l)
    target = resolve_target(target)
    params = ChainParams(epsilon=float(epsilon), l=int(l))
    result = run_single_chain(SamplerType.HMC, target, resolve_key(key, rng_seed), float(q0), int(n), params)
    return result.chain
