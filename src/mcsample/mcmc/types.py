"""
MCMC Data Structures and Type Definitions.

This module contains the core data structures used by the samplers:
- Chain: 1-D JAX array of samples, INCLUDING the initial state
  (length n + 1 for n steps; chain[0] == x0)
- SamplerState: Current position and its cached log density
- StepInfo: Per-step accept / degeneracy / divergence flags
- ChainParams: Numeric sampler parameters passed as traced arguments
- ChainResult: Output of one compiled chain program
- ChainStats: Host-side per-chain summary reported by the runner

All NamedTuples are JAX pytrees, so they pass through jit, scan and vmap
without registration.
"""

from typing import NamedTuple

import jax.numpy as jnp

from ..sampler_specs import SamplerType


Chain = jnp.ndarray


class SamplerState(NamedTuple):
    """
    State carried between iterations of one chain.

    HMC momentum is NOT part of the state: it is redrawn every iteration.
    """
    position: jnp.ndarray  # Current sample
    log_prob: jnp.ndarray  # log_prob(position), cached to avoid re-evaluation


class StepInfo(NamedTuple):
    """Flags recorded for every step of a chain."""
    accepted: jnp.ndarray    # Candidate was accepted
    degenerate: jnp.ndarray  # Acceptance log-ratio was NaN
    divergent: jnp.ndarray   # HMC trajectory left the reals (always False otherwise)


class ChainParams(NamedTuple):
    """
    Numeric sampler parameters.

    Kept as traced arguments so changing them does not trigger recompilation.
    Fields not used by a sampler are ignored.
    """
    proposal_std: float = 1.0  # Metropolis / MH proposal standard deviation
    mean_shift: float = 0.0    # MH proposal mean offset
    epsilon: float = 0.1       # HMC leapfrog step size
    l: int = 10                # HMC leapfrog steps


class ChainResult(NamedTuple):
    """Output of a compiled chain program (before host-side checks)."""
    chain: jnp.ndarray       # (n + 1,) samples including x0
    accepted: jnp.ndarray    # (n,) per-step accept flags
    degenerate: jnp.ndarray  # (n,) per-step NaN flags
    divergent: jnp.ndarray   # (n,) per-step HMC divergence flags


class ChainStats(NamedTuple):
    """Host-side per-chain summary."""
    chain_index: int
    sampler: SamplerType
    num_steps: int
    acceptance_rate: float
    num_divergent: int
