"""
MCMC Subpackage - Core MCMC sampling implementation.

This package contains the core MCMC sampling logic:
- samplers: Single-chain entry points (metropolis, metropolis_hastings, hamiltonian_monte_carlo)
- backend: Multi-chain runner (run_chains_parallel)
- config: Configuration, validation and PRNG key generation
- diagnostics: Convergence diagnostics (R-hat) and acceptance summaries
- integrators: Leapfrog integrator for HMC
- sampling: Per-step Metropolis and HMC kernels
- scan: Sequential chain loop (jax.lax.scan) and degeneracy checks
- types: Core data structures (SamplerState, ChainParams, ChainResult, ...)
- utils: Configuration defaults
"""

# Import types first (needed by other modules)
from .types import Chain, SamplerState, StepInfo, ChainParams, ChainResult, ChainStats

# Import main entry points
from .samplers import metropolis, metropolis_hastings, hamiltonian_monte_carlo
from .backend import run_chains_parallel, run_chains
from .integrators import leapfrog

# Import commonly used functions
from .config import configure_sampler, gen_chain_keys
from .sampling import acceptance_probability
from .diagnostics import (
    r_hat,
    rhat_components,
    find_convergence,
    summarize_chains,
    acceptance_rate,
    partitioned_sum,
    chain_mean,
    chain_variance,
    ConvergenceResult,
    RHAT_TOLERANCE,
)

__all__ = [
    # Main entry points
    'metropolis',
    'metropolis_hastings',
    'hamiltonian_monte_carlo',
    'run_chains_parallel',
    'run_chains',
    'leapfrog',
    # Types
    'Chain',
    'SamplerState',
    'StepInfo',
    'ChainParams',
    'ChainResult',
    'ChainStats',
    # Config
    'configure_sampler',
    'gen_chain_keys',
    'acceptance_probability',
    # Diagnostics
    'r_hat',
    'rhat_components',
    'find_convergence',
    'summarize_chains',
    'acceptance_rate',
    'partitioned_sum',
    'chain_mean',
    'chain_variance',
    'ConvergenceResult',
    'RHAT_TOLERANCE',
]
