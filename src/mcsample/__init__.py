"""
mcsample - One-dimensional MCMC samplers with Gelman-Rubin diagnostics

Public API:
    Samplers (each returns a chain of n + 1 samples, x0 first):
        metropolis - Random-walk Metropolis
        metropolis_hastings - Shifted normal proposal with Hastings correction
        hamiltonian_monte_carlo - HMC with leapfrog integration
        leapfrog - The leapfrog integrator itself

    Multi-chain:
        run_chains_parallel - Run m independent chains (threads or vmap)
        run_chains - Same, also returning per-chain acceptance statistics

    Diagnostics:
        r_hat - Gelman-Rubin R-hat at truncation length t
        find_convergence - First t with |R-hat - 1| < tolerance
        summarize_chains - Pooled mean and variance
        diagnose_chains / print_diagnostics - NaN and stuck-chain checks

    Targets:
        TargetDensity - log_prob + grad_log_prob capability
        std_normal, normal - Built-in targets
        register_target, get_target, list_targets - Target registry

    Errors:
        ConfigurationError, NumericalDegeneracyError, DegenerateChainError,
        ChainExecutionError

Example:
    from mcsample import run_chains_parallel, find_convergence

    chains = run_chains_parallel({'sampler': 'metropolis', 'n': 100_000}, m=4)
    result = find_convergence(chains, tolerance=1e-3)
"""
# CRITICAL: Import jax_config FIRST to set environment variables before JAX loads
from . import jax_config

import jax

# The env var is ignored if JAX was imported before this package
jax.config.update("jax_enable_x64", jax_config.ENABLE_X64)

from .registry import register_target, get_target, list_targets
from .targets import TargetDensity, std_normal, normal
from .sampler_specs import SamplerType, Executor
from .error_handling import (
    ConfigurationError,
    NumericalDegeneracyError,
    DegenerateChainError,
    ChainExecutionError,
    diagnose_chains,
    print_diagnostics,
)

# Main MCMC entry points
from .mcmc import (
    metropolis,
    metropolis_hastings,
    hamiltonian_monte_carlo,
    leapfrog,
    run_chains_parallel,
    run_chains,
    r_hat,
    find_convergence,
    summarize_chains,
    acceptance_probability,
    ConvergenceResult,
    ChainStats,
)

__version__ = "0.1.0"
