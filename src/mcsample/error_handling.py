"""
Error Handling and Validation Utilities for the MCMC samplers

This module provides the exception types raised by the samplers, the chain
runner and the R-hat diagnostic, along with validation functions and
diagnostic tools for finished chains.

Error taxonomy:
    ConfigurationError - invalid sampler/runner/diagnostic parameters.
        Raised before any sampling work starts.
    NumericalDegeneracyError - a NaN acceptance ratio during sampling.
    DegenerateChainError - zero within-chain variance in R-hat.
    ChainExecutionError - one or more chains failed inside the runner.
"""

import math
from numbers import Integral
from typing import Any, Dict, List, Sequence

import numpy as np

from .sampler_specs import SamplerType, Executor

import logging
logger = logging.getLogger('mcsample')


class ConfigurationError(ValueError):
    """Invalid sampler, runner or diagnostic configuration."""


class NumericalDegeneracyError(ArithmeticError):
    """A computation produced NaN where a well-defined value was required."""


class DegenerateChainError(NumericalDegeneracyError):
    """Within-chain variance is zero, so R-hat is undefined."""


class ChainExecutionError(RuntimeError):
    """
    Raised by the chain runner when at least one chain failed.

    Failures are local to their chain: the chains that finished are kept
    in ``chains`` so the caller can inspect them.

    Attributes:
        failures: Dict mapping chain index -> exception raised by that chain
        chains: Dict mapping chain index -> chain for the chains that completed
    """

    def __init__(self, failures: Dict[int, BaseException], chains: Dict[int, Any]):
        self.failures = failures
        self.chains = chains
        details = "\n  ".join(
            f"chain {idx}: {type(exc).__name__}: {exc}" for idx, exc in sorted(failures.items())
        )
        super().__init__(f"{len(failures)} chain(s) failed:\n  {details}")


def _finite_real_scalar(value):
    """Return value as a float if it is a finite real scalar (Python, numpy or 0-d array), else None."""
    arr = np.asarray(value)
    if arr.ndim != 0 or arr.dtype.kind not in "iuf":
        return None
    value = float(arr)
    return value if math.isfinite(value) else None


def _is_positive_real(value) -> bool:
    value = _finite_real_scalar(value)
    return value is not None and value > 0


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


def _raise_if_errors(errors: List[str], header: str) -> None:
    if errors:
        raise ConfigurationError(header + "\n  " + "\n  ".join(errors))


def check_num_steps(n, errors: List[str]) -> None:
    if not _is_int(n) or n < 0:
        errors.append(f"n must be an integer >= 0, got {n!r}")


def check_initial_state(x0, errors: List[str], name: str = 'x0') -> None:
    if _finite_real_scalar(x0) is None:
        errors.append(f"{name} must be a finite real number, got {x0!r}")


def validate_metropolis_args(x0, n, proposal_std, mean_shift=0.0) -> None:
    """
    Validates Metropolis / Metropolis-Hastings arguments.

    Raises:
        ConfigurationError: If any argument is invalid
    """
    errors = []
    check_initial_state(x0, errors)
    check_num_steps(n, errors)
    if not _is_positive_real(proposal_std):
        errors.append(f"proposal_std must be > 0, got {proposal_std!r}")
    if _finite_real_scalar(mean_shift) is None:
        errors.append(f"mean_shift must be a finite real number, got {mean_shift!r}")
    _raise_if_errors(errors, "Invalid Metropolis configuration:")


def validate_hmc_args(q0, n, epsilon, l) -> None:
    """
    Validates Hamiltonian Monte Carlo arguments.

    Raises:
        ConfigurationError: If any argument is invalid
    """
    errors = []
    check_initial_state(q0, errors, name='q0')
    check_num_steps(n, errors)
    if not _is_positive_real(epsilon):
        errors.append(f"epsilon must be > 0, got {epsilon!r}")
    if not _is_int(l) or l < 1:
        errors.append(f"l (leapfrog steps) must be an integer >= 1, got {l!r}")
    _raise_if_errors(errors, "Invalid HMC configuration:")


def validate_rhat_inputs(chain_lengths: Sequence[int], t) -> None:
    """
    Validates the chain collection and truncation length for R-hat.

    Raises:
        ConfigurationError: If fewer than 2 chains or t is out of range
    """
    errors = []
    m = len(chain_lengths)
    if m < 2:
        errors.append(f"R-hat needs at least 2 chains, got {m}")
    if not _is_int(t):
        errors.append(f"t must be an integer, got {t!r}")
    elif m > 0:
        min_len = min(chain_lengths)
        if t <= 1 or t > min_len:
            errors.append(f"t must satisfy 1 < t <= {min_len} (shortest chain), got {t}")
    _raise_if_errors(errors, "Invalid R-hat inputs:")


def validate_sampler_config(sampler_config: Dict[str, Any], num_chains) -> None:
    """
    Validates that a chain runner configuration is sensible.

    All problems are collected and reported together.

    Args:
        sampler_config: Cleaned configuration dictionary (see clean_config)
        num_chains: Number of chains requested

    Raises:
        ConfigurationError: If configuration is invalid
    """
    errors = []

    if not _is_int(num_chains) or num_chains < 2:
        errors.append(f"m (number of chains) must be an integer >= 2, got {num_chains!r}")

    try:
        sampler = SamplerType.parse(sampler_config['sampler'])
    except ValueError as exc:
        errors.append(str(exc))
        sampler = None

    try:
        Executor.parse(sampler_config['executor'])
    except ValueError as exc:
        errors.append(str(exc))

    check_num_steps(sampler_config['n'], errors)

    x0 = sampler_config['x0']
    x0_ndim = np.ndim(x0)
    if x0_ndim == 1:
        if _is_int(num_chains) and len(x0) != num_chains:
            errors.append(f"x0 has {len(x0)} entries but m = {num_chains}")
        for i, value in enumerate(x0):
            check_initial_state(value, errors, name=f"x0[{i}]")
    elif x0_ndim == 0:
        check_initial_state(x0, errors)
    else:
        errors.append(f"x0 must be a scalar or a sequence of m values, got shape {np.shape(x0)}")

    if sampler in (SamplerType.METROPOLIS, SamplerType.METROPOLIS_HASTINGS):
        if not _is_positive_real(sampler_config['proposal_std']):
            errors.append(f"proposal_std must be > 0, got {sampler_config['proposal_std']!r}")
    if sampler == SamplerType.METROPOLIS_HASTINGS:
        shift = sampler_config['mean_shift']
        if _finite_real_scalar(shift) is None:
            errors.append(f"mean_shift must be a finite real number, got {shift!r}")
    if sampler == SamplerType.HMC:
        if not _is_positive_real(sampler_config['epsilon']):
            errors.append(f"epsilon must be > 0, got {sampler_config['epsilon']!r}")
        if not _is_int(sampler_config['l']) or sampler_config['l'] < 1:
            errors.append(f"l (leapfrog steps) must be an integer >= 1, got {sampler_config['l']!r}")

    if not _is_int(sampler_config['rng_seed']):
        errors.append(f"rng_seed must be an integer, got {sampler_config['rng_seed']!r}")

    _raise_if_errors(errors, "Invalid sampler configuration:")


def diagnose_chains(chains: Sequence[Any]) -> Dict[str, List[str]]:
    """
    Analyzes finished chains to identify common issues.

    Args:
        chains: Sequence of 1-D chains

    Returns:
        diagnostics: Dictionary with issues, warnings, and info
    """
    diagnostics = {
        'issues': [],
        'warnings': [],
        'info': []
    }

    arrays = [np.asarray(chain) for chain in chains]

    bad = [i for i, arr in enumerate(arrays) if not np.all(np.isfinite(arr))]
    if bad:
        diagnostics['issues'].append(
            f"Chain(s) {bad} contain NaN or Inf values - sampler became unstable"
        )

    stuck = [i for i, arr in enumerate(arrays) if arr.size > 1 and np.var(arr) < 1e-10]
    if stuck:
        diagnostics['warnings'].append(
            f"{len(stuck)} chain(s) appear stuck (near-zero variance): {stuck}"
        )

    diagnostics['info'].append(f"Number of chains: {len(arrays)}")
    diagnostics['info'].append(f"Total samples: {sum(arr.size for arr in arrays)}")

    return diagnostics


def print_diagnostics(diagnostics: Dict[str, Any]) -> None:
    """Pretty-print diagnostics from diagnose_chains."""
    if diagnostics['issues']:
        logger.error("[ERROR] ISSUES:")
        for issue in diagnostics['issues']:
            logger.error(f"  - {issue}")

    if diagnostics['warnings']:
        logger.warning("[WARN] WARNINGS:")
        for warning in diagnostics['warnings']:
            logger.warning(f"  - {warning}")

    if diagnostics['info']:
        logger.info("[INFO] INFO:")
        for info in diagnostics['info']:
            logger.info(f"  - {info}")

    if not diagnostics['issues'] and not diagnostics['warnings']:
        logger.info("[OK] No issues detected")
