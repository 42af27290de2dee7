"""
Target Density Registration System

This module provides a registry for target densities that can be referred to
by name from sampler configuration dicts. The built-in targets (see
targets.py) are registered when the package is imported.

Example usage:
    import jax.numpy as jnp
    from mcsample import register_target, TargetDensity, run_chains_parallel

    register_target('laplace', TargetDensity(
        name='laplace',
        log_prob=lambda x: -jnp.abs(x),
    ))

    chains = run_chains_parallel({'sampler': 'metropolis', 'target': 'laplace'}, m=4)
"""

_REGISTRY = {}


def register_target(name, target):
    """
    Register a target density under ``name``.

    Args:
        name: Unique target identifier string (e.g., 'std_normal')
        target: Object providing ``log_prob(x)`` and, for HMC,
            ``grad_log_prob(x)`` (normally a TargetDensity)

    Raises:
        ValueError: If the name is already registered or the target has no
            callable ``log_prob``.
    """
    if name in _REGISTRY:
        raise ValueError(f"Target '{name}' is already registered")

    if not callable(getattr(target, 'log_prob', None)):
        raise ValueError(f"Target '{name}' must provide a callable 'log_prob'")

    _REGISTRY[name] = target


def get_target(name):
    """
    Get a registered target density by name.

    Raises:
        KeyError: If the target is not registered
    """
    if name not in _REGISTRY:
        available = list(_REGISTRY.keys())
        raise KeyError(f"Unknown target '{name}'. Available: {available}")
    return _REGISTRY[name]


def list_targets():
    """
    List all registered target names.
    """
    return list(_REGISTRY.keys())


def clear_registry():
    """
    Clear all registered targets. Primarily for testing.
    """
    _REGISTRY.clear()
