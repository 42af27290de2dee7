"""
Target Densities

One-dimensional (possibly unnormalized) target densities for the samplers.
A target is anything providing ``log_prob(x)`` and, for gradient-based
sampling, ``grad_log_prob(x)``. TargetDensity bundles the two; if no
gradient is supplied it is derived with ``jax.grad``.

Targets must be pure JAX functions: they are traced into the compiled chain
programs and called concurrently from every chain.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

import jax

from .registry import register_target, get_target, _REGISTRY


@dataclass(frozen=True)
class TargetDensity:
    """
    A log-density and its derivative.

    Frozen so it can be passed as a static argument to jitted chain programs.

    Fields:
        name: Human-readable identifier (used in logs and the registry)
        log_prob: fn(x) -> log density at x, up to an additive constant
        grad_log_prob: fn(x) -> d/dx log_prob(x). Derived with jax.grad
            when omitted.
    """
    name: str
    log_prob: Callable
    grad_log_prob: Optional[Callable] = field(default=None)

    def __post_init__(self):
        if not callable(self.log_prob):
            raise TypeError(f"Target '{self.name}': log_prob must be callable")
        if self.grad_log_prob is None:
            object.__setattr__(self, 'grad_log_prob', jax.grad(self.log_prob))
        elif not callable(self.grad_log_prob):
            raise TypeError(f"Target '{self.name}': grad_log_prob must be callable")


# ============================================================================
# STANDARD NORMAL
# ============================================================================

def std_normal_log_prob(x):
    """Log density of N(0, 1) up to a constant: -x^2 / 2."""
    return -0.5 * x * x


def std_normal_grad_log_prob(x):
    """Derivative of std_normal_log_prob: -x."""
    return -x


std_normal = TargetDensity(
    name='std_normal',
    log_prob=std_normal_log_prob,
    grad_log_prob=std_normal_grad_log_prob,
)


# ============================================================================
# GENERAL NORMAL
# ============================================================================

def normal(loc=0.0, scale=1.0):
    """
    Build a N(loc, scale^2) target.

    Args:
        loc: Mean of the target
        scale: Standard deviation of the target (> 0)

    Returns:
        TargetDensity with analytic log density and gradient
    """
    if not scale > 0:
        raise ValueError(f"scale must be > 0, got {scale}")
    loc = float(loc)
    inv_var = 1.0 / (float(scale) ** 2)

    def log_prob(x):
        d = x - loc
        return -0.5 * d * d * inv_var

    def grad_log_prob(x):
        return -(x - loc) * inv_var

    return TargetDensity(
        name=f'normal({loc:g}, {float(scale):g})',
        log_prob=log_prob,
        grad_log_prob=grad_log_prob,
    )


def resolve_target(target):
    """
    Turn a registry name or target object into a target object.

    Raises:
        KeyError: If ``target`` is a name that is not registered
        TypeError: If ``target`` is neither a name nor provides log_prob
    """
    if isinstance(target, str):
        return get_target(target)
    if not callable(getattr(target, 'log_prob', None)):
        raise TypeError(f"Target must be a registered name or provide log_prob, got {target!r}")
    return target


BUILTIN_TARGETS = {
    'std_normal': std_normal,
}


def register_builtin_targets():
    """Register the built-in targets (idempotent)."""
    for name, target in BUILTIN_TARGETS.items():
        if name not in _REGISTRY:
            register_target(name, target)


register_builtin_targets()
