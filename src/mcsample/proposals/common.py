"""
Common utilities for proposal distributions.

This module provides the shared operand layout and density helpers used by
the proposal implementations.

Functions:
    unpack_operand: Unpack the 4-element operand tuple into a named struct
    normal_log_density: Log density of N(loc, scale^2), used for Hastings terms
    draw_standard_normal: Split the key and draw one N(0, 1) variate
"""

from collections import namedtuple

import jax.random as random
import jax.scipy.stats as stats


# Named tuple for unpacked operand fields
Operand = namedtuple('Operand', [
    'key', 'current', 'proposal_std', 'mean_shift',
])


def unpack_operand(operand):
    """
    Unpack the 4-element operand tuple into a named struct.

    Every proposal receives the same (key, current, proposal_std, mean_shift)
    tuple, so both proposals can sit in one dispatch table.

    Args:
        operand: 4-element tuple passed to proposal functions.

    Returns:
        Operand namedtuple with named fields.
    """
    return Operand(*operand)


def normal_log_density(x, loc, scale):
    """Log density of N(loc, scale^2) evaluated at x."""
    return stats.norm.logpdf(x, loc=loc, scale=scale)


def draw_standard_normal(key, shape=()):
    """
    Split ``key`` and draw standard normal noise.

    Returns:
        noise: N(0, 1) draw(s) of the requested shape
        new_key: Key for the next random operation
    """
    new_key, noise_key = random.split(key)
    return random.normal(noise_key, shape=shape), new_key
