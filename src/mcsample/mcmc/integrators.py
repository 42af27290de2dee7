"""
Leapfrog Integrator for Hamiltonian Dynamics.

Simulates H(q, p) = -log_prob(q) + p^2 / 2 with the symplectic leapfrog
scheme:

    p <- p + (eps/2) * grad(q)                 [opening half step]
    repeat L times:
        q <- q + eps * p                       [full position step]
        p <- p + eps * grad(q)                 [full momentum step, skipped on the last pass]
    p <- p + (eps/2) * grad(q)                 [closing half step]
    p <- -p                                    [momentum flip]

The L-th momentum step is merged into the closing half step. The final
negation makes the map an involution, so applying leapfrog twice returns
the starting point; the Metropolis test relies on this for detailed balance.
"""

import jax
import jax.numpy as jnp


def leapfrog(q, p, epsilon, l, grad_log_prob):
    """
    Run L leapfrog steps from (q, p) and flip the momentum.

    Args:
        q: Position
        p: Momentum
        epsilon: Step size (> 0)
        l: Number of leapfrog steps (>= 1). May be a traced integer.
        grad_log_prob: fn(q) -> d/dq log_prob(q)

    Returns:
        q_new: Proposed position
        p_new: Proposed (negated) momentum
    """
    q = jnp.asarray(q)
    p = jnp.asarray(p)

    # Half-step update of momentum
    p = p + 0.5 * epsilon * grad_log_prob(q)

    # First L-1 passes: full position step followed by full momentum step
    def full_step(_, state):
        q_i, p_i = state
        q_i = q_i + epsilon * p_i
        p_i = p_i + epsilon * grad_log_prob(q_i)
        return q_i, p_i

    q, p = jax.lax.fori_loop(0, l - 1, full_step, (q, p))

    # Last pass: position only
    q = q + epsilon * p

    # Closing half-step and momentum flip
    p = p + 0.5 * epsilon * grad_log_prob(q)
    return q, -p
