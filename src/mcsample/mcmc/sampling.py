"""
MCMC Sampling Functions.

Single-step kernels for the three samplers:
- acceptance_probability: min(1, exp(log_ratio)), clamped to [0, 1]
- metropolis_accept: Uniform draw against the acceptance probability
- metropolis_step: Metropolis / Metropolis-Hastings step (proposal from PROPOSAL_REGISTRY)
- hmc_step: Hamiltonian Monte Carlo step (leapfrog proposal)
- make_step_fn: Bind a sampler type, target and parameters into step(key, state)

All acceptance ratios are formed in log space. The target density is never
exponentiated, so targets with large |log_prob| cannot overflow.
"""

import jax
import jax.numpy as jnp
import jax.random as random
from functools import partial

from ..sampler_specs import SamplerType
from ..proposals import rand_walk_proposal, shifted_normal_proposal
from ..proposals.common import draw_standard_normal
from .integrators import leapfrog
from .types import SamplerState, StepInfo


# Map from SamplerType value to proposal function (Metropolis-type samplers only)
PROPOSAL_REGISTRY = {
    int(SamplerType.METROPOLIS): rand_walk_proposal,
    int(SamplerType.METROPOLIS_HASTINGS): shifted_normal_proposal,
}


def acceptance_probability(log_ratio):
    """
    Metropolis acceptance probability min(1, exp(log_ratio)).

    Computed as exp(min(log_ratio, 0)), so the result is in [0, 1] for any
    input: -inf gives 0, +inf gives 1. NaN gives 0 (the step is rejected and
    flagged as degenerate by metropolis_accept).
    """
    log_ratio = jnp.asarray(log_ratio)
    alpha = jnp.exp(jnp.minimum(log_ratio, 0.0))
    return jnp.where(jnp.isnan(log_ratio), 0.0, alpha)


def metropolis_accept(key, log_ratio):
    """
    Accept/reject decision: draw u ~ U(0, 1) and accept iff u < alpha.

    Returns:
        accepted: Boolean decision
        degenerate: True if log_ratio was NaN
        new_key: Updated random key
    """
    new_key, accept_key = random.split(key)
    u = random.uniform(accept_key)
    alpha = acceptance_probability(log_ratio)
    accepted = u < alpha
    degenerate = jnp.isnan(log_ratio)
    return accepted, degenerate, new_key


def metropolis_step(key, state, log_prob_fn, proposal_fn, proposal_std, mean_shift):
    """
    Perform one Metropolis(-Hastings) step.

    log alpha = log_prob(x') - log_prob(x) + log q(x|x') - log q(x'|x)

    The Hastings term comes from the proposal function (0 for symmetric
    proposals).

    Args:
        key: JAX random key for this step
        state: SamplerState
        log_prob_fn: Target log density
        proposal_fn: Proposal from PROPOSAL_REGISTRY
        proposal_std: Proposal standard deviation
        mean_shift: Proposal mean offset (ignored by the random walk)

    Returns:
        next_state, StepInfo
    """
    operand = (key, state.position, proposal_std, mean_shift)
    proposal, log_hastings_ratio, key = proposal_fn(operand)

    proposal_lp = log_prob_fn(proposal)
    log_ratio = proposal_lp - state.log_prob + log_hastings_ratio

    accepted, degenerate, _ = metropolis_accept(key, log_ratio)

    next_state = SamplerState(
        position=jnp.where(accepted, proposal, state.position),
        log_prob=jnp.where(accepted, proposal_lp, state.log_prob),
    )
    info = StepInfo(accepted=accepted, degenerate=degenerate, divergent=jnp.asarray(False))
    return next_state, info


def hmc_step(key, state, log_prob_fn, grad_log_prob_fn, epsilon, l):
    """
    Perform one Hamiltonian Monte Carlo step.

    H(q, p) = -log_prob(q) + p^2 / 2, with fresh momentum p ~ N(0, 1).
    The leapfrog end point is accepted with probability min(1, exp(H - H')).

    A trajectory that leaves the reals (the integrator blew up) is a
    divergence: it is rejected rather than fed to the acceptance test.

    Args:
        key: JAX random key for this step
        state: SamplerState
        log_prob_fn: Target log density
        grad_log_prob_fn: Gradient of the target log density
        epsilon: Leapfrog step size
        l: Number of leapfrog steps

    Returns:
        next_state, StepInfo
    """
    momentum, key = draw_standard_normal(key, shape=state.position.shape)

    # Current Hamiltonian (potential + kinetic)
    current_h = -state.log_prob + 0.5 * momentum * momentum

    q_new, p_new = leapfrog(state.position, momentum, epsilon, l, grad_log_prob_fn)

    # Proposed Hamiltonian
    proposal_lp = log_prob_fn(q_new)
    proposed_h = -proposal_lp + 0.5 * p_new * p_new

    # A NaN starting energy is degeneracy of the chain, not of this trajectory
    divergent = (~jnp.isfinite(q_new) | jnp.isnan(proposed_h)) & ~jnp.isnan(current_h)
    log_ratio = jnp.where(divergent, -jnp.inf, current_h - proposed_h)

    accepted, degenerate, _ = metropolis_accept(key, log_ratio)

    next_state = SamplerState(
        position=jnp.where(accepted, q_new, state.position),
        log_prob=jnp.where(accepted, proposal_lp, state.log_prob),
    )
    info = StepInfo(accepted=accepted, degenerate=degenerate, divergent=divergent)
    return next_state, info


def make_step_fn(sampler, target, params):
    """
    Build step(key, state) -> (next_state, StepInfo) for one sampler.

    Args:
        sampler: SamplerType
        target: Object providing log_prob (and grad_log_prob for HMC)
        params: ChainParams (may hold traced values)
    """
    log_prob_fn = target.log_prob

    if sampler == SamplerType.HMC:
        grad_fn = getattr(target, 'grad_log_prob', None) or jax.grad(log_prob_fn)
        return partial(
            hmc_step,
            log_prob_fn=log_prob_fn,
            grad_log_prob_fn=grad_fn,
            epsilon=params.epsilon,
            l=params.l,
        )

    return partial(
        metropolis_step,
        log_prob_fn=log_prob_fn,
        proposal_fn=PROPOSAL_REGISTRY[int(sampler)],
        proposal_std=params.proposal_std,
        mean_shift=params.mean_shift,
    )
