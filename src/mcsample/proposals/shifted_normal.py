"""
Shifted Normal Proposal for Metropolis-Hastings Sampling

Asymmetric Gaussian proposal whose mean is offset from the current state by
a fixed shift.

Proposal: x' ~ N(x + mean_shift, proposal_std^2)

The proposal is not symmetric for mean_shift != 0, so the acceptance ratio
needs the Hastings correction:

    log q(x | x') - log q(x' | x)

where q(a | b) is the N(b + mean_shift, proposal_std^2) density at a. Both
terms depend on the current and proposed states and are recomputed on every
call. With mean_shift = 0 the two terms cancel exactly and the proposal draws
the same candidate as rand_walk_proposal for the same key.
"""

from .common import unpack_operand, normal_log_density, draw_standard_normal


def shifted_normal_proposal(operand):
    """
    Shifted normal proposal with Hastings correction.

    Args:
        operand: Tuple of (key, current, proposal_std, mean_shift)
            key: JAX random key
            current: Current state (scalar)
            proposal_std: Standard deviation of the proposal
            mean_shift: Offset of the proposal mean from the current state

    Returns:
        proposal: Proposed state
        log_hastings_ratio: log q(x|x') - log q(x'|x)
        new_key: Updated random key
    """
    op = unpack_operand(operand)

    noise, new_key = draw_standard_normal(op.key, shape=op.current.shape)
    proposal = op.current + op.mean_shift + op.proposal_std * noise

    # Forward: x' given x
    log_q_forward = normal_log_density(proposal, op.current + op.mean_shift, op.proposal_std)
    # Reverse: x given x'
    log_q_backward = normal_log_density(op.current, proposal + op.mean_shift, op.proposal_std)

    log_hastings_ratio = log_q_backward - log_q_forward

    return proposal, log_hastings_ratio, new_key
