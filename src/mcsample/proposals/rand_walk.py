"""
Random Walk Proposal for Metropolis Sampling

Symmetric Gaussian random walk centred on the current state.

Proposal: x' = x + eps, eps ~ N(0, proposal_std^2)

Hastings ratio: 0 (symmetric proposal, q(x'|x) = q(x|x'))
"""

from .common import unpack_operand, draw_standard_normal


def rand_walk_proposal(operand):
    """
    Random walk proposal: x' ~ N(x_current, proposal_std^2).

    Args:
        operand: Tuple of (key, current, proposal_std, mean_shift)
            key: JAX random key
            current: Current state (scalar)
            proposal_std: Standard deviation of the step
            mean_shift: UNUSED - ignored

    Returns:
        proposal: Proposed state
        log_hastings_ratio: 0.0 (symmetric proposal)
        new_key: Updated random key
    """
    op = unpack_operand(operand)

    noise, new_key = draw_standard_normal(op.key, shape=op.current.shape)
    proposal = op.current + op.proposal_std * noise

    # Symmetric proposal: q(x'|x) = q(x|x'), so log ratio = 0
    log_hastings_ratio = 0.0

    return proposal, log_hastings_ratio, new_key
