"""
Proposal Distributions for Metropolis-type Sampling

Each proposal function computes its own Hastings ratio - there's no separate
symmetric/asymmetric handling needed in the sampler.

All proposal functions accept a single operand tuple:
    (key, current, proposal_std, mean_shift)
and return:
    (proposal, log_hastings_ratio, new_key)

To add a new proposal:
1. Create new file in proposals/ directory with proposal function
2. Add it to PROPOSAL_REGISTRY in mcmc/sampling.py
3. Export from this __init__.py
"""

from .rand_walk import rand_walk_proposal
from .shifted_normal import shifted_normal_proposal

__all__ = [
    'rand_walk_proposal',
    'shifted_normal_proposal',
]
