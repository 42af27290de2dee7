"""
Proposal Tests - Hastings Ratio Verification and Edge Cases

Tests individual proposal functions for correctness:
- Hastings ratio symmetry/correctness
- Equivalence of the shifted proposal with zero shift and the random walk
- Proposal moments

Run with: pytest tests/test_proposals.py -v
"""

import numpy as np
import jax
import jax.numpy as jnp
from scipy import stats as scipy_stats
import pytest

from mcsample.proposals import rand_walk_proposal, shifted_normal_proposal
from mcsample.proposals.common import unpack_operand, normal_log_density, draw_standard_normal

from .conftest import make_test_operand


# ============================================================================
# SYMMETRIC PROPOSAL TESTS
# ============================================================================

class TestRandWalkProposal:
    """Test the symmetric random walk proposal."""

    def test_hastings_ratio_is_zero(self):
        """Random walk is symmetric, so Hastings ratio should be 0."""
        operand = make_test_operand(current=1.5, proposal_std=0.7)
        _, log_ratio, _ = rand_walk_proposal(operand)

        assert log_ratio == 0.0, "Random walk should have zero Hastings ratio"

    def test_mean_shift_is_ignored(self):
        """The random walk draws the same candidate whatever mean_shift is."""
        p1, _, _ = rand_walk_proposal(make_test_operand(current=0.3, mean_shift=0.0))
        p2, _, _ = rand_walk_proposal(make_test_operand(current=0.3, mean_shift=5.0))

        assert float(p1) == float(p2)

    def test_key_is_advanced(self):
        """Returned key must differ from the input key."""
        key = jax.random.PRNGKey(7)
        _, _, new_key = rand_walk_proposal(make_test_operand(key=key))

        assert not np.array_equal(np.asarray(key), np.asarray(new_key))

    def test_proposal_centered_on_current(self):
        """Proposals should be centered on current with the requested spread."""
        current, sigma = 2.0, 0.5
        keys = jax.random.split(jax.random.PRNGKey(0), 5000)

        proposals = jax.vmap(
            lambda k: rand_walk_proposal((k, jnp.asarray(current), sigma, 0.0))[0]
        )(keys)

        assert abs(float(jnp.mean(proposals)) - current) < 0.03
        assert abs(float(jnp.std(proposals)) - sigma) < 0.03


# ============================================================================
# SHIFTED NORMAL PROPOSAL TESTS
# ============================================================================

class TestShiftedNormalProposal:
    """Test the shifted normal (asymmetric) proposal."""

    def test_zero_shift_matches_random_walk(self):
        """With mean_shift = 0 the candidate equals the random walk candidate for the same key."""
        operand = make_test_operand(current=-0.8, proposal_std=1.3, mean_shift=0.0)
        rw_prop, _, rw_key = rand_walk_proposal(operand)
        sn_prop, sn_ratio, sn_key = shifted_normal_proposal(operand)

        assert float(rw_prop) == float(sn_prop)
        assert float(sn_ratio) == 0.0
        assert np.array_equal(np.asarray(rw_key), np.asarray(sn_key))

    @pytest.mark.parametrize("current,shift,sigma", [
        (0.0, 0.5, 1.0),
        (1.7, -0.3, 0.4),
        (-2.5, 2.0, 3.0),
    ])
    def test_hastings_ratio_matches_scipy(self, current, shift, sigma):
        """log q(x|x') - log q(x'|x) should match scipy's normal log density."""
        operand = make_test_operand(current=current, proposal_std=sigma, mean_shift=shift)
        proposal, log_ratio, _ = shifted_normal_proposal(operand)
        x_new = float(proposal)

        expected = (
            scipy_stats.norm.logpdf(current, loc=x_new + shift, scale=sigma)
            - scipy_stats.norm.logpdf(x_new, loc=current + shift, scale=sigma)
        )
        np.testing.assert_allclose(float(log_ratio), expected, rtol=1e-10, atol=1e-12)

    def test_hastings_ratio_closed_form(self):
        """
        For x' = x + shift + sigma * z the log ratio reduces to
        -2 * shift * (shift + sigma * z) / sigma^2.
        """
        current, shift, sigma = 0.4, 0.9, 1.5
        operand = make_test_operand(current=current, proposal_std=sigma, mean_shift=shift)
        proposal, log_ratio, _ = shifted_normal_proposal(operand)

        step = float(proposal) - current
        expected = -2.0 * shift * step / sigma ** 2
        np.testing.assert_allclose(float(log_ratio), expected, rtol=1e-9)

    def test_proposal_mean_is_shifted(self):
        """Candidates should be centered on current + mean_shift."""
        current, shift, sigma = 1.0, -0.75, 0.5
        keys = jax.random.split(jax.random.PRNGKey(1), 5000)

        proposals = jax.vmap(
            lambda k: shifted_normal_proposal((k, jnp.asarray(current), sigma, shift))[0]
        )(keys)

        assert abs(float(jnp.mean(proposals)) - (current + shift)) < 0.03


# ============================================================================
# COMMON HELPERS
# ============================================================================

class TestProposalCommon:
    """Test shared proposal helpers."""

    def test_unpack_operand_fields(self):
        """unpack_operand should expose named fields in order."""
        key = jax.random.PRNGKey(3)
        op = unpack_operand((key, 1.0, 2.0, 3.0))

        assert op.current == 1.0
        assert op.proposal_std == 2.0
        assert op.mean_shift == 3.0

    def test_normal_log_density(self):
        """normal_log_density should match scipy."""
        value = normal_log_density(0.3, 1.0, 2.0)
        expected = scipy_stats.norm.logpdf(0.3, loc=1.0, scale=2.0)
        np.testing.assert_allclose(float(value), expected, rtol=1e-12)

    def test_draw_standard_normal_shape(self):
        """draw_standard_normal should honor the requested shape."""
        noise, _ = draw_standard_normal(jax.random.PRNGKey(0), shape=(4,))
        assert noise.shape == (4,)
