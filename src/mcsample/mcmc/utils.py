"""
Configuration defaults for the chain runner.
"""

# Defaults for every key the runner understands (all lowercase)
CONFIG_DEFAULTS = {
    'sampler': 'metropolis',
    'target': 'std_normal',
    'x0': 0.0,
    'n': 1000,
    'proposal_std': 1.0,
    'mean_shift': 0.0,
    'epsilon': 0.1,
    'l': 10,
    'rng_seed': 42,
    'executor': 'threads',
}


def clean_config(sampler_config):
    """
    Returns a copy of the sampler config with defaults filled in.
    All config keys use lowercase with underscores.

    The caller's dict is not modified. Unknown keys are kept as-is.
    """
    sampler_config = dict(sampler_config or {})

    for key, default in CONFIG_DEFAULTS.items():
        sampler_config.setdefault(key, default)

    return sampler_config
