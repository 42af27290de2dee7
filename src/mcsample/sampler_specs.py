"""
Sampler Enums

Named constants for the sampling algorithms and the chain runner's fan-out
strategy. Both accept their lowercase string names so configuration dicts
can stay plain and serializable.
"""

from enum import IntEnum


class _ParsableEnum(IntEnum):

    @classmethod
    def parse(cls, value):
        """Accept an enum member, its integer value, or its (case-insensitive) name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace('-', '_')
            key = cls._ALIASES().get(key, key)
            if key in cls.__members__:
                return cls[key]
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                pass
        choices = ", ".join(m.name.lower() for m in cls)
        raise ValueError(f"Unknown {cls.__name__} {value!r}. Choose one of: {choices}")

    @classmethod
    def _ALIASES(cls):
        return {}

    def __str__(self):
        return self.name.replace('_', ' ').title()


class SamplerType(_ParsableEnum):
    """
    Enumeration of available sampler types.
    """
    METROPOLIS = 0           # Symmetric random walk proposal
    METROPOLIS_HASTINGS = 1  # Shifted normal proposal with Hastings correction
    HMC = 2                  # Hamiltonian Monte Carlo with leapfrog integration

    @classmethod
    def _ALIASES(cls):
        return {
            'MH': 'METROPOLIS_HASTINGS',
            'HAMILTONIAN_MONTE_CARLO': 'HMC',
        }

    def __str__(self):
        if self is SamplerType.HMC:
            return 'HMC'
        return super().__str__()


class Executor(_ParsableEnum):
    """
    How the chain runner fans out independent chains.
    """
    THREADS = 0  # One worker thread per chain, each running the jitted chain program
    VMAP = 1     # A single vectorized program over all chain keys
