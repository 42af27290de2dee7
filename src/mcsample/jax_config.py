"""
JAX Configuration - MUST be imported before any JAX imports.

This module sets environment variables for JAX configuration including:
- 64-bit floating point (chains of 1e6+ samples lose accuracy in float32 sums)
- Persistent compilation cache directory
- Minimum compile time threshold for caching
"""
import os
from pathlib import Path

# --- PRECISION ---
os.environ.setdefault("JAX_ENABLE_X64", "true")
ENABLE_X64 = os.environ["JAX_ENABLE_X64"].strip().lower() in ("1", "true", "yes", "on")

# Suppress XLA C++ warnings; does not affect JAX compilation time messages
os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")

# --- PERSISTENT COMPILATION CACHE ---
# Enables cross-session caching of compiled chain kernels
_JAX_CACHE_DIR = Path.home() / ".cache" / "jax" / "mcsample_cache"
try:
    _JAX_CACHE_DIR.mkdir(parents=True, exist_ok=True)
except OSError:
    # Read-only home: run without the persistent cache
    pass
else:
    os.environ.setdefault("JAX_COMPILATION_CACHE_DIR", str(_JAX_CACHE_DIR))
    os.environ.setdefault("JAX_PERSISTENT_CACHE_MIN_COMPILE_TIME_SECS", "1.0")
