"""
folioscope - Portfolio Performance Analytics

Public API for analyzing a portfolio valuation series against three
market-index benchmarks.
"""

from importlib.metadata import version

try:
    __version__ = version("folioscope")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
