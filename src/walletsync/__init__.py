"""
walletsync - Trade history accounting and wallet synchronisation

Public API for building a ledger from buy/sell events and reading per-instrument
positions and average acquisition prices.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("walletsync")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"


__all__ = [
    "__version__",
]
