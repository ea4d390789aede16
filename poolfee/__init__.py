"""
Dynamic fee adjustment for liquidity pools.
"""

__version__ = "0.1.0"
