"""
ABIs for the administrative surface of deployed contracts.
"""

from .admin import OWNABLE_ABI, STRATEGY_ABI

__all__ = ["OWNABLE_ABI", "STRATEGY_ABI"]
