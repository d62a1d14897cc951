"""
vault-ops: operator tooling for vault and strategy contracts across networks.
"""

__version__ = "0.1.0"
