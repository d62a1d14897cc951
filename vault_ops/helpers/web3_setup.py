"""
Web3 setup helper - builds a Web3 instance for a network profile.

Public API
----------
get_web3_instance(profile)
    Return a Web3 instance connected to the profile's RPC endpoint, with the
    profile's request timeout and POA middleware injected where available.
"""
from __future__ import annotations

from typing import Optional

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from vault_ops.config.network import NetworkProfile

__all__ = ["get_web3_instance"]

# Cached web3 instance
_w3_instance: Optional[Web3] = None


def _inject_poa(w3: Web3) -> None:
    # BSC, HECO and Polygon produce POA-style extraData
    w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)


def get_web3_instance(profile: NetworkProfile) -> Web3:
    """
    Get a Web3 instance connected to the profile's endpoint.

    Args:
        profile: Network profile; must have a non-empty endpoint.

    Returns:
        Web3 instance

    Raises:
        ConfigurationError: If the profile has no endpoint.
    """
    global _w3_instance

    url = profile.require_endpoint().url

    # Return cached instance if URL matches
    if _w3_instance is not None and getattr(_w3_instance.provider, "endpoint_uri", None) == url:
        return _w3_instance

    request_kwargs = {"timeout": profile.timeout} if profile.timeout else {}
    w3 = Web3(Web3.HTTPProvider(url, request_kwargs=request_kwargs))
    if not profile.is_local:
        _inject_poa(w3)
    _w3_instance = w3
    return w3
