"""
Chain access: the provider protocol the pipeline depends on, its nekoton-backed
adapter, and the keystore that signs giver transfers.
"""

from heatwave.chain.provider import ChainProvider  # noqa: F401

__all__ = ["ChainProvider"]
