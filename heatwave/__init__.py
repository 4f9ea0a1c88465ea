"""
Heatwave: unfreezes frozen Everscale accounts.

Reconstructs each account's pre-freeze state from the state archive, caches it
on disk, and redeploys it through the microwave relay contract, funded by a
giver account. Runs as a sequential batch over an address list.
"""

__version__ = "0.1.0"
