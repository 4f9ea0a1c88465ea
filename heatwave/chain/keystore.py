"""
Giver credentials: load keys.json ({"public": hex, "secret": hex}) into an
ed25519 Keypair and sign external message hashes with it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from solders.keypair import Keypair

from heatwave.core.exceptions import InvalidKeys
from heatwave.heatwave_logging import get_logger

logger = get_logger(__name__)


class Signer:
    """ed25519 signer backed by a solders Keypair."""

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    @property
    def public_key(self) -> str:
        """Public key as 64 lowercase hex digits."""
        return bytes(self._keypair.pubkey()).hex()

    @property
    def public_key_bytes(self) -> bytes:
        return bytes(self._keypair.pubkey())

    def sign(self, data: bytes) -> bytes:
        """Return the 64-byte ed25519 signature of data."""
        return bytes(self._keypair.sign_message(data))


def _keypair_from_hex(public: str, secret: str) -> Keypair:
    try:
        seed = bytes.fromhex(secret.strip())
        expected = bytes.fromhex(public.strip())
    except ValueError as e:
        raise InvalidKeys("Invalid keys") from e
    if len(seed) != 32 or len(expected) != 32:
        raise InvalidKeys("Invalid keys")
    keypair = Keypair.from_seed(seed)
    if bytes(keypair.pubkey()) != expected:
        raise InvalidKeys("Secret key does not match public key")
    return keypair


def parse_keys(data: Any) -> Signer:
    """Build a Signer from decoded keys.json content."""
    if (
        not isinstance(data, dict)
        or not isinstance(data.get("public"), str)
        or not isinstance(data.get("secret"), str)
    ):
        raise InvalidKeys("Invalid keys")
    return Signer(_keypair_from_hex(data["public"], data["secret"]))


def load_keys(path: str | Path) -> Signer:
    """Load keys.json from path. Raises InvalidKeys on malformed content."""
    key_path = Path(path).expanduser()
    with open(key_path, encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidKeys("Invalid keys") from e
    signer = parse_keys(data)
    logger.info("keystore_loaded", path=str(key_path), public_key=signer.public_key)
    return signer
