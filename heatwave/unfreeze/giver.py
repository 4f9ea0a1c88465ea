"""
Giver (funding account) resolution.

The giver's code hash selects one of four known funding protocols. The result
is a FundingCapability the provider uses to authorize transfers from the giver.
Unknown code fails closed before any account is processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from heatwave.chain.provider import ChainProvider
from heatwave.core.exceptions import (
    AccountNotFound,
    AccountUninitialized,
    UnknownAccountProtocol,
)
from heatwave.heatwave_logging import get_logger
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)


class FundingProtocol(str, Enum):
    WALLET_V3 = "wallet_v3"
    HIGHLOAD_WALLET_V2 = "highload_wallet_v2"
    EVER_WALLET = "ever_wallet"
    GIVER = "giver"


@dataclass(frozen=True)
class FundingCapability:
    """Giver address tagged with its protocol; public_key is set for GIVER only."""

    protocol: FundingProtocol
    address: Address
    public_key: str | None = None


def _wallet_v3(address: Address, public_key: str) -> FundingCapability:
    return FundingCapability(FundingProtocol.WALLET_V3, address)


def _highload_wallet_v2(address: Address, public_key: str) -> FundingCapability:
    return FundingCapability(FundingProtocol.HIGHLOAD_WALLET_V2, address)


def _ever_wallet(address: Address, public_key: str) -> FundingCapability:
    return FundingCapability(FundingProtocol.EVER_WALLET, address)


def _giver(address: Address, public_key: str) -> FundingCapability:
    return FundingCapability(FundingProtocol.GIVER, address, public_key=public_key)


GIVER_CODE_HASHES: dict[str, Callable[[Address, str], FundingCapability]] = {
    "84dafa449f98a6987789ba232358072bc0f76dc4524002a5d0918b9a75d2d599": _wallet_v3,
    "0b3a887aeacd2a7d40bb5550bc9253156a029065aefb6d6b583735d58da9d5be": _highload_wallet_v2,
    "3ba6528ab2694c118180aa3bd10dd19ff400b909ab4dcf58fc69925b2c7b12a6": _ever_wallet,
    "ccbfc821853aa641af3813ebd477e26818b51e4ca23e5f6d34509215aa7123d9": _giver,
}


def capability_for_code_hash(code_hash: str, address: Address, public_key: str) -> FundingCapability:
    """Map a code hash to its capability; anything unlisted raises UnknownAccountProtocol."""
    constructor = GIVER_CODE_HASHES.get(code_hash.lower())
    if constructor is None:
        raise UnknownAccountProtocol("Unknown contract")
    return constructor(address, public_key)


async def resolve_funding_account(
    provider: ChainProvider,
    address: Address,
    public_key: str,
) -> FundingCapability:
    """Fetch giver state and classify it. No retries: a wrong giver is a config error."""
    state = await provider.get_full_contract_state(address)
    if state is None:
        raise AccountNotFound("Giver account not found")
    if state.code_hash is None:
        raise AccountUninitialized("Giver account is uninit")
    capability = capability_for_code_hash(state.code_hash, address, public_key)
    logger.info(
        "giver_resolved",
        address=address,
        protocol=capability.protocol.value,
        balance=state.balance,
    )
    return capability
