"""
Microwave relay contract and the redeploy driver.

The relay exposes one function, deploy(dest, state_init): called with attached
value it deploys state_init to dest. Its address is derived from the embedded
code BOC, so no configuration is needed to find it.
"""

from __future__ import annotations

from typing import Any

from heatwave.chain.provider import ChainProvider
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.giver import FundingCapability
from heatwave.unfreeze.models import FrozenAccountState, RedeployInstruction, TransactionId
from heatwave.utils.address_utils import BASECHAIN_ID, Address

logger = get_logger(__name__)

# 0.1 EVER for the relay's own execution
RELAY_TX_FEE = 100_000_000
DEFAULT_TARGET_BALANCE = 1_000_000_000
DRY_RUN_HASH_PLACEHOLDER = "dry_run"

MICROWAVE_BOC = (
    "te6ccgEBCQEA3gACATQDAQEBwAIAQ9AAAAAACAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAACACKP8AIMEB9KQgWJL0oOBf"
    "Aoog7VPZBgQBCvSkIPShBQAAAQPQQAcB/gHQ0wABwADysNYB0wAwwADyvDAgxwGa7UDtUHADXwPbMAHAAI5QMAHTH4IQU8UV"
    "HyIBuZcwwADyfPI84IIQU8UVHxK68ryCEDuaygBw+wLIgBDPCwUB+kACznD6AnbPC2sB1DABzMmBAID7ACBwcFkBVQFVAtkg"
    "WQFVAeAixwIIAAzAACIiAeI="
)

MICROWAVE_ABI: dict[str, Any] = {
    "ABI version": 2,
    "version": "2.2",
    "functions": [
        {
            "name": "deploy",
            "inputs": [
                {"name": "dest", "type": "address"},
                {"name": "state_init", "type": "cell"},
            ],
            "outputs": [],
        },
    ],
    "events": [],
    "headers": [],
}


async def compute_microwave_address(provider: ChainProvider) -> Address:
    """Relay address: basechain + hash of the embedded state init."""
    boc_hash = await provider.get_boc_hash(MICROWAVE_BOC)
    return Address(workchain=BASECHAIN_ID, account=boc_hash)


def compute_redeploy_amount(storage_fee_debt: int, target_balance: int, fee: int = RELAY_TX_FEE) -> int:
    """Debt + target balance + relay fee. Always above target_balance since fee > 0."""
    return int(storage_fee_debt) + int(target_balance) + fee


class RedeployDriver:
    """
    Sends one funded deploy call per account and waits until the whole trace
    (relay forwarding included) has finished. No timeout: a hung trace blocks
    until the process is terminated.
    """

    def __init__(
        self,
        provider: ChainProvider,
        relay_address: Address,
        capability: FundingCapability,
        target_balance: int = DEFAULT_TARGET_BALANCE,
        *,
        dry_run: bool = False,
    ) -> None:
        self._provider = provider
        self._relay_address = relay_address
        self._capability = capability
        self._target_balance = target_balance
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def build_instruction(self, state: FrozenAccountState) -> RedeployInstruction:
        return RedeployInstruction(
            dest=state.address,
            state_init=state.state,
            amount=compute_redeploy_amount(state.storage_fee_debt, self._target_balance),
        )

    async def redeploy(self, state: FrozenAccountState) -> TransactionId:
        instruction = self.build_instruction(state)
        if self._dry_run:
            logger.info(
                "redeploy_dry_run",
                address=instruction.dest,
                amount=instruction.amount,
                state_len=len(instruction.state_init),
            )
            return TransactionId(lt="0", hash=DRY_RUN_HASH_PLACEHOLDER)

        logger.info("redeploy_sending", address=instruction.dest, amount=instruction.amount)
        tx = await self._provider.send_call(
            self._capability,
            self._relay_address,
            instruction.amount,
            False,
            MICROWAVE_ABI,
            "deploy",
            {"dest": instruction.dest, "state_init": instruction.state_init},
        )
        logger.info("redeploy_waiting", address=instruction.dest, tx_hash=tx.hash)
        await self._provider.wait_for_trace(tx)
        logger.info("redeploy_done", address=instruction.dest, tx_hash=tx.hash)
        return tx
