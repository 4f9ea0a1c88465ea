"""
Chain provider interface.

Everything the unfreeze pipeline needs from the network: contract state,
paginated transaction history, storage-fee computation, BOC hashing and
decoding, message submission and trace confirmation. All calls are awaited one
at a time by the pipeline.
"""

from __future__ import annotations

from typing import Any, Protocol

from heatwave.unfreeze.models import (
    ContractState,
    StorageFeeInfo,
    TransactionBatch,
    TransactionId,
)
from heatwave.utils.address_utils import Address


class ChainProvider(Protocol):
    async def get_full_contract_state(self, address: Address) -> ContractState | None:
        """Return the current account state, or None if the account does not exist."""
        ...

    async def get_transactions(
        self,
        address: Address,
        continuation: TransactionId | None = None,
    ) -> TransactionBatch:
        """Return one page of history (newest first) starting at continuation."""
        ...

    async def compute_storage_fee(
        self,
        state: ContractState,
        masterchain: bool,
        timestamp: int,
    ) -> StorageFeeInfo:
        """Apply storage phase at timestamp; report resulting status and unpaid debt."""
        ...

    async def get_boc_hash(self, boc: str) -> str:
        """Representation hash (hex) of the root cell of a base64 BOC."""
        ...

    async def decode_state_init(self, account_boc: str) -> str | None:
        """Extract the state init (base64 BOC) from a full account BOC."""
        ...

    async def check_sender(self, sender: Any) -> None:
        """Raise UnsupportedTransfer if transfers from sender cannot be authorized."""
        ...

    async def send_call(
        self,
        sender: Any,
        recipient: Address,
        amount: int,
        bounce: bool,
        abi: dict[str, Any],
        method: str,
        params: dict[str, Any],
    ) -> TransactionId:
        """Send an internal message with an ABI call payload from the funding account."""
        ...

    async def wait_for_trace(self, transaction: TransactionId) -> None:
        """Suspend until every transaction spawned by transaction is finished."""
        ...
