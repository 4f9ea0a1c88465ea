"""
Storage-fee debt as of a reference timestamp.

The reference timestamp is computed once per run and biased one hour into the
future so clock drift against the chain never leaves the estimate short.
"""

from __future__ import annotations

import time

from heatwave.chain.provider import ChainProvider
from heatwave.core.exceptions import AccountNotFrozen
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.models import AccountStatus, ContractState
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)

TIMESTAMP_BIAS = 3600
# Provider reports no debt figure when nothing is owed
DEFAULT_STORAGE_FEE_DEBT = 0
_ALLOWED_STATUSES = (AccountStatus.FROZEN, AccountStatus.NONEXIST)


def reference_timestamp(now: float | None = None, bias: int = TIMESTAMP_BIAS) -> int:
    """bias + current unix time in whole seconds."""
    current = time.time() if now is None else now
    return bias + int(current)


class StorageDebtEstimator:
    def __init__(self, provider: ChainProvider, timestamp: int) -> None:
        self._provider = provider
        self._timestamp = timestamp

    @property
    def timestamp(self) -> int:
        return self._timestamp

    async def estimate(self, address: Address, state: ContractState) -> int:
        """Debt in nano EVER. Raises AccountNotFrozen unless status is frozen or nonexist."""
        info = await self._provider.compute_storage_fee(
            state,
            address.is_masterchain,
            self._timestamp,
        )
        if info.account_status not in _ALLOWED_STATUSES:
            raise AccountNotFrozen("Account is not frozen")
        if info.storage_fee_debt is None:
            return DEFAULT_STORAGE_FEE_DEBT
        return int(info.storage_fee_debt)
