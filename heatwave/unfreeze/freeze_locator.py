"""
Freeze point lookup: walk an account's history backwards (newest first) until
the transaction that moved it from a non-frozen status into frozen.
"""

from __future__ import annotations

from heatwave.chain.provider import ChainProvider
from heatwave.core.exceptions import AccountNotFrozen, FreezeTransactionNotFound
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.models import AccountStatus, FreezePoint, TransactionId
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)


class FreezePointLocator:
    """
    Every transaction newer than the freeze must end frozen; the first one found
    whose origin status is not frozen is the freeze transition. Both outcomes end
    the whole walk, not just the current page.
    """

    def __init__(self, provider: ChainProvider) -> None:
        self._provider = provider

    async def locate(self, address: Address) -> FreezePoint:
        continuation: TransactionId | None = None
        pages = 0
        while True:
            batch = await self._provider.get_transactions(address, continuation)
            pages += 1
            for transaction in batch.transactions:
                if transaction.end_status != AccountStatus.FROZEN:
                    raise AccountNotFrozen("Account not frozen")
                if transaction.orig_status != AccountStatus.FROZEN:
                    logger.debug(
                        "freeze_point_found",
                        address=address,
                        lt=transaction.id.lt,
                        pages=pages,
                    )
                    return FreezePoint(lt=transaction.id.lt)
            continuation = batch.continuation
            if continuation is None:
                break
        raise FreezeTransactionNotFound("Freeze transaction not found")
