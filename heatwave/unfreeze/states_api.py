"""
State archive client and state reconstruction.

POST {base}/apply with {"account": "<address>", "lt": <lt>} returns the full
account BOC as it was right after the given logical time. The provider then
extracts the state init from it. Same address + lt always yields the same
state, which is what makes the result safe to cache forever.
"""

from __future__ import annotations

import httpx

from heatwave.chain.provider import ChainProvider
from heatwave.core.exceptions import EmptyState, StatesApiError
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.models import FreezePoint
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)

_REQUEST_TIMEOUT = 120.0


class StatesApiClient:
    """
    Async client for the state archive. No retries: a failed request only skips
    the current account.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = _REQUEST_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    def _client_ensure(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def apply(self, address: Address, lt: str) -> str:
        """Return the accountBoc at lt. Non-2xx raises StatesApiError with the body text."""
        client = self._client_ensure()
        resp = await client.post(
            f"{self._base_url}/apply",
            json={"account": str(address), "lt": int(lt)},
            headers={"Content-Type": "application/json"},
        )
        if not resp.is_success:
            raise StatesApiError(resp.text, status_code=resp.status_code)
        data = resp.json()
        account_boc = data.get("accountBoc") if isinstance(data, dict) else None
        if not account_boc:
            raise EmptyState("Empty state")
        return account_boc


class StateReconstructor:
    def __init__(self, provider: ChainProvider, states_api: StatesApiClient) -> None:
        self._provider = provider
        self._states_api = states_api

    async def reconstruct(self, address: Address, freeze_point: FreezePoint) -> str:
        """Return the pre-freeze state init as base64 BOC."""
        logger.info("state_applying", address=address, lt=freeze_point.lt)
        account_boc = await self._states_api.apply(address, freeze_point.lt)
        try:
            state_init = await self._provider.decode_state_init(account_boc)
        except Exception as e:
            raise EmptyState("Empty state") from e
        if not state_init:
            raise EmptyState("Empty state")
        return state_init
