"""
Unfreeze orchestration.

Setup (address list, giver, relay address, cache dir, reference timestamp) runs
once and any failure there aborts the run. Accounts are then processed strictly
one at a time in input order; each account's stages run inside a failure
boundary so one bad account only skips itself.

Per account: contract state -> storage-fee debt -> cached state or
(freeze point -> archive state -> cache write) -> funded redeploy.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from pathlib import Path

from heatwave.chain.provider import ChainProvider
from heatwave.config.env import get_cache_dir, get_states_api_url
from heatwave.core.exceptions import AccountNotFound
from heatwave.heatwave_logging import bind_address, get_logger
from heatwave.unfreeze.address_list import read_accounts
from heatwave.unfreeze.freeze_locator import FreezePointLocator
from heatwave.unfreeze.giver import resolve_funding_account
from heatwave.unfreeze.microwave import (
    DEFAULT_TARGET_BALANCE,
    RedeployDriver,
    compute_microwave_address,
)
from heatwave.unfreeze.models import FrozenAccountState, TransactionId
from heatwave.unfreeze.state_cache import StateCache
from heatwave.unfreeze.states_api import StateReconstructor, StatesApiClient
from heatwave.unfreeze.storage_fee import StorageDebtEstimator, reference_timestamp
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)


@dataclass
class UnfreezeConfig:
    """Run parameters. Endpoint and cache location default from env."""

    path: Path
    giver: Address
    public_key: str
    target_balance: int = DEFAULT_TARGET_BALANCE
    ignore_cache: bool = False
    dry_run: bool = False
    cache_dir: Path = field(default_factory=get_cache_dir)
    states_api_url: str = field(default_factory=get_states_api_url)

    def __post_init__(self) -> None:
        if self.target_balance < 0:
            raise ValueError("target_balance must be non-negative")


@dataclass
class UnfreezeSummary:
    """Per-run outcome. Dry runs fill prepared instead of unfrozen."""

    total: int
    unfrozen: list[tuple[Address, TransactionId]] = field(default_factory=list)
    prepared: list[Address] = field(default_factory=list)
    skipped: list[tuple[Address, str]] = field(default_factory=list)


class UnfreezePipeline:
    def __init__(
        self,
        provider: ChainProvider,
        cache: StateCache,
        estimator: StorageDebtEstimator,
        locator: FreezePointLocator,
        reconstructor: StateReconstructor,
        driver: RedeployDriver,
    ) -> None:
        self._provider = provider
        self._cache = cache
        self._estimator = estimator
        self._locator = locator
        self._reconstructor = reconstructor
        self._driver = driver

    async def prepare(self, address: Address) -> FrozenAccountState:
        """Debt as of this run plus the pre-freeze state, from cache when possible."""
        log = bind_address(address)
        contract_state = await self._provider.get_full_contract_state(address)
        if contract_state is None:
            raise AccountNotFound("Account not found")

        debt = await self._estimator.estimate(address, contract_state)
        log.info("storage_fee_debt", storage_fee_debt=debt)

        cached = self._cache.try_get(address)
        if cached is not None:
            log.info("state_cache_hit")
            return FrozenAccountState(
                address=address,
                state=base64.b64encode(cached).decode("ascii"),
                storage_fee_debt=debt,
            )

        log.info("freeze_point_searching")
        freeze_point = await self._locator.locate(address)
        state = await self._reconstructor.reconstruct(address, freeze_point)
        self._cache.put(address, base64.b64decode(state))
        log.info("state_cache_updated", lt=freeze_point.lt)
        return FrozenAccountState(address=address, state=state, storage_fee_debt=debt)

    async def process(self, address: Address) -> TransactionId:
        state = await self.prepare(address)
        return await self._driver.redeploy(state)

    async def run(self, accounts: list[Address]) -> UnfreezeSummary:
        total = len(accounts)
        pad = len(str(total))
        summary = UnfreezeSummary(total=total)
        for index, address in enumerate(accounts, start=1):
            log = bind_address(address)
            log.info("account_processing", progress=f"[{index:>{pad}}/{total}]")
            try:
                tx = await self.process(address)
            except Exception as e:
                log.warning("account_skipped", error=str(e), error_type=type(e).__name__)
                summary.skipped.append((address, str(e)))
                continue
            if self._driver.dry_run:
                summary.prepared.append(address)
            else:
                summary.unfrozen.append((address, tx))
        logger.info(
            "unfreeze_summary",
            total=summary.total,
            unfrozen=len(summary.unfrozen),
            prepared=len(summary.prepared),
            skipped=len(summary.skipped),
        )
        return summary


async def run_unfreeze(
    config: UnfreezeConfig,
    provider: ChainProvider,
    *,
    states_api: StatesApiClient | None = None,
) -> UnfreezeSummary:
    """Run setup, then the per-account pipeline. Setup errors propagate."""
    capability = await resolve_funding_account(provider, config.giver, config.public_key)
    await provider.check_sender(capability)

    accounts = read_accounts(config.path)
    logger.info("unfreeze_input", accounts=len(accounts), path=str(config.path))

    relay_address = await compute_microwave_address(provider)
    logger.info("microwave_address", address=relay_address)

    cache = StateCache(config.cache_dir, ignore_cache=config.ignore_cache).open()
    timestamp = reference_timestamp()

    api = states_api or StatesApiClient(config.states_api_url)
    pipeline = UnfreezePipeline(
        provider,
        cache,
        StorageDebtEstimator(provider, timestamp),
        FreezePointLocator(provider),
        StateReconstructor(provider, api),
        RedeployDriver(
            provider,
            relay_address,
            capability,
            config.target_balance,
            dry_run=config.dry_run,
        ),
    )
    try:
        return await pipeline.run(accounts)
    finally:
        if states_api is None:
            await api.aclose()
