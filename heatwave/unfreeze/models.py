"""
Data models for the unfreeze pipeline.

Provider-facing records (transactions, contract state, storage fee) and the
per-account values that flow from reconstruction to redeploy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from heatwave.utils.address_utils import Address


class AccountStatus(str, Enum):
    UNINIT = "uninit"
    FROZEN = "frozen"
    ACTIVE = "active"
    NONEXIST = "nonexist"


@dataclass(frozen=True)
class TransactionId:
    lt: str
    hash: str


@dataclass(frozen=True)
class TransactionRecord:
    """One historical transaction. orig_status is before it, end_status after it."""

    id: TransactionId
    orig_status: AccountStatus
    end_status: AccountStatus


@dataclass(frozen=True)
class TransactionBatch:
    """One page of history, newest first; continuation is None on the last page."""

    transactions: list[TransactionRecord] = field(default_factory=list)
    continuation: TransactionId | None = None


@dataclass(frozen=True)
class ContractState:
    address: Address
    balance: int
    code_hash: str | None
    # Provider-native account state, passed back to the provider untouched
    storage: Any = None


@dataclass(frozen=True)
class StorageFeeInfo:
    account_status: AccountStatus
    storage_fee_debt: int | None = None


@dataclass(frozen=True)
class FreezePoint:
    lt: str


@dataclass(frozen=True)
class FrozenAccountState:
    """Decoded pre-freeze state (base64 state init) plus debt as of this run."""

    address: Address
    state: str
    storage_fee_debt: int


@dataclass(frozen=True)
class RedeployInstruction:
    dest: Address
    state_init: str
    amount: int
