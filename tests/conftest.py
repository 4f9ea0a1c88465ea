"""
Pytest fixtures for Heatwave tests: an in-memory ChainProvider, record factory,
test addresses and a keys.json on disk.
"""

from __future__ import annotations

import json

import pytest

from heatwave.core.exceptions import UnsupportedTransfer
from heatwave.unfreeze.models import (
    AccountStatus,
    ContractState,
    StorageFeeInfo,
    TransactionBatch,
    TransactionId,
    TransactionRecord,
)
from heatwave.utils.address_utils import Address

ADDR_A = Address.parse("0:" + "a" * 64)
ADDR_B = Address.parse("0:" + "b" * 64)
GIVER_ADDR = Address.parse("0:" + "c" * 64)
EVER_WALLET_CODE_HASH = "3ba6528ab2694c118180aa3bd10dd19ff400b909ab4dcf58fc69925b2c7b12a6"
MICROWAVE_HASH = "d" * 64
# ed25519 seed 00..1f
TEST_SECRET = bytes(range(32)).hex()


class FakeProvider:
    """
    In-memory ChainProvider. histories maps address -> list of pages, each page
    a list of TransactionRecord newest first.
    """

    def __init__(self) -> None:
        self.states: dict[Address, ContractState] = {}
        self.histories: dict[Address, list[list[TransactionRecord]]] = {}
        self.fees: dict[Address, StorageFeeInfo] = {}
        self.state_inits: dict[str, str | None] = {}
        self.reject_sender = False
        self.history_requests: list[tuple[Address, int]] = []
        self.fee_requests: list[tuple[Address, bool, int]] = []
        self.sent: list[dict] = []
        self.traced: list[TransactionId] = []

    def add_account(self, address: Address, code_hash: str | None = None, balance: int = 0) -> None:
        self.states[address] = ContractState(address=address, balance=balance, code_hash=code_hash)

    async def get_full_contract_state(self, address: Address) -> ContractState | None:
        return self.states.get(address)

    async def get_transactions(self, address, continuation=None) -> TransactionBatch:
        pages = self.histories.get(address) or [[]]
        index = 0 if continuation is None else int(continuation.hash.split(":", 1)[1])
        self.history_requests.append((address, index))
        next_index = index + 1
        next_page = TransactionId(lt="0", hash=f"page:{next_index}") if next_index < len(pages) else None
        return TransactionBatch(transactions=list(pages[index]), continuation=next_page)

    async def compute_storage_fee(self, state, masterchain, timestamp) -> StorageFeeInfo:
        self.fee_requests.append((state.address, masterchain, timestamp))
        return self.fees.get(state.address, StorageFeeInfo(AccountStatus.FROZEN, None))

    async def get_boc_hash(self, boc: str) -> str:
        return MICROWAVE_HASH

    async def decode_state_init(self, account_boc: str) -> str | None:
        return self.state_inits.get(account_boc)

    async def check_sender(self, sender) -> None:
        if self.reject_sender:
            raise UnsupportedTransfer("rejected")

    async def send_call(self, sender, recipient, amount, bounce, abi, method, params) -> TransactionId:
        self.sent.append(
            {
                "sender": sender,
                "recipient": recipient,
                "amount": amount,
                "bounce": bounce,
                "method": method,
                "params": params,
            }
        )
        n = len(self.sent)
        return TransactionId(lt=str(n), hash=f"{n:064x}")

    async def wait_for_trace(self, transaction: TransactionId) -> None:
        self.traced.append(transaction)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def record():
    """Factory: record(lt, orig, end) with statuses given as strings."""

    def _record(lt: int, orig: str, end: str) -> TransactionRecord:
        return TransactionRecord(
            id=TransactionId(lt=str(lt), hash=f"{lt:064x}"),
            orig_status=AccountStatus(orig),
            end_status=AccountStatus(end),
        )

    return _record


@pytest.fixture
def keys_file(tmp_path):
    """keys.json with a matching ed25519 public/secret pair."""
    from solders.keypair import Keypair

    keypair = Keypair.from_seed(bytes.fromhex(TEST_SECRET))
    path = tmp_path / "keys.json"
    path.write_text(
        json.dumps({"public": bytes(keypair.pubkey()).hex(), "secret": TEST_SECRET}),
        encoding="utf-8",
    )
    return path
