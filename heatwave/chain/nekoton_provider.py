"""
ChainProvider backed by the nekoton JRPC transport.

nekoton is imported lazily (install with the `chain` extra) so the pipeline and
its tests do not need the native bindings. Transfers are authorized by building
an external message to the giver and signing it with the keystore Signer:
ever_wallet through its ABI, wallet_v3 and highload_wallet_v2 through the raw
bodies in heatwave.chain.wallets.

giver contracts cannot send: their sendTransaction has no payload field, so the
relay deploy call cannot be attached.
"""

from __future__ import annotations

import json
import time
from functools import partial
from typing import Any

from heatwave.chain.keystore import Signer
from heatwave.chain.wallets import (
    WALLET_SEND_MODE,
    highload_query_id,
    highload_wallet_v2_body,
    internal_message,
    read_highload_wallet_v2_data,
    read_wallet_v3_data,
    wallet_v3_body,
)
from heatwave.core.exceptions import AccountUninitialized, HeatwaveError, UnsupportedTransfer
from heatwave.heatwave_logging import get_logger
from heatwave.unfreeze.giver import FundingCapability, FundingProtocol
from heatwave.unfreeze.models import (
    AccountStatus,
    ContractState,
    StorageFeeInfo,
    TransactionBatch,
    TransactionId,
    TransactionRecord,
)
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
DEFAULT_MESSAGE_TIMEOUT_SEC = 60

EVER_WALLET_ABI: dict[str, Any] = {
    "ABI version": 2,
    "version": "2.3",
    "header": ["pubkey", "time", "expire"],
    "functions": [
        {
            "name": "sendTransaction",
            "inputs": [
                {"name": "dest", "type": "address"},
                {"name": "value", "type": "uint128"},
                {"name": "bounce", "type": "bool"},
                {"name": "flags", "type": "uint8"},
                {"name": "payload", "type": "cell"},
            ],
            "outputs": [],
        },
    ],
    "events": [],
}

_SUPPORTED_SENDERS = (
    FundingProtocol.EVER_WALLET,
    FundingProtocol.WALLET_V3,
    FundingProtocol.HIGHLOAD_WALLET_V2,
)

_STATUS_NAMES = {
    "uninit": AccountStatus.UNINIT,
    "frozen": AccountStatus.FROZEN,
    "active": AccountStatus.ACTIVE,
    "notexists": AccountStatus.NONEXIST,
    "nonexist": AccountStatus.NONEXIST,
}


def _account_status(value: Any) -> AccountStatus:
    """Map a nekoton AccountStatus (e.g. AccountStatus.Frozen) to ours."""
    name = str(value).rsplit(".", 1)[-1].strip().lower()
    status = _STATUS_NAMES.get(name)
    if status is None:
        raise HeatwaveError(f"Unknown account status: {value}")
    return status


class NekotonProvider:
    def __init__(
        self,
        endpoint: str,
        signer: Signer,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        message_timeout: int = DEFAULT_MESSAGE_TIMEOUT_SEC,
    ) -> None:
        self._endpoint = endpoint
        self._signer = signer
        self._page_size = page_size
        self._message_timeout = message_timeout
        self._transport: Any = None
        self._clock: Any = None
        self._config: Any = None

    async def _transport_ensure(self) -> Any:
        if self._transport is None:
            import nekoton as nt

            self._clock = nt.Clock()
            self._transport = nt.JrpcTransport(self._endpoint, clock=self._clock)
            await self._transport.check_connection()
            logger.info("jrpc_connected", endpoint=self._endpoint)
        return self._transport

    async def _config_ensure(self) -> Any:
        if self._config is None:
            transport = await self._transport_ensure()
            self._config = await transport.get_blockchain_config()
        return self._config

    async def aclose(self) -> None:
        self._transport = None
        self._config = None

    async def get_full_contract_state(self, address: Address) -> ContractState | None:
        import nekoton as nt

        transport = await self._transport_ensure()
        state = await transport.get_account_state(nt.Address(str(address)))
        if state is None:
            return None
        code_hash = None
        state_init = state.state_init
        if state_init is not None and state_init.code is not None:
            code_hash = state_init.code.repr_hash.hex()
        return ContractState(
            address=address,
            balance=int(state.balance),
            code_hash=code_hash,
            storage=state,
        )

    async def get_transactions(
        self,
        address: Address,
        continuation: TransactionId | None = None,
    ) -> TransactionBatch:
        import nekoton as nt

        transport = await self._transport_ensure()
        lt = int(continuation.lt) if continuation is not None else None
        transactions = await transport.get_transactions(
            nt.Address(str(address)),
            lt=lt,
            limit=self._page_size,
        )
        records = [
            TransactionRecord(
                id=TransactionId(lt=str(tx.lt), hash=tx.hash.hex()),
                orig_status=_account_status(tx.orig_status),
                end_status=_account_status(tx.end_status),
            )
            for tx in transactions
        ]
        next_page: TransactionId | None = None
        if transactions:
            last = transactions[-1]
            if last.prev_trans_lt:
                next_page = TransactionId(lt=str(last.prev_trans_lt), hash=last.prev_trans_hash.hex())
        return TransactionBatch(transactions=records, continuation=next_page)

    async def compute_storage_fee(
        self,
        state: ContractState,
        masterchain: bool,
        timestamp: int,
    ) -> StorageFeeInfo:
        config = await self._config_ensure()
        result = state.storage.compute_storage_fee(config, masterchain, timestamp)
        debt = result.storage_fee_debt
        return StorageFeeInfo(
            account_status=_account_status(result.account_status),
            storage_fee_debt=int(debt) if debt is not None else None,
        )

    async def get_boc_hash(self, boc: str) -> str:
        import nekoton as nt

        return nt.Cell.decode(boc).repr_hash.hex()

    async def decode_state_init(self, account_boc: str) -> str | None:
        import nekoton as nt

        account = nt.AccountState.decode(account_boc)
        state_init = account.state_init
        if state_init is None:
            return None
        return state_init.to_cell().encode()

    async def check_sender(self, sender: FundingCapability) -> None:
        if sender.protocol not in _SUPPORTED_SENDERS:
            raise UnsupportedTransfer(
                f"Sending from {sender.protocol.value} givers is not supported by this provider"
            )

    def _encode_inputs(self, function_abi: dict[str, Any], params: dict[str, Any]) -> dict[str, Any]:
        """Convert Address values and base64 cells into nekoton types by ABI input type."""
        import nekoton as nt

        types = {item["name"]: item["type"] for item in function_abi["inputs"]}
        out: dict[str, Any] = {}
        for name, value in params.items():
            kind = types.get(name)
            if kind == "address":
                out[name] = nt.Address(str(value))
            elif kind == "cell" and isinstance(value, str):
                out[name] = nt.Cell.decode(value)
            else:
                out[name] = value
        return out

    def _function(self, abi: dict[str, Any], method: str) -> tuple[Any, dict[str, Any]]:
        import nekoton as nt

        function_abi = next((f for f in abi["functions"] if f["name"] == method), None)
        if function_abi is None:
            raise HeatwaveError(f"ABI has no function {method}")
        function = nt.ContractAbi(json.dumps(abi)).get_function(method)
        return function, function_abi

    async def _wallet_data(self, address: Address) -> Any:
        """Data slice of a plain wallet, read fresh so seqno reflects the previous send."""
        import nekoton as nt

        transport = await self._transport_ensure()
        state = await transport.get_account_state(nt.Address(str(address)))
        if state is None or state.state_init is None or state.state_init.data is None:
            raise AccountUninitialized("Giver account is uninit")
        return state.state_init.data.as_slice()

    def _ever_wallet_message(
        self,
        sender: FundingCapability,
        recipient: Address,
        amount: int,
        bounce: bool,
        payload: Any,
    ) -> Any:
        import nekoton as nt

        transfer = {
            "dest": nt.Address(str(recipient)),
            "value": amount,
            "bounce": bounce,
            "flags": WALLET_SEND_MODE,
            "payload": payload,
        }
        send_function, _ = self._function(EVER_WALLET_ABI, "sendTransaction")
        unsigned = send_function.encode_external_message(
            nt.Address(str(sender.address)),
            transfer,
            public_key=nt.PublicKey.from_bytes(self._signer.public_key_bytes),
            timeout=self._message_timeout,
            clock=self._clock,
        )
        return unsigned.with_signature(self._signer.sign(unsigned.hash))

    async def _plain_wallet_message(
        self,
        sender: FundingCapability,
        recipient: Address,
        amount: int,
        bounce: bool,
        payload: Any,
    ) -> Any:
        import nekoton as nt

        message = internal_message(nt.CellBuilder, recipient, amount, bounce, payload)
        expire_at = int(time.time()) + self._message_timeout
        data = await self._wallet_data(sender.address)
        if sender.protocol == FundingProtocol.WALLET_V3:
            seqno, wallet_id = read_wallet_v3_data(data)
            build = partial(wallet_v3_body, nt.CellBuilder, wallet_id, expire_at, seqno, message)
        else:
            wallet_id = read_highload_wallet_v2_data(data)
            query_id = highload_query_id(expire_at, message.repr_hash)
            build = partial(highload_wallet_v2_body, nt.CellBuilder, wallet_id, query_id, message)
        signature = self._signer.sign(build().repr_hash)
        return nt.SignedExternalMessage(
            nt.Address(str(sender.address)),
            expire_at,
            body=build(signature=signature),
        )

    async def send_call(
        self,
        sender: FundingCapability,
        recipient: Address,
        amount: int,
        bounce: bool,
        abi: dict[str, Any],
        method: str,
        params: dict[str, Any],
    ) -> TransactionId:
        await self.check_sender(sender)
        transport = await self._transport_ensure()

        function, function_abi = self._function(abi, method)
        payload = function.encode_internal_input(self._encode_inputs(function_abi, params))

        if sender.protocol == FundingProtocol.EVER_WALLET:
            signed = self._ever_wallet_message(sender, recipient, amount, bounce, payload)
        else:
            signed = await self._plain_wallet_message(sender, recipient, amount, bounce, payload)
        tx = await transport.send_external_message(signed)
        if tx is None:
            raise HeatwaveError("Message expired")
        return TransactionId(lt=str(tx.lt), hash=tx.hash.hex())

    async def wait_for_trace(self, transaction: TransactionId) -> None:
        transport = await self._transport_ensure()
        async for _ in transport.trace_transaction(bytes.fromhex(transaction.hash)):
            pass
