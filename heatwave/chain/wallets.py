"""
Message bodies for plain (non-ABI) giver wallets: wallet_v3 and highload_wallet_v2.

Both wallets take a signed external message whose body carries one or more
outbound internal messages as cell references. The layouts below follow the
wallets' TL-B. They write through any builder exposing store_uint, store_int,
store_reference and build (nekoton's CellBuilder in production).

The signature covers the representation hash of the body built without it;
the signed body is the same fields prefixed by the 512-bit signature.
"""

from __future__ import annotations

from typing import Any, Callable

from heatwave.utils.address_utils import Address

# Pay fees separately from value, ignore action phase errors
WALLET_SEND_MODE = 3
SIGNATURE_LEN = 64
# HashmapE(16) key of the single outbound message
HIGHLOAD_MESSAGES_KEY_BITS = 16

BuilderFactory = Callable[[], Any]


def store_grams(builder: Any, amount: int) -> None:
    """VarUInteger 16: 4-bit byte length, then the value big-endian."""
    if amount < 0:
        raise ValueError("amount must be non-negative")
    length = (amount.bit_length() + 7) // 8
    builder.store_uint(length, 4)
    if length:
        builder.store_uint(amount, length * 8)


def store_std_address(builder: Any, address: Address) -> None:
    # addr_std$10, no anycast
    builder.store_uint(0b100, 3)
    builder.store_int(address.workchain, 8)
    builder.store_uint(int(address.account, 16), 256)


def _store_signature(builder: Any, signature: bytes) -> None:
    if len(signature) != SIGNATURE_LEN:
        raise ValueError("signature must be 64 bytes")
    builder.store_uint(int.from_bytes(signature[:32], "big"), 256)
    builder.store_uint(int.from_bytes(signature[32:], "big"), 256)


def internal_message(
    new_builder: BuilderFactory,
    dest: Address,
    amount: int,
    bounce: bool,
    body: Any,
) -> Any:
    """Outbound int_msg_info with body stored as a reference; fees and lt are filled in by the wallet."""
    b = new_builder()
    b.store_uint(0, 1)  # int_msg_info$0
    b.store_uint(1, 1)  # ihr_disabled
    b.store_uint(1 if bounce else 0, 1)
    b.store_uint(0, 1)  # bounced
    b.store_uint(0, 2)  # src: addr_none
    store_std_address(b, dest)
    store_grams(b, amount)
    b.store_uint(0, 1)  # no extra currencies
    store_grams(b, 0)  # ihr_fee
    store_grams(b, 0)  # fwd_fee
    b.store_uint(0, 64)  # created_lt
    b.store_uint(0, 32)  # created_at
    b.store_uint(0, 1)  # no state init
    b.store_uint(1, 1)  # body in reference
    b.store_reference(body)
    return b.build()


def read_wallet_v3_data(data: Any) -> tuple[int, int]:
    """(seqno, wallet_id) from a wallet_v3 data slice."""
    seqno = data.load_u32()
    wallet_id = data.load_u32()
    return seqno, wallet_id


def read_highload_wallet_v2_data(data: Any) -> int:
    """wallet_id from a highload_wallet_v2 data slice."""
    return data.load_u32()


def wallet_v3_body(
    new_builder: BuilderFactory,
    wallet_id: int,
    expire_at: int,
    seqno: int,
    message: Any,
    mode: int = WALLET_SEND_MODE,
    signature: bytes | None = None,
) -> Any:
    b = new_builder()
    if signature is not None:
        _store_signature(b, signature)
    b.store_uint(wallet_id, 32)
    b.store_uint(expire_at, 32)
    b.store_uint(seqno, 32)
    b.store_uint(mode, 8)
    b.store_reference(message)
    return b.build()


def highload_query_id(expire_at: int, message_hash: bytes) -> int:
    """Upper 32 bits expire_at (the wallet drops stale queries by it), lower 32 bits from the message hash."""
    return (expire_at << 32) | int.from_bytes(message_hash[:4], "big")


def _highload_messages(new_builder: BuilderFactory, message: Any, mode: int) -> Any:
    """Root of a one-entry HashmapE(16) under key 0: hml_same label of 16 zero bits, then (mode, ^message)."""
    b = new_builder()
    b.store_uint(0b11, 2)  # hml_same
    b.store_uint(0, 1)  # repeated bit
    b.store_uint(HIGHLOAD_MESSAGES_KEY_BITS, 5)  # label length, #<= 16
    b.store_uint(mode, 8)
    b.store_reference(message)
    return b.build()


def highload_wallet_v2_body(
    new_builder: BuilderFactory,
    wallet_id: int,
    query_id: int,
    message: Any,
    mode: int = WALLET_SEND_MODE,
    signature: bytes | None = None,
) -> Any:
    messages = _highload_messages(new_builder, message, mode)
    b = new_builder()
    if signature is not None:
        _store_signature(b, signature)
    b.store_uint(wallet_id, 32)
    b.store_uint(query_id, 64)
    b.store_uint(1, 1)  # non-empty dict
    b.store_reference(messages)
    return b.build()
