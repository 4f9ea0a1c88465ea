"""
Tests for the Address value type and the accounts list reader.
"""

from __future__ import annotations

import pytest

from heatwave.core.exceptions import InvalidAddress
from heatwave.unfreeze.address_list import parse_accounts, read_accounts
from heatwave.utils.address_utils import Address

HASH_A = "a" * 64
HASH_MIXED = "AbCdEf" + "0" * 58


def test_parse_basechain_and_masterchain():
    """Both workchains parse; only -1 is masterchain."""
    base = Address.parse(f"0:{HASH_A}")
    master = Address.parse(f"-1:{HASH_A}")
    assert base.workchain == 0
    assert master.workchain == -1
    assert not base.is_masterchain
    assert master.is_masterchain
    assert str(master) == f"-1:{HASH_A}"


def test_equality_by_canonical_form():
    """Hex case does not affect equality, hashing or string form."""
    upper = Address.parse(f"0:{HASH_MIXED}")
    lower = Address.parse(f"0:{HASH_MIXED.lower()}")
    assert upper == lower
    assert hash(upper) == hash(lower)
    assert str(upper) == f"0:{HASH_MIXED.lower()}"
    assert Address(0, HASH_MIXED) == lower


@pytest.mark.parametrize(
    "value",
    [
        "",
        "0:" + "a" * 63,
        "0:" + "g" * 64,
        "1:" + "a" * 64,
        "-2:" + "a" * 64,
        "a" * 64,
        "EQ" + "a" * 46,
    ],
)
def test_invalid_addresses_rejected(value):
    """Anything but <-1|0>:<64 hex> raises InvalidAddress."""
    with pytest.raises(InvalidAddress):
        Address.parse(value)


def test_parse_accounts_skips_blank_lines_and_crlf():
    """CRLF and LF both split; blank and whitespace-only lines are ignored."""
    contents = f"0:{HASH_A}\r\n\r\n   \n -1:{'b' * 64} \n"
    accounts = parse_accounts(contents)
    assert accounts == [Address.parse(f"0:{HASH_A}"), Address.parse(f"-1:{'b' * 64}")]


def test_parse_accounts_keeps_input_order_and_duplicates():
    contents = f"0:{'b' * 64}\n0:{HASH_A}\n0:{'b' * 64}\n"
    accounts = parse_accounts(contents)
    assert [a.account[0] for a in accounts] == ["b", "a", "b"]


def test_parse_accounts_malformed_line_raises():
    """A malformed list is a setup error for the whole run."""
    with pytest.raises(InvalidAddress):
        parse_accounts(f"0:{HASH_A}\nnot-an-address\n")


def test_read_accounts_from_file(tmp_path):
    path = tmp_path / "accounts.csv"
    path.write_text(f"0:{HASH_A}\n", encoding="utf-8")
    assert read_accounts(path) == [Address.parse(f"0:{HASH_A}")]
