"""Read the accounts list: one address per line, blank lines ignored."""

from __future__ import annotations

from pathlib import Path

from heatwave.utils.address_utils import Address


def parse_accounts(contents: str) -> list[Address]:
    """
    Parse newline-delimited addresses (LF or CRLF). Raises InvalidAddress on the
    first malformed line; a bad list is a setup error, not a per-account one.
    """
    result: list[Address] = []
    for line in contents.splitlines():
        trimmed = line.strip()
        if trimmed:
            result.append(Address.parse(trimmed))
    return result


def read_accounts(path: str | Path) -> list[Address]:
    with open(Path(path).expanduser(), encoding="utf-8") as f:
        return parse_accounts(f.read())
