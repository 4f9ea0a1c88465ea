"""Account address value type and validation utilities."""

from __future__ import annotations

import re
from dataclasses import dataclass

from heatwave.core.exceptions import InvalidAddress

ADDRESS_RE = re.compile(r"^(?:-1|0):[\da-fA-F]{64}$")
MASTERCHAIN_ID = -1
BASECHAIN_ID = 0


@dataclass(frozen=True)
class Address:
    """Account address: workchain id + 256-bit account hash (lowercase hex)."""

    workchain: int
    account: str

    def __post_init__(self) -> None:
        # Canonical form keeps equality independent of input hex case
        object.__setattr__(self, "account", self.account.lower())

    @classmethod
    def parse(cls, value: str) -> "Address":
        raw = (value or "").strip()
        if not ADDRESS_RE.match(raw):
            raise InvalidAddress(f"Invalid address: {value!r}")
        wc, account = raw.split(":", 1)
        return cls(workchain=int(wc), account=account)

    @property
    def is_masterchain(self) -> bool:
        return self.workchain == MASTERCHAIN_ID

    def __str__(self) -> str:
        return f"{self.workchain}:{self.account}"
