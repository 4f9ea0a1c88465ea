"""
Application-level exceptions.

Setup-stage errors abort the whole run; anything raised while one account is
being processed is caught by the pipeline and only skips that account.
"""

from __future__ import annotations


class HeatwaveError(Exception):
    """Base class for all Heatwave errors."""


class InvalidAddress(HeatwaveError, ValueError):
    """String is not a `<workchain>:<64 hex>` account address."""


class InvalidKeys(HeatwaveError, ValueError):
    """Credential file is malformed or its secret does not match its public key."""


class AccountNotFound(HeatwaveError):
    """Account has no on-chain state at all."""


class AccountUninitialized(HeatwaveError):
    """Account exists but carries no code."""


class UnknownAccountProtocol(HeatwaveError):
    """Giver code hash matches none of the supported funding protocols."""


class AccountNotFrozen(HeatwaveError):
    """Account is not (or was never validly) in the frozen state."""


class FreezeTransactionNotFound(HeatwaveError):
    """Transaction history holds no transition into the frozen state."""


class EmptyState(HeatwaveError):
    """Reconstructed account state has no state init."""


class StatesApiError(HeatwaveError):
    """State archive returned a non-success response; message is the body text."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CacheError(HeatwaveError):
    """State cache file could not be read or written."""


class UnsupportedTransfer(HeatwaveError):
    """Provider cannot authorize a transfer for this funding protocol."""
