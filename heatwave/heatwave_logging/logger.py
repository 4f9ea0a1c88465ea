"""
Structured logging for unfreeze runs.

Every line carries timestamp, level, logger, event_type and, for per-account
work, the account address. Amounts are nano EVER integers; logical times and
transaction hashes are logged as strings (lt, tx_hash). LOG_FORMAT=json
(default) renders one JSON object per line for batch runs; LOG_FORMAT=console
renders human-readable lines for interactive runs.

Uses only stdlib logging and structlog; no other heatwave imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


# Fields holding chain values: addresses render as "wc:hex", lt as a decimal string
_ADDRESS_FIELDS = ("address", "giver", "dest", "recipient", "relay")
_STRING_FIELDS = ("lt",)


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; render chain values as plain strings."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    for key in _ADDRESS_FIELDS + _STRING_FIELDS:
        value = event_dict.get(key)
        if value is not None and not isinstance(value, str):
            event_dict[key] = str(value)
    tx_hash = event_dict.get("tx_hash")
    if isinstance(tx_hash, (bytes, bytearray)):
        event_dict["tx_hash"] = tx_hash.hex()
    return event_dict


def configure_structlog() -> None:
    """Configure structlog once at import."""
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
        _normalize_event,
    ]
    if LOG_FORMAT == "json":
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("state_cache_hit", address=address, lt=freeze_point.lt)
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_address(address: Any) -> structlog.BoundLogger:
    """Return a per-account logger; address (Address or "wc:hex") is bound to every call."""
    return get_logger("heatwave.account").bind(address=str(address))
