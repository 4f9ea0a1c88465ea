"""
Test that heatwave_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from heatwave_logging and use the logger."""
    from heatwave.heatwave_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    logger.info("test_message", key="value")


def test_bind_address_logger():
    """bind_address returns a logger usable with extra fields."""
    from heatwave.heatwave_logging import bind_address

    log = bind_address("0:" + "a" * 64)
    log.info("test_bound_message", stage="cache")


def test_normalize_event_renders_chain_values():
    """Address values and lt become strings; tx_hash bytes become hex."""
    from heatwave.heatwave_logging.logger import _normalize_event
    from heatwave.utils.address_utils import Address

    address = Address.parse("0:" + "a" * 64)
    event = _normalize_event(
        None,
        "info",
        {"event": "redeploy_sending", "address": address, "lt": 42, "tx_hash": b"\x01\xff", "amount": 7},
    )
    assert event == {
        "event_type": "redeploy_sending",
        "address": "0:" + "a" * 64,
        "lt": "42",
        "tx_hash": "01ff",
        "amount": 7,
    }
