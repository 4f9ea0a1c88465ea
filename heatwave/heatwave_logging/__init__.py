"""
Structured logging for Heatwave.

JSON logs with timestamp, address, event_type. Use get_logger() in every module.
"""

from heatwave.heatwave_logging.logger import bind_address, get_logger

__all__ = ["bind_address", "get_logger"]
