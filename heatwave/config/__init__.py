"""
Configuration for Heatwave.

Loads settings from environment variables and an optional .env file in the
project root. Run parameters (paths, giver, target balance) come from the CLI.
"""

from heatwave.config.env import (  # noqa: F401
    get_cache_dir,
    get_jrpc_url,
    get_states_api_url,
    load_heatwave_env,
)

__all__ = ["get_cache_dir", "get_jrpc_url", "get_states_api_url", "load_heatwave_env"]
