"""
Environment variable loading for Heatwave.

- HEATWAVE_JRPC_URL: Everscale JRPC endpoint (default: mainnet everwallet JRPC)
- HEATWAVE_STATES_API_URL: state archive service base URL
- HEATWAVE_CACHE_DIR: computed states cache directory (default: <tmpdir>/heatwave-states)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Project root: config is heatwave/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_JRPC_URL = "https://jrpc.everwallet.net"
STATES_API_URL = "https://states.everscan.io"
CACHE_DIR_NAME = "heatwave-states"


def load_heatwave_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def get_jrpc_url() -> str:
    """Resolve JRPC endpoint: HEATWAVE_JRPC_URL > mainnet default."""
    load_heatwave_env()
    url = (os.getenv("HEATWAVE_JRPC_URL") or "").strip()
    return url or MAINNET_JRPC_URL


def get_states_api_url() -> str:
    """Resolve state archive base URL, without a trailing slash."""
    load_heatwave_env()
    url = (os.getenv("HEATWAVE_STATES_API_URL") or "").strip()
    return (url or STATES_API_URL).rstrip("/")


def get_cache_dir() -> Path:
    """
    Return the computed states cache directory.
    HEATWAVE_CACHE_DIR overrides the fixed-name directory under the system temp root.
    """
    load_heatwave_env()
    raw = (os.getenv("HEATWAVE_CACHE_DIR") or "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path(tempfile.gettempdir()) / CACHE_DIR_NAME


def print_heatwave_startup(script_name: str) -> None:
    """Print endpoints and cache location at script start."""
    jrpc = get_jrpc_url()
    if "api-key=" in jrpc:
        jrpc = jrpc.split("api-key=")[0] + "api-key=***"
    print(
        f"[heatwave] {script_name} | jrpc={jrpc} | states_api={get_states_api_url()} | cache={get_cache_dir()}"
    )
