"""
On-disk cache of reconstructed states: one file per address, named by its
canonical string, holding the raw state init bytes. Entries never expire;
ignore_cache skips reads for the run while writes still refresh the files.
"""

from __future__ import annotations

import stat
from pathlib import Path

from heatwave.core.exceptions import CacheError
from heatwave.heatwave_logging import get_logger
from heatwave.utils.address_utils import Address

logger = get_logger(__name__)


class StateCache:
    def __init__(self, cache_dir: str | Path, *, ignore_cache: bool = False) -> None:
        self._cache_dir = Path(cache_dir)
        self._ignore_cache = ignore_cache

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def ignore_cache(self) -> bool:
        return self._ignore_cache

    def open(self) -> "StateCache":
        """Create the cache directory if absent."""
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Cannot create cache dir {self._cache_dir}: {e}") from e
        logger.debug("state_cache_opened", cache_dir=str(self._cache_dir), ignore_cache=self._ignore_cache)
        return self

    def path_for(self, address: Address) -> Path:
        return self._cache_dir / str(address)

    def try_get(self, address: Address) -> bytes | None:
        """Cached bytes, or None when ignoring the cache or the file is missing."""
        if self._ignore_cache:
            return None
        path = self.path_for(address)
        try:
            st = path.stat()
            if not stat.S_ISREG(st.st_mode):
                return None
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(f"Cannot read cached state {path}: {e}") from e

    def put(self, address: Address, data: bytes) -> None:
        """Create or overwrite the entry for address."""
        path = self.path_for(address)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise CacheError(f"Cannot write cached state {path}: {e}") from e
