#!/usr/bin/env python3
"""
File System Cache - One JSON file per cache entry

Files are named by the SHA-256 of the cache key and live under
<cache_dir>/<namespace>. Each file records the key, the value, a write
timestamp and, optionally, the arguments that produced the key.
"""

import hashlib
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import pendulum

from ..json_handler import CanonicalJSONHandler
from .interface import Cache

CACHE_DIR_ENV_VAR = "FASTFORWARD_CACHE_DIR"
DEFAULT_CACHE_DIR = ".fastforward-cache"
DEFAULT_NAMESPACE = "default"


class FileSystemCache(Cache):
    """Disk-backed cache that stores each entry as a JSON file."""

    def __init__(
        self,
        cache_dir: Optional[Union[str, Path]] = None,
        namespace: Optional[str] = None,
    ) -> None:
        """
        Args:
            cache_dir: Directory to store cache files (defaults to
                FASTFORWARD_CACHE_DIR, then '.fastforward-cache' in the
                current directory)
            namespace: Subdirectory of cache_dir for this instance
                (defaults to 'default')
        """
        if cache_dir is None:
            cache_dir = os.environ.get(CACHE_DIR_ENV_VAR) or Path.cwd() / DEFAULT_CACHE_DIR

        self.cache_dir = Path(cache_dir)
        self.namespace = namespace or DEFAULT_NAMESPACE
        self.logger = logging.getLogger(f"FileSystemCache.{self.namespace}")

        self._namespace_dir.mkdir(parents=True, exist_ok=True)

    @property
    def _namespace_dir(self) -> Path:
        return self.cache_dir / self.namespace

    # Disk helpers ------------------------------------------------------

    def _get_file_path(self, key: str) -> Path:
        key_hash = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._namespace_dir / f"{key_hash}.json"

    def _load_record(self, key: str) -> Optional[Dict[str, Any]]:
        file_path = self._get_file_path(key)
        if not file_path.exists():
            return None

        try:
            record = CanonicalJSONHandler.loads_record(file_path.read_bytes())
        except (OSError, ValueError) as exc:
            self.logger.debug("Disk cache read error (%s): %s", file_path.name, exc)
            self._safe_remove(file_path)
            return None

        if record["key"] != key:
            self.logger.debug("Disk cache key mismatch in %s", file_path.name)
            return None

        return record

    def _safe_remove(self, file_path: Path) -> bool:
        try:
            file_path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            self.logger.debug("Disk cache delete error (%s): %s", file_path.name, exc)
            return False

    # Public API --------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        record = self._load_record(key)
        if record is None:
            return default
        return record["value"]

    def set(self, key: str, value: Any, args: Optional[Sequence[Any]] = None) -> None:
        """
        Store a value in the cache.

        Args:
            key: Cache key
            value: Value to cache
            args: Arguments that produced this key, kept for inspection only
        """
        file_path = self._get_file_path(key)
        record = {
            "key": key,
            "value": value,
            "timestamp": int(pendulum.now("UTC").timestamp() * 1000),
            "args": list(args) if args is not None else None,
        }

        try:
            data = CanonicalJSONHandler.dumps_record(record)
        except TypeError as exc:
            self.logger.warning("Disk cache cannot serialize value for %s: %s", key, exc)
            return

        try:
            file_path.write_bytes(data)
        except OSError as exc:
            self.logger.warning(
                "Disk cache write error for %s: %s", file_path.name, exc
            )

    def has(self, key: str) -> bool:
        return self._load_record(key) is not None

    def delete(self, key: str) -> bool:
        return self._safe_remove(self._get_file_path(key))

    def clear(self) -> None:
        """
        Remove every entry in this namespace.

        Regular files are removed first, then the namespace directory is
        removed and recreated. Failures are logged and swallowed; the
        directory exists afterwards whenever it can be created.
        """
        namespace_dir = self._namespace_dir
        try:
            if namespace_dir.exists():
                for file_path in namespace_dir.iterdir():
                    if file_path.is_file():
                        self._safe_remove(file_path)

                try:
                    namespace_dir.rmdir()
                except OSError as exc:
                    # Subdirectories or permissions; the cache files are gone already
                    self.logger.debug("Disk cache directory kept (%s): %s", namespace_dir, exc)
        except OSError as exc:
            self.logger.debug("Disk cache clear error (%s): %s", namespace_dir, exc)

        try:
            namespace_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            self.logger.warning("Disk cache directory unavailable (%s): %s", namespace_dir, exc)

    def stats(self) -> Dict[str, Any]:
        entries = (
            sum(1 for _ in self._namespace_dir.glob("*.json"))
            if self._namespace_dir.exists()
            else 0
        )
        return {
            "backend": "filesystem",
            "namespace": self.namespace,
            "disk_path": str(self._namespace_dir),
            "size": entries,
        }
