"""
Discovery cache for lintgate.

Uses diskcache for SQLite-based persistent caching of the discovered
package list. Entries expire after the configured TTL.
"""

import hashlib
from pathlib import Path
from typing import Any, List, Optional

from diskcache import Cache

from .logging_config import get_logger
from .models import Package

logger = get_logger(__name__)


class PackageCache:
    """
    Time-limited cache of discovery results.

    Features:
    - One entry per workspace root
    - TTL-based expiration
    - Corrupt or unreadable entries are treated as misses
    - Writes are best-effort and never raise
    """

    def __init__(
        self,
        cache_dir: str = ".lintgate-cache",
        ttl_seconds: int = 3600,
        enabled: bool = True,
    ):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_seconds: Time-to-live in seconds
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds
        self.cache: Optional[Cache] = None

        if self.enabled:
            try:
                self.cache = Cache(str(cache_dir))
                logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_seconds}s")
            except Exception as e:
                logger.warning(f"Cache unavailable at {cache_dir}: {e}")
                self.enabled = False
        else:
            logger.debug("Cache disabled")

    def __enter__(self) -> "PackageCache":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @staticmethod
    def _key(root: Path) -> str:
        resolved = str(Path(root).resolve())
        return "packages:" + hashlib.sha256(resolved.encode()).hexdigest()[:16]

    def load(self, root: Path) -> Optional[List[Package]]:
        """
        Return cached packages for ``root``.

        Returns:
            Package list, or None on miss, expiry or a corrupt entry
        """
        if not self.enabled or self.cache is None:
            return None

        key = self._key(root)
        try:
            raw = self.cache.get(key)
            if raw is None:
                return None
            packages = [Package.from_dict(item) for item in raw]
        except Exception as e:
            logger.warning(f"Discovery cache unreadable, rescanning: {e}")
            return None

        logger.debug(f"Cache hit: {key} ({len(packages)} packages)")
        return packages

    def store(self, root: Path, packages: List[Package]) -> None:
        """Store packages for ``root``."""
        if not self.enabled or self.cache is None:
            return

        key = self._key(root)
        try:
            self.cache.set(key, [p.to_dict() for p in packages], expire=self.ttl_seconds)
            logger.debug(f"Cache set: {key} ({len(packages)} packages)")
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
                "ttl_seconds": self.ttl_seconds,
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()
