import hashlib
from typing import Any, Optional

from apps.common import get_logger
from .protocols import CacheBackendProtocol

logger = get_logger(__name__).bind(component="catalog", layer="cache")


class ProductListingCache:
    """Versioned read-through cache for product listing pages.

    Entries are keyed by the listing query under a version number; bumping the
    version on any catalog mutation orphans every cached page at once.
    Callers resolve the key once with ``key_for`` before reading the store and
    reuse it for ``set``, so a page computed before a bump lands under the
    orphaned version.
    """

    prefix = "products:list"

    def __init__(self, backend: CacheBackendProtocol, enabled: bool = True):
        self.backend = backend
        self.enabled = enabled
        self._version_key = f"{self.prefix}:version"

    def _version(self) -> int:
        return self.backend.get(self._version_key) or 1

    def key_for(self, spec_key: str) -> str:
        digest = hashlib.sha1(spec_key.encode("utf-8")).hexdigest()
        return f"{self.prefix}:v{self._version()}:{digest}"

    def get(self, cache_key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        value = self.backend.get(cache_key)
        logger.debug("Listing cache lookup", cache_key=cache_key, hit=value is not None)
        return value

    def set(self, cache_key: str, value: Any) -> None:
        if not self.enabled:
            return
        self.backend.set(cache_key, value)

    def invalidate(self) -> None:
        if not self.enabled:
            return
        # Version key should not expire; incr is atomic so concurrent bumps never collide.
        if self.backend.add(self._version_key, 2, timeout=None):
            version = 2
        else:
            try:
                version = self.backend.incr(self._version_key)
            except ValueError:
                # Evicted between add and incr
                self.backend.set(self._version_key, 2, timeout=None)
                version = 2
        logger.debug("Bumped listing cache version", new_version=version)
