"""In-memory store of preview sessions."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from .session import ImportPreview


class PreviewCache:
    """Keeps preview sessions alive between requests.

    Entries expire after a TTL; async variants serialize access with an
    asyncio.Lock.
    """

    def __init__(self, default_ttl_seconds: int = 1800):
        self._cache: dict[str, tuple[ImportPreview, datetime]] = {}
        self._default_ttl = default_ttl_seconds
        self._lock = asyncio.Lock()

    def store(
        self,
        preview: ImportPreview,
        preview_id: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ) -> str:
        """
        Store a preview session.

        Returns:
            The preview ID
        """
        preview_id = preview_id or str(uuid.uuid4())
        ttl = ttl_seconds or self._default_ttl
        self._cache[preview_id] = (preview, datetime.now(timezone.utc) + timedelta(seconds=ttl))
        return preview_id

    async def store_async(
        self,
        preview: ImportPreview,
        preview_id: Optional[str] = None,
        ttl_seconds: Optional[int] = None,
    ) -> str:
        async with self._lock:
            return self.store(preview, preview_id, ttl_seconds)

    def get(self, preview_id: str) -> Optional[ImportPreview]:
        """Return the session, or None if it is unknown or expired."""
        entry = self._cache.get(preview_id)
        if entry is None:
            return None

        preview, expires_at = entry
        if datetime.now(timezone.utc) > expires_at:
            del self._cache[preview_id]
            return None

        return preview

    async def get_async(self, preview_id: str) -> Optional[ImportPreview]:
        async with self._lock:
            return self.get(preview_id)

    def remove(self, preview_id: str) -> bool:
        if preview_id in self._cache:
            del self._cache[preview_id]
            return True
        return False

    async def remove_async(self, preview_id: str) -> bool:
        async with self._lock:
            return self.remove(preview_id)

    def cleanup_expired(self) -> int:
        """Remove expired sessions and return how many were dropped."""
        now = datetime.now(timezone.utc)
        expired_ids = [
            preview_id
            for preview_id, (_, expires_at) in self._cache.items()
            if now > expires_at
        ]
        for preview_id in expired_ids:
            del self._cache[preview_id]
        return len(expired_ids)

    async def cleanup_expired_async(self) -> int:
        async with self._lock:
            return self.cleanup_expired()

    def __contains__(self, preview_id: str) -> bool:
        return preview_id in self._cache

    def clear(self):
        self._cache.clear()

    def size(self) -> int:
        return len(self._cache)
