import re
import threading
import time
from typing import Any, Dict, List, Optional, Tuple


class TTLCache:
    """In-memory key/value store with a per-entry expiry.

    Entries are kept until they expire or are removed explicitly; there is no
    size bound. Flask may serve requests on several threads, so every
    operation takes the same lock.
    """

    def __init__(self, default_ttl_minutes: float = 5):
        self.default_ttl_minutes = default_ttl_minutes
        self._store: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, ttl_minutes: Optional[float] = None) -> None:
        if ttl_minutes is None:
            ttl_minutes = self.default_ttl_minutes
        expiry = time.time() + ttl_minutes * 60
        with self._lock:
            self._store[key] = (value, expiry)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if time.time() >= expiry:
                # expired
                del self._store[key]
                return None
            return value

    def delete(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store)

    def clear_by_pattern(self, pattern: str) -> int:
        """Remove every key matching ``pattern`` and return how many went.

        Raises ``re.error`` when the pattern doesn't compile.
        """
        regex = re.compile(pattern)
        with self._lock:
            matched = [key for key in self._store if regex.search(key)]
            for key in matched:
                del self._store[key]
        return len(matched)

    def clear_expired(self) -> int:
        now = time.time()
        with self._lock:
            expired = [key for key, (_, expiry) in self._store.items() if now >= expiry]
            for key in expired:
                del self._store[key]
        return len(expired)

    def stats(self) -> Dict[str, int]:
        now = time.time()
        with self._lock:
            expired = sum(1 for _, expiry in self._store.values() if now >= expiry)
            total = len(self._store)
        return {"total": total, "active": total - expired, "expired": expired}
