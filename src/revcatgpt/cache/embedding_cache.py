"""
Embedding Cache

In-memory, least-recently-used store for query embeddings.

Design choices
--------------
- In-memory only (no persistence across process restarts).
- Fixed capacity chosen at construction; inserting above capacity evicts the
  least-recently-used entry.
- A successful ``get`` refreshes the entry's recency.
- Thread-safe access using a re-entrant lock. Lookup, insertion and eviction
  all happen under the same lock, so concurrent inserts can never overfill it.
- One instance is created at startup and injected into request handlers
  (see ``api.dependencies.get_embedding_cache``), while still allowing custom
  instances to be created for tests.
"""

from __future__ import annotations

import hashlib
from collections import OrderedDict
from threading import RLock
from typing import Any, Dict, Optional

import numpy as np


class EmbeddingCache:
    """
    Bounded mapping from query hash keys to embedding vectors.

    Stored vectors are made read-only so a cached embedding handed out to
    one request cannot be modified by another.
    """

    def __init__(self, capacity: int = 100) -> None:
        """
        Parameters
        ----------
        capacity : int
            Maximum number of embeddings kept. Must be positive.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._entries: "OrderedDict[str, np.ndarray]" = OrderedDict()
        self._capacity = capacity
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def key_for(query: str) -> str:
        """Content-hash key used for cache lookups (SHA-1 of the UTF-8 query)."""
        return hashlib.sha1(query.encode("utf-8")).hexdigest()

    @property
    def capacity(self) -> int:
        return self._capacity

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def get(self, key: str) -> Optional[np.ndarray]:
        """
        Return the embedding stored under ``key`` or None on a miss.

        A hit marks the entry as most recently used.
        """
        with self._lock:
            embedding = self._entries.get(key)
            if embedding is None:
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            self._hits += 1
            return embedding

    def put(self, key: str, embedding: np.ndarray) -> np.ndarray:
        """
        Store ``embedding`` under ``key`` as the most recently used entry.

        Replacing an existing key never evicts another entry. Returns the
        read-only copy that was stored.
        """
        vector = np.array(embedding, copy=True)
        vector.setflags(write=False)

        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self._capacity:
                self._entries.popitem(last=False)
            self._entries[key] = vector
        return vector

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        # Membership checks do not count as use.
        with self._lock:
            return key in self._entries

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total > 0 else 0.0,
            }
