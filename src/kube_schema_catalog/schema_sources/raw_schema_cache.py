"""Cache of unresolved schema documents."""

from __future__ import annotations

from .cache_keys import versioned_cache_prefix
from .source_models import RawSchemaCacheEntry


class RawSchemaCache:
    """Raw documents keyed by cache key, in insertion order."""

    def __init__(self) -> None:
        self._entries: dict[str, RawSchemaCacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, cache_key: object) -> bool:
        return cache_key in self._entries

    def store(self, cache_key: str, entry: RawSchemaCacheEntry) -> None:
        self._entries[cache_key] = entry

    def get(self, cache_key: str) -> RawSchemaCacheEntry | None:
        return self._entries.get(cache_key)

    def keys(self) -> list[str]:
        return list(self._entries)

    def entries_for_source(self, source_id: str) -> list[tuple[str, RawSchemaCacheEntry]]:
        """Return the entries a lookup by `source_id` may use, most specific first.

        Order: the entry stored under `source_id` itself, entries whose key
        starts with ``{source_id}-``, then any other entry owned by the source.
        """
        candidates: list[tuple[str, RawSchemaCacheEntry]] = []
        direct = self._entries.get(source_id)
        if direct is not None:
            candidates.append((source_id, direct))
        prefix = versioned_cache_prefix(source_id)
        candidates.extend(
            (key, entry) for key, entry in self._entries.items() if key.startswith(prefix)
        )
        seen = {key for key, _ in candidates}
        candidates.extend(
            (key, entry)
            for key, entry in self._entries.items()
            if entry.source == source_id and key not in seen
        )
        return candidates

    def drop_source(self, source_id: str) -> int:
        """Remove every entry owned by `source_id` and return how many were removed."""
        stale = [key for key, entry in self._entries.items() if entry.source == source_id]
        for key in stale:
            del self._entries[key]
        return len(stale)
