"""Canonical cache keys for queries.

Key layout::

    <criteria>|by:<by>|onlyAvailable:<bool>|page:<n>|size:<n>[|sort:<field>:<dir>][|branches:<a,b>]

``|`` and ``,`` are rejected by ``SearchQuery`` validation, so no value can
forge a component boundary. Branch order is kept as given.
"""

from typing import NewType

from invsearch.domain.inventory.model.query import BRANCH_DELIMITER, KEY_DELIMITER, SearchQuery

CacheKey = NewType("CacheKey", str)


def cache_key(query: SearchQuery) -> CacheKey:
    """Normalize a query into its cache key. Case/whitespace-insensitive on criteria."""
    parts = [
        query.criteria.strip().lower(),
        f"by:{query.by}",
        f"onlyAvailable:{'true' if query.only_available else 'false'}",
        f"page:{query.page}",
        f"size:{query.size}",
    ]
    if query.sort is not None:
        parts.append(f"sort:{query.sort}")
    if query.branches:
        parts.append(f"branches:{BRANCH_DELIMITER.join(query.branches)}")
    return CacheKey(KEY_DELIMITER.join(parts))


def peak_key(part_number: str) -> CacheKey:
    return CacheKey(part_number.strip().lower())
