from invsearch.domain.inventory.service.cache_key import CacheKey, cache_key, peak_key

__all__ = ["CacheKey", "cache_key", "peak_key"]
