"""HTTP adapters for the inventory API.

Import modules directly:
    from invsearch.infrastructure.http.inventory_fetcher import HttpInventoryFetcher
    from invsearch.infrastructure.http.di import HttpProvider
"""

__all__: list[str] = []
