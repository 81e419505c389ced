"""DI provider for HTTP infrastructure."""

from collections.abc import AsyncIterator

import httpx
from dishka import Provider, provide

from invsearch.config import Config
from invsearch.domain.inventory.port.fetcher import InventoryFetcher
from invsearch.infrastructure.http.inventory_fetcher import HttpInventoryFetcher
from invsearch.util.di.scope import Scope


class HttpProvider(Provider):
    """DI provider for the inventory API client."""

    @provide(scope=Scope.APP)
    async def get_http_client(self, config: Config) -> AsyncIterator[httpx.AsyncClient]:
        """Shared HTTP client; closed when the container closes."""
        async with httpx.AsyncClient(
            base_url=config.api.base_url,
            timeout=httpx.Timeout(config.api.timeout_seconds),
        ) as client:
            yield client

    @provide(scope=Scope.APP, provides=InventoryFetcher)
    def get_inventory_fetcher(self, client: httpx.AsyncClient) -> HttpInventoryFetcher:
        return HttpInventoryFetcher(client=client)
