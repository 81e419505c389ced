"""Dependency injection wiring for the search service and pipeline."""

from collections.abc import Iterator

from dishka import AsyncContainer, Provider, from_context, make_async_container, provide

from invsearch.application.pipeline import SearchPipeline
from invsearch.application.search import InventorySearchService, PeakEnvelope, SearchEnvelope
from invsearch.config import Config
from invsearch.domain.cache import QueryCache
from invsearch.domain.inventory.port.fetcher import InventoryFetcher
from invsearch.infrastructure.http.di import HttpProvider
from invsearch.util.di.scope import Scope


class SearchProvider(Provider):
    """Search service (APP) and one pipeline per view session (SESSION)."""

    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_search_service(
        self, config: Config, fetcher: InventoryFetcher
    ) -> Iterator[InventorySearchService]:
        service = InventorySearchService(
            fetcher=fetcher,
            search_cache=QueryCache[SearchEnvelope](
                ttl_ms=config.cache.ttl_ms,
                max_entries=config.cache.max_entries,
                name="search-cache",
            ),
            peak_cache=QueryCache[PeakEnvelope](
                ttl_ms=config.cache.ttl_ms,
                max_entries=config.cache.max_entries,
                name="peak-cache",
            ),
        )
        yield service
        service.close()

    @provide(scope=Scope.SESSION)
    def get_pipeline(
        self, config: Config, service: InventorySearchService
    ) -> Iterator[SearchPipeline]:
        pipeline = SearchPipeline(
            service,
            debounce_ms=config.pipeline.debounce_ms,
            page_size=config.pipeline.page_size,
        )
        yield pipeline
        pipeline.close()


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()

    return make_async_container(
        HttpProvider(),
        SearchProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
