"""Search commands."""

import asyncio
import sys

import cyclopts

from invsearch.application.di import create_container
from invsearch.application.pipeline import SearchPipeline, SearchViewState, SortChanged
from invsearch.cli.console import Console
from invsearch.config import Config, PipelineConfig, configure_logging
from invsearch.domain.inventory.model import SearchBy, SortSpec
from invsearch.domain.shared.error import ConfigurationError, ValidationError

app = cyclopts.App(name="search", help="Search inventory")


async def run_search(
    config: Config,
    criteria: str,
    *,
    by: SearchBy = SearchBy.PART_NUMBER,
    branches: list[str] | None = None,
    only_available: bool = False,
    page: int = 0,
    sort: SortSpec | None = None,
) -> SearchViewState:
    """Run one search through the pipeline and return the settled view state.

    The sort and page triggers are submitted back to back, so the debounce
    window folds them into a single request.
    """
    container = create_container(config)
    try:
        async with container() as session:
            pipeline = await session.get(SearchPipeline)
            pipeline.form.criteria = criteria
            pipeline.form.by = by
            pipeline.form.branches = branches or []
            pipeline.form.only_available = only_available
            if not pipeline.form.is_valid():
                raise ValidationError(
                    "Search criteria is required and may not contain '|'", field="criteria"
                )

            if sort is not None:
                pipeline.submit(SortChanged(sort=sort))
            else:
                pipeline.search()
            if page:
                pipeline.go_to_page(page)

            await pipeline.wait_idle()
            return pipeline.state
    finally:
        await container.close()


@app.default
def search(
    criteria: str,
    /,
    by: SearchBy = SearchBy.PART_NUMBER,
    branch: list[str] | None = None,
    only_available: bool = False,
    page: int = 0,
    size: int | None = None,
    sort: str | None = None,
) -> None:
    """Search the inventory.

    Args:
        criteria: Text to match against the chosen field.
        by: Field the criteria is matched against.
        branch: Branch code to include (repeatable, order is kept).
        only_available: Only items with stock on hand.
        page: Zero-based page index.
        size: Page size (defaults to the configured page size).
        sort: Sort spec as field[:asc|desc], e.g. availableQty:desc.
    """
    console = Console()
    try:
        config = Config()
    except ConfigurationError as e:
        console.error(e.message, hint="Check INVSEARCH_CONFIG_FILE")
        sys.exit(2)
    configure_logging(config.logging)
    if size is not None:
        try:
            config.pipeline = PipelineConfig.model_validate(
                {**config.pipeline.model_dump(), "page_size": size}
            )
        except ValueError:
            console.error(f"Invalid page size: {size}", hint="Use a page size of at least 1")
            sys.exit(2)

    try:
        sort_spec = SortSpec.parse(sort) if sort else None
    except ValueError:
        console.error(f"Invalid sort: {sort}", hint="Use field[:asc|desc], e.g. availableQty:desc")
        sys.exit(2)

    try:
        state = asyncio.run(
            run_search(
                config,
                criteria,
                by=by,
                branches=branch,
                only_available=only_available,
                page=page,
                sort=sort_spec,
            )
        )
    except ValidationError as e:
        console.error(e.message)
        sys.exit(2)
    except ValueError as e:
        console.error(str(e))
        sys.exit(2)

    if state.error_message:
        console.error(state.error_message, hint=f"API: {config.api.base_url}")
        sys.exit(1)
    console.search_results(state)
