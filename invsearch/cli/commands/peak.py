"""Peak availability command."""

import asyncio
import sys

import cyclopts

from invsearch.application.di import create_container
from invsearch.application.search import InventorySearchService, PeakEnvelope
from invsearch.cli.console import Console
from invsearch.config import Config, configure_logging
from invsearch.domain.shared.error import ConfigurationError, ExternalServiceError
from invsearch.domain.shared.model.envelope import Failure, Success

app = cyclopts.App(name="peak", help="Per-branch availability for a part")


async def fetch_peak(config: Config, part_number: str) -> PeakEnvelope:
    container = create_container(config)
    try:
        service = await container.get(InventorySearchService)
        return await service.peak_availability(part_number)
    finally:
        await container.close()


@app.default
def peak(part_number: str, /) -> None:
    """Show stock per branch for a part number.

    Args:
        part_number: Exact part number to look up.
    """
    console = Console()
    try:
        config = Config()
    except ConfigurationError as e:
        console.error(e.message, hint="Check INVSEARCH_CONFIG_FILE")
        sys.exit(2)
    configure_logging(config.logging)

    if not part_number.strip():
        console.error("Part number is required")
        sys.exit(2)

    try:
        envelope = asyncio.run(fetch_peak(config, part_number))
    except ExternalServiceError as e:
        console.error(e.message, hint=f"API: {config.api.base_url}")
        sys.exit(1)

    match envelope:
        case Success(data=availability):
            console.peak_availability(availability)
        case Failure(message=message):
            console.error(f"Failed to load peak availability: {message or 'Unknown error'}")
            sys.exit(1)
