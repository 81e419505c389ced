"""HTTP adapter for the InventoryFetcher port."""

import logging
from typing import Any, TypeVar

import httpx
import logfire
from pydantic import ValidationError

from invsearch.domain.inventory.model import PagedInventory, PeakAvailability, SearchQuery
from invsearch.domain.inventory.port.fetcher import InventoryFetcher
from invsearch.domain.shared.error import ExternalServiceError
from invsearch.domain.shared.model.envelope import Failure, Success, parse_envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

SEARCH_PATH = "/inventory/search"
PEAK_AVAILABILITY_PATH = "/inventory/availability/peak"


def search_params(query: SearchQuery) -> dict[str, str]:
    """Translate a query into request parameters; optional ones only when set."""
    params = {
        "criteria": query.criteria,
        "by": str(query.by),
        "page": str(query.page),
        "size": str(query.size),
        "onlyAvailable": "true" if query.only_available else "false",
    }
    if query.sort is not None:
        params["sort"] = str(query.sort)
    if query.branches:
        params["branches"] = ",".join(query.branches)
    return params


class HttpInventoryFetcher(InventoryFetcher):
    """Calls the inventory API with httpx.

    The client is expected to carry the API base URL; paths are relative.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def search(self, query: SearchQuery) -> Success[PagedInventory] | Failure:
        with logfire.span("inventory search {by}", by=str(query.by), page=query.page):
            return await self._get(SEARCH_PATH, search_params(query), PagedInventory)

    async def peak_availability(self, part_number: str) -> Success[PeakAvailability] | Failure:
        with logfire.span("inventory peak availability {part_number}", part_number=part_number):
            return await self._get(
                PEAK_AVAILABILITY_PATH, {"partNumber": part_number}, PeakAvailability
            )

    async def _get(
        self, path: str, params: dict[str, str], data_type: type[T]
    ) -> Success[T] | Failure:
        try:
            response = await self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise ExternalServiceError(f"Request to {path} timed out") from e
        except httpx.TransportError as e:
            raise ExternalServiceError(f"Could not reach inventory API: {e}") from e

        body = self._decode(response)
        if body is not None:
            try:
                return parse_envelope(body, data_type)
            except ValidationError as e:
                if response.is_success:
                    raise ExternalServiceError(
                        f"Malformed response from {path}", status_code=response.status_code
                    ) from e
                logger.debug("Error body from %s is not an envelope", path)

        if response.is_success:
            raise ExternalServiceError(
                f"Response from {path} was not JSON", status_code=response.status_code
            )
        raise ExternalServiceError(
            f"Inventory API returned HTTP {response.status_code}",
            status_code=response.status_code,
        )

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None
