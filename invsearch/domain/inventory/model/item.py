"""Inventory payloads returned by the API."""

from datetime import datetime

from invsearch.domain.shared.model.value import WireObject


class InventoryItem(WireObject):
    part_number: str
    supplier_sku: str = ""
    description: str = ""
    branch: str = ""
    available_qty: int = 0
    uom: str = ""
    lead_time_days: int = 0
    last_purchase_date: datetime | None = None


class PagedInventory(WireObject):
    """One page of search results plus the unpaged match count."""

    total: int = 0
    items: list[InventoryItem] = []


class BranchAvailability(WireObject):
    branch: str
    qty: int


class PeakAvailability(WireObject):
    """Per-branch stock for a part, branches ordered by quantity descending."""

    part_number: str
    total_available: int = 0
    branches: list[BranchAvailability] = []
