"""Search query value objects."""

from enum import StrEnum

from pydantic import Field, field_validator

from invsearch.domain.shared.model.value import ValueObject

DEFAULT_PAGE_SIZE = 20

# Reserved for cache-key composition; never valid inside field values.
KEY_DELIMITER = "|"
BRANCH_DELIMITER = ","


class SearchBy(StrEnum):
    """Item field the free-text criteria is matched against."""

    PART_NUMBER = "partNumber"
    SUPPLIER_SKU = "supplierSku"
    DESCRIPTION = "description"


class SortableField(StrEnum):
    """Result columns the API can order by."""

    PART_NUMBER = "partNumber"
    SUPPLIER_SKU = "supplierSku"
    DESCRIPTION = "description"
    BRANCH = "branch"
    AVAILABLE_QTY = "availableQty"
    UOM = "uom"
    LEAD_TIME_DAYS = "leadTimeDays"
    LAST_PURCHASE_DATE = "lastPurchaseDate"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class SortSpec(ValueObject):
    """Column + direction, rendered on the wire as ``field:direction``."""

    field: SortableField
    direction: SortDirection = SortDirection.ASC

    def __str__(self) -> str:
        return f"{self.field}:{self.direction}"

    @classmethod
    def parse(cls, value: str) -> "SortSpec":
        """Parse ``field[:direction]`` (e.g. ``availableQty:desc``)."""
        field, _, direction = value.partition(":")
        return cls(field=SortableField(field), direction=SortDirection(direction or "asc"))

    def toggled(self, field: SortableField) -> "SortSpec":
        """Sort selected by clicking ``field`` while this sort is active.

        The same field flips asc/desc; any other field starts ascending.
        """
        if field == self.field:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortSpec(field=field, direction=flipped)
        return SortSpec(field=field, direction=SortDirection.ASC)


class SearchQuery(ValueObject):
    """Immutable description of one search request."""

    criteria: str = ""
    by: SearchBy = SearchBy.PART_NUMBER
    branches: tuple[str, ...] = ()  # selection order matters, duplicates kept
    only_available: bool = False
    page: int = Field(default=0, ge=0)
    size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    sort: SortSpec | None = None

    @field_validator("criteria")
    @classmethod
    def _criteria_has_no_delimiter(cls, value: str) -> str:
        if KEY_DELIMITER in value:
            raise ValueError(f"criteria may not contain {KEY_DELIMITER!r}")
        return value

    @field_validator("branches")
    @classmethod
    def _branches_have_no_delimiters(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        for branch in value:
            if KEY_DELIMITER in branch or BRANCH_DELIMITER in branch:
                raise ValueError(
                    f"branch codes may not contain {KEY_DELIMITER!r} or {BRANCH_DELIMITER!r}"
                )
        return value
