"""Editable search form backing the pipeline's queries."""

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from invsearch.domain.inventory.model import SearchBy, SearchQuery, SortSpec


class SearchForm(BaseModel):
    """Mutable form state. The pipeline reads it when a trigger is dispatched."""

    model_config = ConfigDict(validate_assignment=True)

    criteria: str = ""
    by: SearchBy = SearchBy.PART_NUMBER
    branches: list[str] = []
    only_available: bool = False

    def is_valid(self) -> bool:
        """Criteria is required; reserved characters make the form invalid too."""
        if not self.criteria.strip():
            return False
        try:
            self.to_query(page=0, size=1, sort=None)
        except PydanticValidationError:
            return False
        return True

    def to_query(self, page: int, size: int, sort: SortSpec | None) -> SearchQuery:
        return SearchQuery(
            criteria=self.criteria,
            by=self.by,
            branches=tuple(self.branches),
            only_available=self.only_available,
            page=page,
            size=size,
            sort=sort,
        )
