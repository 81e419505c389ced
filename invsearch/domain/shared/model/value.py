from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)


class WireObject(ValueObject):
    """Value object whose JSON field names are camelCase (as the inventory API sends them)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
