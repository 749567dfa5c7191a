"""Shared Pydantic schema configuration."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema whose wire names are camelCase.

    Python code uses snake_case attribute names; either spelling is accepted
    on input and responses are serialized by alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
