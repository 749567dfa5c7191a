"""Tagged field values for partial updates.

A PATCH body distinguishes three cases per attribute: the key was omitted
(``Unchanged``), sent with a value (``SetTo``), or sent as ``null``
(``Cleared``). Pydantic records which keys were present in
``model_fields_set``; ``fields_from_model`` turns that into tagged values so
handlers never have to guess from ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")


@dataclass(frozen=True)
class Unchanged:
    """The field was not part of the request."""


@dataclass(frozen=True)
class Cleared:
    """The field was explicitly sent as null."""


@dataclass(frozen=True)
class SetTo(Generic[T]):
    """The field was sent with a concrete value."""

    value: T


Patch = Union[Unchanged, Cleared, SetTo[Any]]

UNCHANGED = Unchanged()
CLEARED = Cleared()


def fields_from_model(model: BaseModel) -> dict[str, Patch]:
    """Return a tagged value for every declared field of ``model``."""
    patch: dict[str, Patch] = {}
    for name in type(model).model_fields:
        if name not in model.model_fields_set:
            patch[name] = UNCHANGED
            continue
        value = getattr(model, name)
        patch[name] = CLEARED if value is None else SetTo(value)
    return patch
