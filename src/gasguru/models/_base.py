"""Base model and enum for tracker records.

Every record model inherits from :class:`GuruBaseModel` which provides:

* ``alias_generator=to_camel`` so the camelCase document keys map
  automatically to snake_case fields.
* Frozen instances; cache updates always swap in a new instance.
* :meth:`GuruBaseModel.from_document` / :meth:`GuruBaseModel.to_document`
  for the adapter boundary.

Tag enums inherit from :class:`GuruEnum` which resolves any value without
a mapped member to ``OTHER`` instead of raising ``ValueError``.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import datetime
from typing import Annotated, Any, Self

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from gasguru._normalize import coerce_datetime

GuruTimestamp = Annotated[datetime | None, BeforeValidator(coerce_datetime)]
"""Annotated type that coerces store timestamps, ISO strings and dates to aware datetimes."""


class GuruEnum(enum.StrEnum):
    """Base for tag enums stored as lowercase strings.

    Every subclass **must** define ``OTHER``.
    """

    @classmethod
    def _missing_(cls, value: object) -> GuruEnum:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        # noinspection PyUnresolvedReferences
        # pylint: disable=no-member
        other: GuruEnum = cls.OTHER  # type: ignore[attr-defined]
        return other


class GuruBaseModel(BaseModel):
    """Base for tracker records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def from_document(cls, document_id: str, data: dict[str, Any]) -> Self:
        """Build a record from a decoded document and its identifier."""
        return cls.model_validate({**data, "id": document_id})

    def to_document(self, *, include: Iterable[str] | None = None) -> dict[str, Any]:
        """Return the camelCase write payload without ``id`` and ``None`` values."""
        return self.model_dump(
            by_alias=True,
            exclude={"id"},
            exclude_none=True,
            include=set(include) if include is not None else None,
        )

    def to_snapshot(self) -> dict[str, Any]:
        """JSON-safe camelCase dump used by the local snapshot."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def field_for_key(cls, key: str) -> str | None:
        """Resolve a snake_case field name or camelCase alias to the field name."""
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key or info.serialization_alias == key:
                return name
        return None
