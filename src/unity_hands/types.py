from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

Document = dict[str, Any]


class EventFilter(BaseModel):
    """Options for listing events.

    ``owner`` is an exact match on ``hr_email``. ``title_search`` is a
    case-insensitive substring match on ``title``. Unset options do not
    constrain the listing.
    """

    owner: str | None = None
    title_search: str | None = None


class WriteResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    acknowledged: bool = True


class InsertResult(WriteResult):
    inserted_id: str


class UpdateResult(WriteResult):
    matched_count: int = 0
    modified_count: int = 0
    upserted_count: int = 0
    upserted_id: str | None = None


class DeleteResult(WriteResult):
    deleted_count: int = 0
