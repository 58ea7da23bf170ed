from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Float, String, UniqueConstraint, case
from sqlalchemy.orm import Mapped, mapped_column

from unity_hands.db.base import Base, TimestampMixin, new_object_id

# Mirrored out of the JSON document so they can be filtered, sorted and indexed.
EVENT_INDEXED_FIELDS = ("hr_email", "title", "date")
APPLICATION_INDEXED_FIELDS = ("job_id", "applicant_email", "date")


def _column_value(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _numeric_value(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


class DatedDocument:
    """Keeps a numeric copy of ``date`` so numbers sort by value, ahead of strings."""

    date_number: Mapped[float | None] = mapped_column(Float, nullable=True)

    def _mirror_date(self, document: dict[str, Any]) -> None:
        self.date_number = _numeric_value(document.get("date"))

    @classmethod
    def date_ordering(cls) -> tuple:
        # missing dates first, then numbers, then strings
        rank = case((cls.date.is_(None), 0), (cls.date_number.is_not(None), 1), else_=2)
        return rank.asc(), cls.date_number.asc(), cls.date.asc()


class Event(DatedDocument, TimestampMixin, Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_object_id)
    hr_email: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    date: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    def apply_document(self, document: dict[str, Any]) -> None:
        self.document = document
        for field in EVENT_INDEXED_FIELDS:
            setattr(self, field, _column_value(document.get(field)))
        self._mirror_date(document)

    def to_document(self) -> dict[str, Any]:
        return {"_id": self.id, **self.document}


class Application(DatedDocument, TimestampMixin, Base):
    __tablename__ = "application"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_email", name="uq_application_job_applicant"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_object_id)
    job_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    applicant_email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    document: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    def apply_document(self, document: dict[str, Any]) -> None:
        self.document = document
        for field in APPLICATION_INDEXED_FIELDS:
            setattr(self, field, _column_value(document.get(field)))
        self._mirror_date(document)

    def to_document(self) -> dict[str, Any]:
        return {"_id": self.id, **self.document}
