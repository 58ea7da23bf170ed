from __future__ import annotations

import logging
import re
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from unity_hands.core.errors import (
    ApplicationConflictError,
    EventNotFoundError,
    InvalidIdentifierError,
)
from unity_hands.db.models import Application, Event
from unity_hands.types import DeleteResult, Document, EventFilter, InsertResult, UpdateResult

logger = logging.getLogger(__name__)

_OBJECT_ID_RE = re.compile(r"^[0-9a-f]{32}$")
_RESERVED_KEYS = ("_id",)


def parse_object_id(value: object) -> str:
    """Normalize a document identity, rejecting anything the store cannot have issued."""
    text = str(value).strip().lower() if value is not None else ""
    if not _OBJECT_ID_RE.match(text):
        raise InvalidIdentifierError(value)
    return text


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def clean_fields(fields: dict[str, Any]) -> Document:
    return {key: value for key, value in fields.items() if key not in _RESERVED_KEYS}


class EventRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_events(self, filters: EventFilter | None = None) -> list[Document]:
        filters = filters or EventFilter()
        statement = select(Event)
        if filters.owner:
            statement = statement.where(Event.hr_email == filters.owner)
        if filters.title_search:
            pattern = f"%{escape_like(filters.title_search)}%"
            statement = statement.where(Event.title.ilike(pattern, escape="\\"))
        statement = statement.order_by(*Event.date_ordering(), Event.created_at.asc())
        return [row.to_document() for row in self.session.scalars(statement).all()]

    def create(self, fields: dict[str, Any]) -> InsertResult:
        event = Event()
        event.apply_document(clean_fields(fields))
        self.session.add(event)
        self.session.commit()
        return InsertResult(inserted_id=event.id)

    def get_row(self, event_id: str) -> Event | None:
        return self.session.get(Event, parse_object_id(event_id))

    def get(self, event_id: str) -> Document | None:
        event = self.get_row(event_id)
        return event.to_document() if event else None

    def update(self, event_id: str, fields: dict[str, Any], *, upsert: bool = False) -> UpdateResult:
        """Merge ``fields`` into the stored event.

        Fields not named in ``fields`` keep their value. When the event does
        not exist it is created under ``event_id`` if ``upsert`` is set,
        otherwise ``EventNotFoundError`` is raised.
        """
        object_id = parse_object_id(event_id)
        changes = clean_fields(fields)
        event = self.session.get(Event, object_id)

        if event is None:
            if not upsert:
                raise EventNotFoundError(object_id)
            event = Event(id=object_id)
            event.apply_document(changes)
            self.session.add(event)
            self.session.commit()
            return UpdateResult(upserted_count=1, upserted_id=object_id)

        merged = {**event.document, **changes}
        modified = merged != event.document
        if modified:
            event.apply_document(merged)
            self.session.commit()
        return UpdateResult(matched_count=1, modified_count=int(modified))

    def delete(self, event_id: str) -> DeleteResult:
        """Delete an event together with every application that references it."""
        object_id = parse_object_id(event_id)
        deleted = self.session.execute(delete(Event).where(Event.id == object_id)).rowcount
        cascaded = self.session.execute(delete(Application).where(Application.job_id == object_id)).rowcount
        self.session.commit()

        logger.info("Deleted event %s (%d) with %d applications", object_id, deleted, cascaded)
        return DeleteResult(deleted_count=deleted)


class ApplicationRepository:
    def __init__(self, session: Session, events: EventRepository | None = None):
        self.session = session
        self.events = events or EventRepository(session)

    def get(self, application_id: str) -> Document | None:
        application = self.session.get(Application, parse_object_id(application_id))
        return application.to_document() if application else None

    def find(self, job_id: str, applicant_email: str) -> Application | None:
        statement = select(Application).where(
            Application.job_id == str(job_id),
            Application.applicant_email == applicant_email,
        )
        return self.session.scalar(statement)

    def list_for_event(self, job_id: str) -> list[Document]:
        statement = (
            select(Application)
            .where(Application.job_id == str(job_id))
            .order_by(Application.created_at.asc())
        )
        return [row.to_document() for row in self.session.scalars(statement).all()]

    def list_for_applicant(self, applicant_email: str) -> list[Document | None]:
        """Resolve an applicant's applications into the events they point at.

        Order follows the applications' ``date``. An application whose event
        is gone, or whose ``job_id`` is not an event identity, yields ``None``
        at its position.
        """
        statement = (
            select(Application)
            .where(Application.applicant_email == applicant_email)
            .order_by(*Application.date_ordering(), Application.created_at.asc())
        )
        applications = self.session.scalars(statement).all()

        resolved: list[Document | None] = []
        for application in applications:
            try:
                resolved.append(self.events.get(application.job_id))
            except InvalidIdentifierError:
                resolved.append(None)
        return resolved

    def create(self, fields: dict[str, Any]) -> InsertResult:
        document = clean_fields(fields)
        job_id = document.get("job_id")
        applicant_email = document.get("applicant_email")
        if not job_id or not applicant_email:
            raise ValueError("job_id and applicant_email are required")
        document["job_id"] = str(job_id)

        if self.find(document["job_id"], applicant_email) is not None:
            logger.info("Rejected duplicate application by %s for %s", applicant_email, job_id)
            raise ApplicationConflictError(document["job_id"], applicant_email)

        application = Application()
        application.apply_document(document)
        self.session.add(application)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # A concurrent request inserted the same pair after the lookup above.
            self.session.rollback()
            raise ApplicationConflictError(document["job_id"], applicant_email) from exc
        return InsertResult(inserted_id=application.id)

    def delete_one_by_event(self, job_id: str, applicant_email: str | None = None) -> DeleteResult:
        statement = select(Application).where(Application.job_id == str(job_id))
        if applicant_email is not None:
            statement = statement.where(Application.applicant_email == applicant_email)
        application = self.session.scalar(statement.order_by(Application.created_at.asc()).limit(1))
        if application is None:
            return DeleteResult(deleted_count=0)

        self.session.delete(application)
        self.session.commit()
        return DeleteResult(deleted_count=1)

    def delete(self, application_id: str) -> DeleteResult:
        object_id = parse_object_id(application_id)
        deleted = self.session.execute(delete(Application).where(Application.id == object_id)).rowcount
        self.session.commit()
        return DeleteResult(deleted_count=deleted)

    def delete_orphans(self) -> int:
        """Remove applications whose event no longer exists."""
        orphaned = select(Application.id).where(Application.job_id.not_in(select(Event.id)))
        ids = list(self.session.scalars(orphaned).all())
        if not ids:
            return 0
        self.session.execute(delete(Application).where(Application.id.in_(ids)))
        self.session.commit()
        logger.warning("Removed %d orphaned applications", len(ids))
        return len(ids)
