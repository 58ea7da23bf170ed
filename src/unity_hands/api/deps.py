from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from unity_hands.db.repositories import ApplicationRepository, EventRepository
from unity_hands.db.session import get_db_session


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_event_repository(db: Session = Depends(get_db)) -> EventRepository:
    return EventRepository(db)


def get_application_repository(
    db: Session = Depends(get_db),
    events: EventRepository = Depends(get_event_repository),
) -> ApplicationRepository:
    return ApplicationRepository(db, events=events)
