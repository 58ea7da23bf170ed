from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from unity_hands.core.errors import ApplicationConflictError, InvalidIdentifierError
from unity_hands.db.base import new_object_id
from unity_hands.db.models import Application
from unity_hands.db.repositories import ApplicationRepository, EventRepository


def _count_applications(db: Session) -> int:
    return db.scalar(select(func.count()).select_from(Application))


def test_second_application_for_same_pair_conflicts(db: Session) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": "e1", "applicant_email": "a@x.com", "name": "A"})

    with pytest.raises(ApplicationConflictError) as excinfo:
        applications.create({"job_id": "e1", "applicant_email": "a@x.com", "name": "A again"})

    assert "already" in str(excinfo.value)
    assert _count_applications(db) == 1
    assert applications.list_for_event("e1")[0]["name"] == "A"


def test_same_applicant_can_join_different_events(db: Session) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": "e1", "applicant_email": "a@x.com"})
    applications.create({"job_id": "e2", "applicant_email": "a@x.com"})
    applications.create({"job_id": "e1", "applicant_email": "b@x.com"})

    assert _count_applications(db) == 3


def test_unique_constraint_backs_up_the_existence_check(db: Session, monkeypatch: pytest.MonkeyPatch) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": "e1", "applicant_email": "a@x.com"})

    # Simulate a concurrent request that passed the lookup before the first insert committed.
    monkeypatch.setattr(applications, "find", lambda job_id, applicant_email: None)
    with pytest.raises(ApplicationConflictError):
        applications.create({"job_id": "e1", "applicant_email": "a@x.com"})

    assert _count_applications(db) == 1


def test_job_id_is_stored_as_string(db: Session) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": 42, "applicant_email": "a@x.com"})

    (row,) = applications.list_for_event("42")
    assert row["job_id"] == "42"


def test_missing_required_fields_are_rejected(db: Session) -> None:
    with pytest.raises(ValueError):
        ApplicationRepository(db).create({"job_id": "e1"})


def test_list_for_applicant_resolves_events_in_application_date_order(db: Session) -> None:
    events = EventRepository(db)
    applications = ApplicationRepository(db, events=events)
    first = events.create({"title": "First", "date": "2026-09-01"}).inserted_id
    second = events.create({"title": "Second", "date": "2026-01-01"}).inserted_id
    third = events.create({"title": "Third", "date": "2026-05-01"}).inserted_id

    applications.create({"job_id": third, "applicant_email": "a@x.com", "date": "2026-03-03"})
    applications.create({"job_id": first, "applicant_email": "a@x.com", "date": "2026-03-01"})
    applications.create({"job_id": second, "applicant_email": "a@x.com", "date": "2026-03-02"})
    applications.create({"job_id": second, "applicant_email": "someone@x.com", "date": "2026-01-01"})

    resolved = applications.list_for_applicant("a@x.com")
    assert [event["title"] for event in resolved] == ["First", "Second", "Third"]
    assert resolved[0] == {"_id": first, "title": "First", "date": "2026-09-01"}


def test_list_for_applicant_orders_numeric_application_dates_by_value(db: Session) -> None:
    events = EventRepository(db)
    applications = ApplicationRepository(db, events=events)
    for title, applied_on in [("ten", 10), ("hundred", 100), ("nine", 9)]:
        event_id = events.create({"title": title}).inserted_id
        applications.create({"job_id": event_id, "applicant_email": "a@x.com", "date": applied_on})

    assert [event["title"] for event in applications.list_for_applicant("a@x.com")] == ["nine", "ten", "hundred"]


def test_list_for_applicant_passes_missing_events_through_as_none(db: Session) -> None:
    events = EventRepository(db)
    applications = ApplicationRepository(db, events=events)
    kept = events.create({"title": "Kept"}).inserted_id

    applications.create({"job_id": new_object_id(), "applicant_email": "a@x.com", "date": "2026-01-01"})
    applications.create({"job_id": kept, "applicant_email": "a@x.com", "date": "2026-01-02"})
    applications.create({"job_id": "legacy-id", "applicant_email": "a@x.com", "date": "2026-01-03"})

    resolved = applications.list_for_applicant("a@x.com")
    assert resolved[0] is None
    assert resolved[1]["title"] == "Kept"
    assert resolved[2] is None


def test_delete_one_by_event_removes_a_single_application(db: Session) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": "e1", "applicant_email": "a@x.com"})
    applications.create({"job_id": "e1", "applicant_email": "b@x.com"})

    assert applications.delete_one_by_event("e1").deleted_count == 1
    assert len(applications.list_for_event("e1")) == 1


def test_delete_one_by_event_scoped_to_applicant(db: Session) -> None:
    applications = ApplicationRepository(db)
    applications.create({"job_id": "e1", "applicant_email": "a@x.com"})
    applications.create({"job_id": "e1", "applicant_email": "b@x.com"})

    assert applications.delete_one_by_event("e1", applicant_email="b@x.com").deleted_count == 1
    assert [row["applicant_email"] for row in applications.list_for_event("e1")] == ["a@x.com"]
    assert applications.delete_one_by_event("e1", applicant_email="c@x.com").deleted_count == 0


def test_delete_by_application_id(db: Session) -> None:
    applications = ApplicationRepository(db)
    keep = applications.create({"job_id": "e1", "applicant_email": "a@x.com"}).inserted_id
    drop = applications.create({"job_id": "e1", "applicant_email": "b@x.com"}).inserted_id

    assert applications.delete(drop).deleted_count == 1
    assert applications.delete(drop).deleted_count == 0
    assert applications.get(keep) is not None
    assert applications.get(drop) is None


def test_delete_by_malformed_application_id_raises(db: Session) -> None:
    with pytest.raises(InvalidIdentifierError):
        ApplicationRepository(db).delete("e1")


def test_delete_orphans_removes_only_dangling_applications(db: Session) -> None:
    events = EventRepository(db)
    applications = ApplicationRepository(db, events=events)
    live = events.create({"title": "Live"}).inserted_id
    applications.create({"job_id": live, "applicant_email": "a@x.com"})
    applications.create({"job_id": new_object_id(), "applicant_email": "a@x.com"})
    applications.create({"job_id": "gone", "applicant_email": "b@x.com"})

    assert applications.delete_orphans() == 2
    assert applications.delete_orphans() == 0
    assert _count_applications(db) == 1
