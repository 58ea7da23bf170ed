from __future__ import annotations

import json

from sqlalchemy.orm import Session
from typer.testing import CliRunner

from unity_hands.cli.app import app
from unity_hands.core.tokens import verify_token
from unity_hands.db.base import new_object_id
from unity_hands.db.repositories import ApplicationRepository, EventRepository

runner = CliRunner()


def test_init_reports_tables() -> None:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["ok"] is True
    assert {"events", "application"} <= set(payload["tables"])


def test_token_issue_prints_verifiable_token() -> None:
    result = runner.invoke(app, ["token", "issue", "--email", "a@x.com"])
    assert result.exit_code == 0, result.output
    assert verify_token(result.output.strip()) == "a@x.com"


def test_events_list_filters(db: Session) -> None:
    events = EventRepository(db)
    events.create({"title": "Beach Cleanup", "hr_email": "hr@unity.org", "date": "2026-01-01"})
    events.create({"title": "Food Drive", "hr_email": "hr@unity.org", "date": "2026-01-02"})

    result = runner.invoke(app, ["events", "list", "--search", "beach"])
    assert result.exit_code == 0, result.output
    assert [row["title"] for row in json.loads(result.output)] == ["Beach Cleanup"]


def test_prune_orphans(db: Session) -> None:
    events = EventRepository(db)
    applications = ApplicationRepository(db, events=events)
    live = events.create({"title": "Live"}).inserted_id
    applications.create({"job_id": live, "applicant_email": "a@x.com"})
    applications.create({"job_id": new_object_id(), "applicant_email": "a@x.com"})

    result = runner.invoke(app, ["applications", "prune-orphans"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"removed": 1}
