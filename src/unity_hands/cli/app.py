from __future__ import annotations

import json

import typer
import uvicorn

from unity_hands.api.app import create_app
from unity_hands.config import get_settings
from unity_hands.core.tokens import issue_token
from unity_hands.db.init import init_database
from unity_hands.db.repositories import ApplicationRepository, EventRepository
from unity_hands.db.session import SessionLocal
from unity_hands.logging_config import configure_logging
from unity_hands.types import EventFilter

app = typer.Typer(help="Unity Hands CLI")
token_app = typer.Typer(help="Session tokens")
events_app = typer.Typer(help="Event listings")
applications_app = typer.Typer(help="Application maintenance")

app.add_typer(token_app, name="token")
app.add_typer(events_app, name="events")
app.add_typer(applications_app, name="applications")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


@app.command("init")
def init_cmd() -> None:
    """Initialize the data directory and database tables."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@token_app.command("issue")
def token_issue(email: str = typer.Option(..., "--email")) -> None:
    """Print a session token for local testing against the API."""
    configure_logging()
    typer.echo(issue_token(email))


@events_app.command("list")
def events_list(
    user: str | None = typer.Option(None, "--user"),
    search: str | None = typer.Option(None, "--search"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        events = EventRepository(db).list_events(EventFilter(owner=user, title_search=search))
        typer.echo(json.dumps(events, indent=2, default=str))


@applications_app.command("prune-orphans")
def applications_prune_orphans() -> None:
    """Delete applications that point at events which no longer exist."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        removed = ApplicationRepository(db).delete_orphans()
        typer.echo(json.dumps({"removed": removed}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


if __name__ == "__main__":
    app()
