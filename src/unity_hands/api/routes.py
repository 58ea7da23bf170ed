from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from unity_hands.api.deps import get_application_repository, get_event_repository
from unity_hands.api.guards import require_auth, require_matching_subject, require_owner_listing_subject
from unity_hands.api.schemas import ApplicationCreateRequest
from unity_hands.config import get_settings
from unity_hands.core.errors import ApplicationConflictError, EventNotFoundError
from unity_hands.db.repositories import ApplicationRepository, EventRepository
from unity_hands.types import DeleteResult, EventFilter, InsertResult, UpdateResult

router = APIRouter()


@router.get("/events", tags=["events"])
def list_events(
    user: str | None = Depends(require_owner_listing_subject),
    search_event: str | None = Query(default=None, alias="searchEvent"),
    events: EventRepository = Depends(get_event_repository),
) -> list[dict[str, Any]]:
    return events.list_events(EventFilter(owner=user or None, title_search=search_event or None))


@router.post("/events", response_model=InsertResult, tags=["events"])
def create_event(
    payload: dict[str, Any] = Body(...),
    _: str = Depends(require_auth),
    events: EventRepository = Depends(get_event_repository),
) -> InsertResult:
    return events.create(payload)


@router.get("/events/{event_id}", tags=["events"])
def get_event(event_id: str, events: EventRepository = Depends(get_event_repository)) -> dict[str, Any] | None:
    return events.get(event_id)


@router.patch("/events/{event_id}", response_model=UpdateResult, tags=["events"])
def update_event(
    event_id: str,
    payload: dict[str, Any] = Body(...),
    upsert: bool | None = Query(default=None),
    _: str = Depends(require_auth),
    events: EventRepository = Depends(get_event_repository),
) -> UpdateResult:
    if upsert is None:
        upsert = get_settings().events_patch_upsert
    try:
        return events.update(event_id, payload, upsert=upsert)
    except EventNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.delete("/events/{event_id}", response_model=DeleteResult, tags=["events"])
def delete_event(
    event_id: str,
    _: str = Depends(require_auth),
    events: EventRepository = Depends(get_event_repository),
) -> DeleteResult:
    return events.delete(event_id)


@router.get("/application", tags=["applications"])
def list_applied_events(
    _: str = Depends(require_auth),
    user: str | None = Depends(require_matching_subject),
    applications: ApplicationRepository = Depends(get_application_repository),
) -> list[dict[str, Any] | None]:
    if not user:
        return []
    return applications.list_for_applicant(user)


@router.get("/application/{job_id}", tags=["applications"])
def list_event_applications(
    job_id: str,
    _: str = Depends(require_auth),
    applications: ApplicationRepository = Depends(get_application_repository),
) -> list[dict[str, Any]]:
    return applications.list_for_event(job_id)


@router.post("/application", response_model=InsertResult, tags=["applications"])
def create_application(
    payload: ApplicationCreateRequest,
    _: str = Depends(require_auth),
    applications: ApplicationRepository = Depends(get_application_repository),
) -> InsertResult:
    try:
        return applications.create(payload.model_dump())
    except ApplicationConflictError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.delete("/application/{job_id}", response_model=DeleteResult, tags=["applications"])
def withdraw_application(
    job_id: str,
    subject: str = Depends(require_auth),
    applications: ApplicationRepository = Depends(get_application_repository),
) -> DeleteResult:
    return applications.delete_one_by_event(job_id, applicant_email=subject)


@router.delete("/participant/{application_id}", response_model=DeleteResult, tags=["applications"])
def remove_participant(
    application_id: str,
    _: str = Depends(require_auth),
    applications: ApplicationRepository = Depends(get_application_repository),
) -> DeleteResult:
    return applications.delete(application_id)
