from __future__ import annotations


class UnauthorizedError(Exception):
    """Missing, malformed, expired or mismatched session token."""


class InvalidIdentifierError(ValueError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid id: {value!r}")
        self.value = value


class EventNotFoundError(ValueError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"event {event_id} not found")
        self.event_id = event_id


class ApplicationConflictError(ValueError):
    def __init__(self, job_id: str, applicant_email: str) -> None:
        super().__init__("You have already joined this event!")
        self.job_id = job_id
        self.applicant_email = applicant_email
