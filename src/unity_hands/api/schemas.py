from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class TokenRequest(BaseModel):
    email: str


class SuccessResponse(BaseModel):
    success: bool = True


class ApplicationCreateRequest(BaseModel):
    """Application body; fields beyond the named ones are stored as submitted."""

    model_config = ConfigDict(extra="allow")

    job_id: str | int
    applicant_email: str
