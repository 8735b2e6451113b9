from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )
    service: str = Field(examples=["POD Tracker API"])
    timestamp: datetime = Field(description="Server time (UTC).")
    environment: str = Field(examples=["production"])


class ErrorOut(BaseModel):
    """Error response body shared by every failure."""

    error: str = Field(
        description="Error kind, e.g. MissingRequiredField, NotFound, InternalFailure.",
        examples=["NotFound"],
    )
    detail: str = Field(examples=["Patient not found"])
