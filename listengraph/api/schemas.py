"""Pydantic response schemas for the listengraph API.

The network endpoint returns ``Graph.to_payload()`` directly; the models
here cover errors and the health check.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Sanitised error body returned for 4xx/5xx responses."""

    error: str
    detail: str


class HealthResponse(BaseModel):
    """Liveness check plus the names of the wired collaborators."""

    status: str = "ok"
    version: str
    providers: dict[str, str] = Field(default_factory=dict)
