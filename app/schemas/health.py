"""Schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness plus store reachability; 'degraded' when the database cannot be queried."""

    status: Literal["ok", "degraded"] = Field(description="Service status")
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"] = Field(description="Credential store connectivity")
