"""Models shared by several API modules."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Liveness report of the registry service."""

    status: Literal["ok"] = Field(default="ok")
    version: str = Field(..., description="Service version")
    provider: str = Field(..., description="Registry store provider (local, aws)")
