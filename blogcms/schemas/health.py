from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    version: str = Field(description="API version")
    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current timestamp, UTC+5")
    database: str = Field(description="Connection cache readiness state")
    indexing: str = Field(description="Whether indexing credentials are configured")
    cache: dict[str, Any] | None = Field(default=None, description="Cache health information")
