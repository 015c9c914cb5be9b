"""
AccessLog - Response Schemas
==============================

What:  Pydantic models for the demo application's JSON responses.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="Overall service status")
    version: str = Field(description="Package version")
    access_log_format: str = Field(description="Active access log preset")
    uptime_seconds: float = Field(description="Seconds since the process loaded the routes")
