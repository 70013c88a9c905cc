"""
Common data models shared across the application.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names; accepts either spelling on input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorResponse(BaseModel):
    """Error response model returned when an API request fails."""

    status: str = "error"
    message: str
    details: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    version: str
    environment: str


class ReadinessResponse(BaseModel):
    """Response model for readiness check endpoint."""

    ready: bool
    services: Dict[str, bool]
