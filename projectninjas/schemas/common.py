"""
Common schema types used across the API.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input and serialises as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    message: str
    request_id: Optional[str] = None
    errors: Optional[List[Any]] = None


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = "ok"
    version: str
    database: str = "connected"
