"""Pydantic models for HTTP API requests and responses."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class SaveRequest(BaseModel):
    """POST /api/save payload.

    Example:
        {
            "configType": "properties",
            "data": {"mqtt.broker": "10.0.0.5", "mqtt.port": "1884"}
        }
    """

    configType: Literal["devices", "properties"] = Field(
        ..., description="Which document to save"
    )
    data: dict[str, Any] = Field(..., description="Document or property map")


class SuccessResponse(BaseModel):
    """Returned by every successful write."""

    success: bool = Field(default=True)
    message: str = Field(..., description="Human-readable result")


class ErrorResponse(BaseModel):
    """Returned on any failure; never includes a traceback."""

    success: bool = Field(default=False)
    error: str = Field(..., description="Underlying cause message")
    field: Optional[str] = Field(None, description="Rejected field for validation failures")
