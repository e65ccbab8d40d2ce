"""
Common response models.

Generic acknowledgement and error schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema (FastAPI HTTPException body)."""

    detail: str = Field(description="Error message")


class SuccessResponse(BaseModel):
    """Acknowledgement for operations without a payload."""

    success: bool = True


class StatusResponse(BaseModel):
    status: str = "ok"
