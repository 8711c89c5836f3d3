"""
Common API schemas.
"""

from pydantic import BaseModel
from typing import Optional


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str


class PageViewResponse(BaseModel):
    """Page-view counter value."""

    count: Optional[int] = None
