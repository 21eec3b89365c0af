"""
Shared response envelope pieces.
Every endpoint answers with ``{success, data?, message?}``; errors add ``error``.
"""

from pydantic import BaseModel, Field
from typing import Optional


class MessageResponse(BaseModel):
    """Envelope for endpoints that only report an outcome."""

    success: bool = Field(True, description="Whether the request succeeded")
    message: Optional[str] = Field(None, description="Human-readable outcome")


class PageMeta(BaseModel):
    """Pagination counters shared by list responses."""

    count: int = Field(..., description="Number of items in this page")
    total: int = Field(..., description="Total number of matching items")
    total_pages: int = Field(..., description="ceil(total / limit)")
    current_page: int = Field(..., description="Requested page number")
