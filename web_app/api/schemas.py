"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CreateLinkRequest(BaseModel):
    """Request to create a link."""
    
    # Format rules live in the core so they answer 400, not 422
    target_url: str = Field(..., description="The URL to redirect to")
    code: Optional[str] = Field(None, description="Optional custom code (6-8 letters or digits)")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "target_url": "https://example.com/very/long/path/to/resource",
                    "code": None
                },
                {
                    "target_url": "https://github.com/user/repo",
                    "code": "myrepo1"
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A link with its usage counters."""
    
    code: str = Field(..., description="The link code")
    short_url: str = Field(..., description="The complete short URL")
    target_url: str = Field(..., description="The URL the code redirects to")
    clicks: int = Field(..., description="Number of redirects served")
    last_accessed: Optional[datetime] = Field(None, description="Time of the latest redirect")
    created_at: datetime = Field(..., description="Creation timestamp")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "aB3dE9",
                    "short_url": "https://short.link/aB3dE9",
                    "target_url": "https://example.com/very/long/path",
                    "clicks": 0,
                    "last_accessed": None,
                    "created_at": "2024-01-01T12:00:00Z"
                }
            ]
        }
    }


class DeleteResponse(BaseModel):
    """Confirmation of a deleted link."""
    
    message: str


class HealthResponse(BaseModel):
    """Health check response."""
    
    ok: bool = Field(..., description="Overall status")
    version: str
    uptime: float = Field(..., description="Seconds since the app was created")
    database: str = Field(..., description="Database status")
    cache: str = Field(..., description="Cache status")
    missed_visits: int = Field(..., description="Visits whose counter update was dropped")


class ErrorResponse(BaseModel):
    """Error response."""
    
    detail: str = Field(..., description="Error message")
