"""Data models for the link store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Any, Mapping


@dataclass
class Link:
    """A persisted code -> target URL binding with usage metadata."""
    
    code: str
    target_url: str
    created_at: datetime
    clicks: int = 0
    last_accessed: Optional[datetime] = None
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "target_url": self.target_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "clicks": self.clicks,
            "last_accessed": self.last_accessed.isoformat() if self.last_accessed else None,
        }
    
    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Link":
        """Create from a database row or dictionary."""
        created_at = record["created_at"]
        if not isinstance(created_at, datetime):
            created_at = datetime.fromisoformat(created_at)
        last_accessed = record.get("last_accessed")
        if last_accessed is not None and not isinstance(last_accessed, datetime):
            last_accessed = datetime.fromisoformat(last_accessed)
        return cls(
            code=record["code"],
            target_url=record["target_url"],
            created_at=created_at,
            clicks=record.get("clicks") or 0,
            last_accessed=last_accessed,
        )
