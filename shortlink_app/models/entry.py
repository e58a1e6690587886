from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class EntryMetadata(BaseModel):
    """
    Usage statistics for an alias.

    `used` and `last_used` are only changed by the merge worker,
    `created` never changes after the entry is made.
    """
    used: int = Field(0, ge=0, description="Number of redirects served")
    last_used: datetime = Field(default_factory=utc_now, description="Most recent redirect")
    created: datetime = Field(default_factory=utc_now, description="When the alias was added")

    @field_validator("last_used", "created")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class Entry(BaseModel):
    """
    Stored link for an alias.

    Created when an alias is added and destroyed when it is removed.
    """
    link: str = Field(..., description="Target URL")
    metadata: EntryMetadata = Field(default_factory=EntryMetadata)

    @classmethod
    def new(cls, link: str, now: Optional[datetime] = None) -> "Entry":
        """Fresh entry with used=0 and created == last_used == now"""
        now = now or utc_now()
        return cls(link=link, metadata=EntryMetadata(used=0, last_used=now, created=now))
