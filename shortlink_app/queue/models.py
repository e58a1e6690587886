"""
Data models for queue messages.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shortlink_app.models.entry import as_utc, utc_now


class LinkAccessEvent(BaseModel):
    """
    Event model for link usage tracking.

    Published once per redirect and applied to the alias metadata
    by the merge worker.
    """

    alias: str = Field(..., description="The alias that was accessed")
    timestamp: datetime = Field(default_factory=utc_now, description="When the redirect happened")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "alias": "Ab3_",
                "timestamp": "2025-10-29T10:30:00Z",
            }
        }
    )

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
