from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MonitorPayload(BaseModel):
    """Body of GET /monitor/services. Records stay raw; each is read leniently later."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    services: dict[str, Any]
    total_services: Optional[int] = Field(default=None, alias="totalServices")
    timestamp: Optional[str] = None

    @field_validator("total_services", mode="before")
    @classmethod
    def validate_total(cls, value: Any) -> Optional[int]:
        # Informational only; a garbled count must not fail the whole fetch.
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            return None
        return value

    @field_validator("timestamp", mode="before")
    @classmethod
    def validate_timestamp(cls, value: Any) -> Optional[str]:
        return value if isinstance(value, str) else None
