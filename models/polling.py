from __future__ import annotations

from pydantic import BaseModel, StrictBool


class PollingChange(BaseModel):
    enabled: StrictBool
