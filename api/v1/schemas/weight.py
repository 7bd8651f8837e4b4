from __future__ import annotations
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class WeightLogIn(BaseModel):
    # validated in the route so the 400 message matches the other endpoints
    weight_kg: float | None = None
    notes: str | None = None


class WeightLogOut(BaseModel):
    id: int
    user_id: int
    weight_kg: float
    notes: str | None = None
    logged_at: datetime

    model_config = ConfigDict(from_attributes=True)
