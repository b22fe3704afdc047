"""Schemas para endpoints de health."""
from typing import Optional
from pydantic import BaseModel


class PingOut(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool
    mongo: bool
    mongo_error: Optional[str] = None
