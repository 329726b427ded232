"""Pydantic schemas for the tracker API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TickSummaryResponse(BaseModel):
    """Outcome counts of one roster pass."""

    tick_id: int
    started_at: datetime
    finished_at: Optional[datetime] = None
    players: int
    processed: int
    skipped: int
    failed: int
    interrupted: bool


class CacheStatsResponse(BaseModel):
    """Match dedup cache statistics."""

    size: int
    maxsize: int
    ttl_seconds: float
    hits: int
    misses: int
    hit_rate: float


class TrackerStatusResponse(BaseModel):
    """Schema for tracker status."""

    state: str = Field(..., description="idle, running, halted or stopped")
    backoff_failures: int
    consecutive_failures: int
    next_delay_seconds: float
    ticks_run: int
    dropped_ticks: int
    halt_reason: Optional[str] = None
    last_tick: Optional[TickSummaryResponse] = None
    cache: CacheStatsResponse


class TrackerTriggerResponse(BaseModel):
    """Schema for a manual tick request."""

    success: bool
    message: str
