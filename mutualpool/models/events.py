# mutualpool/models/events.py
"""Ledger events."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List

from mutualpool.models.enums import EventType


class LedgerEvent(BaseModel):
    """Event entry, published once the emitting operation commits."""
    sequence: int
    event_type: EventType
    timestamp: int
    actor: str
    data: Dict[str, Any] = Field(default_factory=dict)


class EventListResponse(BaseModel):
    total: int
    events: List[LedgerEvent] = Field(default_factory=list)
