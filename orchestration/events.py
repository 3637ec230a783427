"""Orchestration events - Event, EventMetadata."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class EventMetadata:
    """Metadata for an event."""

    execution_id: str
    workflow_name: str
    timestamp: datetime


@dataclass
class Event:
    """Something that happened during a workflow run."""

    name: str
    payload: dict[str, object]
    metadata: EventMetadata
