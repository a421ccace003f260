# apps/notification/domain_events.py
from dataclasses import dataclass, field
from typing import Any, Dict
from uuid import uuid4

from django.utils import timezone


@dataclass
class DomainEvent:
    """
    Represents a lightweight domain event emitted by the training engine.
    """
    event_type: str             # e.g., 'answer_graded', 'mini_question_released'
    payload: Dict[str, Any]     # event-specific data, JSON-serialisable
    timestamp: str = field(default_factory=lambda: timezone.now().isoformat())
    id: str = field(default_factory=lambda: str(uuid4()))

    def to_dict(self):
        return {
            "event_type": self.event_type,
            "payload": self.payload,
            "timestamp": self.timestamp,
            "id": self.id,
        }
