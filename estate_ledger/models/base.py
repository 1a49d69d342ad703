"""Base models shared across the ledger and analytics."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """Envelope published for every ledger mutation."""

    event_id: str
    event_type: str  # entity.action (e.g., agency_transaction.created)
    event_time: datetime
    source: str
    subject: str  # Transaction ID affected
    data: dict
    metadata: dict = field(default_factory=dict)
