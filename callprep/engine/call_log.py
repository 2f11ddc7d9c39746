"""Call log recorder interface.

The call log store lives outside CallPrep. This module defines the record
handed to it and the interface it implements, plus an in-memory recorder
used by the CLI and tests.

Usage:
    from callprep.engine.call_log import InMemoryCallLog

    log = InMemoryCallLog()
    service.record_attempt(response, request, log)
    recent = log.query(contact_substring="acme", start=datetime(2026, 10, 1))
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from callprep.core.exceptions import ValidationError
from callprep.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CallAttempt:
    """A call intent handed to the call log.

    Attributes:
        call_id: Id from the prepared call
        user_id: User who clicked call
        contact_name: Contact being called (may be empty)
        phone_number: Display form of the number
        outcome: "initiated" at preparation time; updated by the store later
        timestamp: When the call was prepared
        direction: Always "outbound" for prepared calls
        notes: Free text
    """

    call_id: str
    user_id: int
    contact_name: str
    phone_number: str
    outcome: str = "initiated"
    timestamp: datetime = field(default_factory=datetime.now)
    direction: str = "outbound"
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "callId": self.call_id,
            "userId": self.user_id,
            "contactName": self.contact_name,
            "phoneNumber": self.phone_number,
            "outcome": self.outcome,
            "timestamp": self.timestamp.isoformat(),
            "direction": self.direction,
            "notes": self.notes,
        }


class CallLogRecorder(ABC):
    """Interface of the external call log store."""

    @abstractmethod
    def record(self, attempt: CallAttempt) -> None:
        """Store a call attempt."""
        pass

    @abstractmethod
    def query(
        self,
        contact_substring: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[CallAttempt]:
        """Find attempts by contact name substring and date range.

        Args:
            contact_substring: Case-insensitive match on contact_name
            start: Inclusive lower bound on timestamp
            end: Inclusive upper bound on timestamp

        Returns:
            Matching attempts, oldest first

        Raises:
            ValidationError: If start is after end
        """
        pass


class InMemoryCallLog(CallLogRecorder):
    """Process-local call log. Contents are lost on exit."""

    def __init__(self) -> None:
        self._attempts: list[CallAttempt] = []

    def __len__(self) -> int:
        return len(self._attempts)

    def record(self, attempt: CallAttempt) -> None:
        self._attempts.append(attempt)
        logger.debug(
            "Call attempt recorded",
            extra={"context": {"call_id": attempt.call_id, "user_id": attempt.user_id}},
        )

    def query(
        self,
        contact_substring: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> list[CallAttempt]:
        if start and end and start > end:
            raise ValidationError(f"Query start {start} is after end {end}")

        needle = (contact_substring or "").lower()
        matches = [
            a
            for a in self._attempts
            if needle in a.contact_name.lower()
            and (start is None or a.timestamp >= start)
            and (end is None or a.timestamp <= end)
        ]
        return sorted(matches, key=lambda a: a.timestamp)
