"""
application.context - Request-scoped context.

Every layer receives its context explicitly. Two concurrent chat requests
get two different RequestContext instances and share nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Optional
from uuid import uuid4


@dataclass
class RequestContext:
    """Per-request context passed through the orchestrator, executor and tools.

    Attributes:
        current_date:          Caller-supplied "today" anchor. When set, derived
                               fields and relative dates are computed against
                               its UTC midnight instead of the wall clock.
        current_date_readable: Optional human form of the anchor for the prompt
                               (e.g. "Monday, March 3, 2025").
        request_id:            Unique per request, for tracing/logging.
    """
    current_date: Optional[date] = None
    current_date_readable: str = ""
    request_id: str = field(default_factory=lambda: uuid4().hex)

    def now(self) -> datetime:
        if self.current_date is not None:
            return datetime.combine(self.current_date, time.min, tzinfo=timezone.utc)
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()
