from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional


@dataclass(frozen=True)
class DateTally:
    present: int = 0
    absent: int = 0
    total: int = 0


@dataclass(frozen=True)
class Statistics:
    """Indicateurs dérivés, recalculés à chaque affichage (jamais stockés)."""

    total_members: int
    new_this_month: int
    average_rate: float
    last_service_date: Optional[date]
    per_date: Dict[date, DateTally] = field(default_factory=dict)
    present_by_role: Dict[str, int] = field(default_factory=dict)
    present_by_ministry: Dict[str, int] = field(default_factory=dict)

    @property
    def last_service(self) -> Optional[DateTally]:
        if self.last_service_date is None:
            return None
        return self.per_date.get(self.last_service_date)
