"""Service levels: named support commitments with an optional end of life."""

import datetime
from dataclasses import dataclass


@dataclass
class ServiceLevel:
    name: str
    eol: datetime.date | None = None

    def eol_string(self) -> str | None:
        """End of life as an ISO 8601 date, or None when unset."""
        return self.eol.isoformat() if self.eol else None

    def copy(self) -> "ServiceLevel":
        return ServiceLevel(self.name, self.eol)
