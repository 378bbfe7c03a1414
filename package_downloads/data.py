from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import List, Optional

DAILY = "daily"
WEEKLY = "weekly"
MONTHLY = "monthly"
GRANULARITIES = (DAILY, WEEKLY, MONTHLY)


@dataclass(frozen=True, slots=True)
class Sample:
    """A single day of download counts as returned by the downloads API."""

    date: datetime.date
    value: int


@dataclass(frozen=True, slots=True)
class Period:
    """An aggregated bucket of samples identified by its canonical key."""

    key: str
    value: int


@dataclass(frozen=True, slots=True)
class PackageMetadata:
    """The subset of registry metadata printed above the chart."""

    name: str
    description: Optional[str] = None
    latest_version: Optional[str] = None
    homepage: Optional[str] = None

    def summary_lines(self) -> List[str]:
        return [
            f"Package: {self.name}",
            f"Description: {self._or_na(self.description)}",
            f"Latest Version: {self._or_na(self.latest_version)}",
            f"Homepage: {self._or_na(self.homepage)}",
        ]

    @staticmethod
    def _or_na(value: Optional[str]) -> str:
        if not value:
            return "N/A"
        return value
