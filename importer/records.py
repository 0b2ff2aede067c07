from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional

from django.utils import timezone


@dataclass(frozen=True)
class JobRecord:
    """A validated feed item, ready to be written to the Job table."""

    job_id: str
    title: str
    company: str = "Unknown"
    location: str = "Remote"
    description: str = ""
    job_type: str = ""
    published_date: datetime = field(default_factory=timezone.now)
    url: str = ""
    source: str = ""
    category: str = ""
    salary: Optional[str] = None

    def as_model_kwargs(self):
        data = asdict(self)
        data["salary"] = self.salary or ""
        return data


@dataclass(frozen=True)
class FailedItem:
    item_id: str
    reason: str


@dataclass(frozen=True)
class ParsedFeed:
    valid: list
    invalid: list

    @property
    def total(self):
        return len(self.valid) + len(self.invalid)


@dataclass(frozen=True)
class UpsertCounts:
    new: int = 0
    updated: int = 0
