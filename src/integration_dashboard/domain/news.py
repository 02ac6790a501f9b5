"""News domain models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Story:
    """A news story with its discussion metadata."""

    id: int
    title: str
    url: str
    author: str | None
    score: int
    comments: int
    published_at: datetime | None
