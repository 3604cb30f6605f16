"""Data models for the commit backfill tool."""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from pathlib import Path
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class TimeWindow:
    """Daily working hours inside which commits may land."""

    start: time = time(9, 0)
    end: time = time(17, 0)

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(
                f"Window start {self.start.isoformat()} must be before end {self.end.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        """Length of the working window."""
        anchor = date.min
        return datetime.combine(anchor, self.end) - datetime.combine(anchor, self.start)

    def bounds_on(self, day: date, tz: Optional[tzinfo] = None) -> Tuple[datetime, datetime]:
        """Return the window's start and end as datetimes on the given day."""
        return (
            datetime.combine(day, self.start, tzinfo=tz),
            datetime.combine(day, self.end, tzinfo=tz),
        )


@dataclass
class BackfillOptions:
    """Settings for a single backfill run, as collected by the CLI."""

    repo_path: Path
    years_ago: float
    message: str = "Backfill"
    window: TimeWindow = field(default_factory=TimeWindow)
    author: Optional[str] = None
    skip_weekends: bool = True
    excluded_dates: FrozenSet[date] = frozenset()
    seed: Optional[int] = None

    def __post_init__(self):
        self.repo_path = Path(self.repo_path)
        if self.years_ago <= 0:
            raise ValueError(f"years_ago must be positive, got {self.years_ago}")
        self.excluded_dates = frozenset(self.excluded_dates)


@dataclass(frozen=True)
class CommitRequest:
    """Everything the repository engine needs to materialize one commit."""

    tree: str
    author: str
    message: str
    timestamp: datetime
    parent: Optional[str] = None

    @property
    def is_initial(self) -> bool:
        return self.parent is None


@dataclass(frozen=True)
class ScheduleState:
    """Accumulator threaded through the day-by-day commit loop."""

    current_parent: str
    current_payload: bytes
    current_date: datetime
    commits_written: int = 1
