"""Scheduling and writing of the backdated commit chain."""

import math
from dataclasses import replace
from datetime import datetime, time, timedelta
from typing import Iterator, List, Optional, Tuple

from dateutil import tz

from .dates import DatePolicy
from .engine import RepositoryEngine, format_identity, parse_identity
from .errors import SignatureError
from .logging import get_logger
from .models import BackfillOptions, CommitRequest, ScheduleState, TimeWindow
from .sampler import WeightedCommitSampler

logger = get_logger(__name__)

DAYS_PER_YEAR = 365


def compute_days_to_commit(years_ago: float) -> int:
    """Number of calendar days covered by the run, rounding halves up."""
    if years_ago < 0:
        raise ValueError(f"years_ago must not be negative, got {years_ago}")
    return int(math.floor(DAYS_PER_YEAR * years_ago + 0.5))


def anchor_start(now: datetime, start: time, days_back: int) -> datetime:
    """Move ``now`` to the window start time, then ``days_back`` calendar days earlier."""
    anchored = now.replace(
        hour=start.hour, minute=start.minute, second=start.second, microsecond=0
    )
    return anchored - timedelta(days=days_back)


class CommitScheduler:
    """
    Decide when backdated commits happen and write them as a linear chain.

    Day 0 always gets a single root commit at the window start. Every later
    day draws a commit count from the sampler and spreads that many commits
    evenly across the working window, unless the date policy skips the day.
    """

    def __init__(
        self,
        engine: RepositoryEngine,
        tree: str,
        author: str,
        message: str,
        years_ago: float,
        window: Optional[TimeWindow] = None,
        date_policy: Optional[DatePolicy] = None,
        sampler: Optional[WeightedCommitSampler] = None,
        now: Optional[datetime] = None,
    ):
        """
        Args:
            engine: Repository engine that stores commits and moves HEAD
            tree: Tree id shared by every generated commit
            author: Identity string, ``"Name <email>"``
            message: Commit message used for every commit
            years_ago: How far back the history starts
            window: Daily working hours, 09:00-17:00 by default
            date_policy: Object with ``should_skip(date)``; weekends by default
            sampler: Object with ``draw_count()``; weighted random by default
            now: Reference time, local current time by default
        """
        self.engine = engine
        self.tree = tree
        self.author = author
        self.message = message
        self.window = window or TimeWindow()
        self.date_policy = date_policy or DatePolicy()
        self.sampler = sampler or WeightedCommitSampler()

        if now is None:
            now = datetime.now(tz.tzlocal())
        elif now.tzinfo is None:
            now = now.replace(tzinfo=tz.tzlocal())

        self.days_to_commit = compute_days_to_commit(years_ago)
        self.start_datetime = anchor_start(now, self.window.start, self.days_to_commit)
        self.state: Optional[ScheduleState] = None

    @classmethod
    def from_options(
        cls,
        options: BackfillOptions,
        engine: Optional[RepositoryEngine] = None,
        write_tree: bool = True,
    ) -> "CommitScheduler":
        """
        Build a scheduler for the repository named in ``options``.

        With ``write_tree=False`` the staged tree id is computed without
        storing any object, which is all a dry run needs.

        Raises:
            RepositoryError: If the repository, its index or the author
                identity cannot be read
        """
        if engine is None:
            engine = RepositoryEngine.open(options.repo_path)
        tree = engine.read_default_tree(write=write_tree)

        if options.author:
            try:
                author = format_identity(*parse_identity(options.author))
            except ValueError as e:
                raise SignatureError(str(e)) from e
        else:
            author = format_identity(*engine.resolve_author_identity())

        return cls(
            engine=engine,
            tree=tree,
            author=author,
            message=options.message,
            years_ago=options.years_ago,
            window=options.window,
            date_policy=DatePolicy(
                skip_weekends=options.skip_weekends, excluded_dates=options.excluded_dates
            ),
            sampler=WeightedCommitSampler(seed=options.seed),
        )

    def schedule_day(self, day_start: datetime, count: int) -> List[datetime]:
        """Spread ``count`` timestamps evenly over the window, starting at ``day_start``."""
        if count <= 0:
            return []
        step = self.window.duration.total_seconds() / count
        return [day_start + timedelta(seconds=int(step * i)) for i in range(count)]

    def _iter_days(self) -> Iterator[Tuple[datetime, List[datetime]]]:
        day_start = self.start_datetime
        for _ in range(1, self.days_to_commit):
            day_start = day_start + timedelta(days=1)
            count = self.sampler.draw_count()
            if self.date_policy.should_skip(day_start):
                logger.debug(f"{day_start.date().isoformat()}: skipped")
                yield day_start, []
                continue
            logger.debug(f"{day_start.date().isoformat()}: {count} commits")
            yield day_start, self.schedule_day(day_start, count)

    def plan(self) -> List[datetime]:
        """
        Return every commit timestamp a run would produce, writing nothing.

        Draws from the sampler just like ``run()``, so a seeded sampler gives
        the same plan as a run made with an identically seeded sampler.
        """
        timestamps = [self.start_datetime]
        for _, day_timestamps in self._iter_days():
            timestamps.extend(day_timestamps)
        return timestamps

    def _commit(self, parent: Optional[str], timestamp: datetime) -> Tuple[str, bytes]:
        request = CommitRequest(
            tree=self.tree,
            author=self.author,
            message=self.message,
            timestamp=timestamp,
            parent=parent,
        )
        commit_id = self.engine.write_commit_object(request)
        return commit_id, self.engine.read_commit_payload(commit_id)

    def _commit_day(
        self, state: ScheduleState, day_start: datetime, timestamps: List[datetime]
    ) -> ScheduleState:
        for timestamp in timestamps:
            commit_id, payload = self._commit(state.current_parent, timestamp)
            state = replace(
                state,
                current_parent=commit_id,
                current_payload=payload,
                commits_written=state.commits_written + 1,
            )
        return replace(state, current_date=day_start)

    def run(self) -> str:
        """
        Write the whole commit chain and reset the branch head to its tip.

        Returns:
            Id of the last commit written

        Raises:
            CommitObjectError: If a commit cannot be written; HEAD is untouched
            ResetHeadError: If HEAD cannot be moved after all commits exist
        """
        logger.info(
            f"Backfilling {self.days_to_commit} days starting "
            f"{self.start_datetime.isoformat()} as {self.author}"
        )

        commit_id, payload = self._commit(None, self.start_datetime)
        state = ScheduleState(
            current_parent=commit_id,
            current_payload=payload,
            current_date=self.start_datetime,
        )

        self.state = state
        for day_start, timestamps in self._iter_days():
            state = self._commit_day(state, day_start, timestamps)
            self.state = state

        self.engine.reset_head_mixed(state.current_parent)
        logger.info(f"Wrote {state.commits_written} commits, HEAD is now {state.current_parent}")
        return state.current_parent
