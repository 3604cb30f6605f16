"""Command-line interface for the commit backfill tool."""

import sys
from collections import Counter
from datetime import date, time
from typing import Optional, Tuple

import click
from dateutil import parser as date_parser

from .errors import BackfillError
from .logging import DEFAULT_LOG_LEVEL, LOG_LEVEL_ENV, get_logger, setup_logging
from .models import BackfillOptions, TimeWindow
from .scheduler import CommitScheduler

logger = get_logger(__name__)


def _parse_time(ctx, param, value: str) -> time:
    try:
        return date_parser.parse(value).time()
    except (ValueError, OverflowError):
        raise click.BadParameter(f"Expected a time of day such as 09:00, got {value!r}")


def _parse_dates(ctx, param, values: Tuple[str, ...]) -> Tuple[date, ...]:
    try:
        return tuple(date_parser.parse(value).date() for value in values)
    except (ValueError, OverflowError) as e:
        raise click.BadParameter(f"Expected a date such as 2024-12-25: {e}")


@click.command()
@click.option(
    '--repo-path',
    default='.',
    show_default=True,
    help='Path to the git repository',
    envvar='BACKFILL_REPO_PATH',
)
@click.option('--message', '-m', default='Backfill', show_default=True, help='Commit message')
@click.option(
    '--years-ago',
    required=True,
    type=click.FloatRange(min=0, min_open=True),
    help='How many years back the history starts',
)
@click.option('--start', default='09:00', callback=_parse_time, help='Start of the working day')
@click.option('--end', default='17:00', callback=_parse_time, help='End of the working day')
@click.option('--author', help="Author identity 'Name <email>'", envvar='BACKFILL_AUTHOR')
@click.option('--include-weekends', is_flag=True, help='Also commit on Saturdays and Sundays')
@click.option(
    '--exclude-date',
    multiple=True,
    callback=_parse_dates,
    help='Date that gets no commits (repeatable)',
)
@click.option('--seed', type=int, help='Seed for the commit-count sampler')
@click.option('--dry-run', is_flag=True, help='Show the schedule without writing commits')
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default=DEFAULT_LOG_LEVEL,
    show_default=True,
    envvar=LOG_LEVEL_ENV,
)
@click.option('--log-file', help='Also write logs to this file')
def cli(
    repo_path: str,
    message: str,
    years_ago: float,
    start: time,
    end: time,
    author: Optional[str],
    include_weekends: bool,
    exclude_date: Tuple[date, ...],
    seed: Optional[int],
    dry_run: bool,
    log_level: str,
    log_file: Optional[str],
):
    """Fill a git repository with backdated commits."""
    setup_logging(level=log_level, log_file=log_file)

    try:
        options = BackfillOptions(
            repo_path=repo_path,
            years_ago=years_ago,
            message=message,
            window=TimeWindow(start=start, end=end),
            author=author,
            skip_weekends=not include_weekends,
            excluded_dates=frozenset(exclude_date),
            seed=seed,
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        scheduler = CommitScheduler.from_options(options, write_tree=not dry_run)

        if dry_run:
            timestamps = scheduler.plan()
            per_day = Counter(ts.date() for ts in timestamps)
            click.echo(
                f"Would write {len(timestamps)} commits over {len(per_day)} active days "
                f"({scheduler.days_to_commit} days in range)"
            )
            click.echo(f"  First: {timestamps[0].isoformat()}")
            click.echo(f"  Last:  {timestamps[-1].isoformat()}")
            return

        click.echo(
            f"Backfilling {scheduler.days_to_commit} days in {repo_path} "
            f"from {scheduler.start_datetime.date().isoformat()}..."
        )
        head = scheduler.run()
        click.echo(f"✓ HEAD reset to {head}")

    except BackfillError as e:
        click.echo(f"✗ Error backfilling commits: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
