"""
Main CLI entry point for the daily advisory update.
"""

from pathlib import Path

import click
from dotenv import load_dotenv

from ..shared_utilities import configure_logging, get_logger, trace_function
from .config import AdvisorySettings
from .core import AdvisoryUpdater
from .exceptions import AdvisoryError

# Load environment variables from .env file
load_dotenv()


@click.command()
@click.option(
    "--workspace",
    type=click.Path(file_okay=False, path_type=Path),
    help="Root for relative document paths (default: $GITHUB_WORKSPACE or cwd)",
)
@click.option(
    "--policy",
    "policy_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Policy file (default: policies/V8-policy.json or $POLICY_PATH)",
)
@click.option(
    "--cache",
    "cache_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Commit cache file (default: src/V8-cache.json or $CACHE_PATH)",
)
@click.option(
    "--advisory",
    "advisory_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Advisory file (default: advisories/V8-advisory.json or $ADVISORY_PATH)",
)
@click.option(
    "--date",
    "run_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Record and look back from this date instead of today (UTC)",
)
@click.option(
    "--retention-days",
    type=click.IntRange(min=0),
    help="Prune cache entries older than this many days (default: keep all)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Compute the update without writing any files",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Only log warnings and errors",
)
@click.option(
    "--token",
    envvar="GITHUB_TOKEN",
    help="GitHub token (or set GITHUB_TOKEN env var)",
)
@trace_function("update_advisory_main")
def main(
    workspace: Path | None,
    policy_path: Path | None,
    cache_path: Path | None,
    advisory_path: Path | None,
    run_date,
    retention_days: int | None,
    dry_run: bool,
    verbose: bool,
    quiet: bool,
    token: str | None,
) -> None:
    """
    Refresh the branch freshness advisory.

    Records the tip commit of every branch tracked by the policy under
    today's date, then rewrites the advisory so that every commit older than
    the policy's freshness threshold is marked affected.

    Examples:

        # Daily scheduled run from the repository root
        update-advisory

        # Preview the result for a given date without writing files
        update-advisory --date 2024-12-05 --dry-run

        # Keep a year of history in the cache
        update-advisory --retention-days 365
    """
    if verbose:
        configure_logging(level="DEBUG")
    elif quiet:
        configure_logging(level="WARNING")
    else:
        configure_logging()
    logger = get_logger(__name__)

    try:
        settings = AdvisorySettings.from_env(workspace)
        if policy_path:
            settings.policy_path = policy_path
        if cache_path:
            settings.cache_path = cache_path
        if advisory_path:
            settings.advisory_path = advisory_path
        if retention_days is not None:
            settings.retention_days = retention_days
        if token:
            settings.github_token = token

        logger.debug(
            "Resolved document paths",
            policy=str(settings.policy_path),
            cache=str(settings.cache_path),
            advisory=str(settings.advisory_path),
        )

        updater = AdvisoryUpdater(settings)
        result = updater.run(
            today=run_date.date() if run_date else None,
            dry_run=dry_run,
        )
    except AdvisoryError as e:
        logger.error(f"Advisory update failed: {e}")
        click.echo(f"Error: {e}", err=True)
        raise click.Abort() from e

    lookback = result.lookback
    click.echo(
        f"{result.policy.id}: {len(lookback.commits)} fixed commit(s) "
        f"from {lookback.resolved_date} (threshold {result.policy.freshness_days} days)"
    )
    if result.saved:
        click.echo(f"Advisory data saved to {settings.advisory_path}")
    else:
        click.echo("Dry run: no files written")


if __name__ == "__main__":
    main()
