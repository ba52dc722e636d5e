"""Round timer command."""

from typing import Optional

import click

from src.calculators.time_rounding import round_timer_to_quarters
from src.calculators.time_utils import format_date_string, format_time_string
from src.cli.error_handlers import with_error_handling
from src.cli.utils.formatters import format_info, format_success, format_table
from src.cli.utils.options import load_settings, parse_instant, resolve_timezone


@click.command(name="round-timer")
@click.option("--start", "start", required=True, help="Raw timer start (ISO 8601)")
@click.option("--end", "end", required=True, help="Raw timer stop (ISO 8601)")
@click.option(
    "--timezone",
    "timezone_name",
    type=str,
    default=None,
    help="Civil timezone for rounding (default: APP_TIMEZONE setting)",
)
@click.option("--debug", is_flag=True, help="Show full stack traces on errors")
def round_timer(start: str, end: str, timezone_name: Optional[str], debug: bool):
    """Round a raw timer start/stop pair to billable quarter hours.

    Timestamps without an offset are read as wall-clock time in the
    selected timezone.

    Example:
        billing-core round-timer --start 2025-11-12T19:03 --end 2025-11-12T19:14
        billing-core round-timer --start 2025-11-12T18:03Z --end 2025-11-12T20:47Z
    """
    with with_error_handling(debug):
        tz = resolve_timezone(timezone_name or load_settings().app_timezone)
        raw_start = parse_instant(start, "--start")
        raw_end = parse_instant(end, "--end")

        click.echo(format_info(f"Rounding timer in {tz.key}..."))
        entry = round_timer_to_quarters(raw_start, raw_end, tz)

        click.echo()
        click.echo(
            format_table(
                ["Date", "Start", "End", "Hours"],
                [
                    [
                        format_date_string(entry.start_time, tz),
                        format_time_string(entry.start_time, tz),
                        format_time_string(entry.end_time, tz),
                        f"{entry.duration_hours:.2f}",
                    ]
                ],
            )
        )
        click.echo()
        click.echo(
            format_success(
                f"Billable entry: {entry.duration_hours:.2f}h "
                f"({entry.duration_minutes} minutes)"
            )
        )
