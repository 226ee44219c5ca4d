"""CLI helpers for reporting period resolution."""

from datetime import date

import click

from ledgerit.utils.date_parser import get_date_range, parse_date


PERIOD_OPTIONS = [
    click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month', 'last year')"),
    click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')"),
    click.option("--month", help="Whole calendar month (YYYY-MM)"),
    click.option("--year", help="Whole calendar year (YYYY)"),
    click.option("--period", help="Named period: this-month, this-year, last-month or last-year"),
]


def period_options(func):
    """Add the reporting period options shared by the report commands."""
    for option in reversed(PERIOD_OPTIONS):
        func = option(func)
    return func


def resolve_cli_period(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    month: str | None = None,
    year: str | None = None,
    period: str | None = None,
) -> tuple[date, date]:
    """Resolve the reporting period from period options or explicit dates.

    Without any option the period is the current year to date. A lone
    ``--start-date`` runs until today; a lone ``--end-date`` starts on
    January 1 of its year.
    """
    named = [value for value in (month, year, period) if value]

    if len(named) > 1:
        click.echo("Error: Only one of --month, --year or --period can be specified at a time.", err=True)
        ctx.exit(1)

    if named and (start_date or end_date):
        click.echo("Error: --month, --year and --period cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    if named:
        try:
            return get_date_range(named[0])
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    if start is None and end is None:
        return get_date_range("this-year")
    if end is None:
        end = date.today()
    if start is None:
        start = end.replace(month=1, day=1)
    return start, end
