"""Typer CLI for the vacation period planner."""

from __future__ import annotations

import datetime
import json
import logging
import pathlib
import sys

import typer

from vacsplit.exceptions import AllocationError, InfeasibleConstraints, NoPlacementFound
from vacsplit.holidays import (
    ONE_DAY,
    HolidayDate,
    HolidayInterval,
    holiday_set,
    holidays_for_window,
)
from vacsplit.planner import (
    DEFAULT_HORIZON_DAYS,
    DEFAULT_MIN_GAP_DAYS,
    DEFAULT_SPACING_DAYS,
    Configuration,
    Period,
    allocate,
    format_calendar_view,
    format_plan,
)

app = typer.Typer(
    name="vacsplit",
    help="Vacation splitter: divide your vacation days into periods that "
    "bridge weekends and public holidays.",
    add_completion=False,
)

DEFAULTS: dict[str, object] = {
    "country": "BR",
    "region": None,
    "days": 30,
    "periods": 3,
    "main_min": 14,
    "other_min": 5,
    "min_gap": DEFAULT_MIN_GAP_DAYS,
    "spacing": DEFAULT_SPACING_DAYS,
    "horizon": DEFAULT_HORIZON_DAYS,
}

EXIT_ERROR = 1
EXIT_INFEASIBLE = 2


def _parse_date(value: str) -> datetime.date:
    """Parse a YYYY-MM-DD date string."""
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        raise ValueError(f"Invalid date {value!r}. Use YYYY-MM-DD.") from None


def _parse_int(values: dict[str, object], key: str) -> int:
    value = values[key]
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for {key!r}: {value!r} (expected a whole number).")
    try:
        return int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        raise ValueError(
            f"Invalid value for {key!r}: {value!r} (expected a whole number)."
        ) from None


def _parse_holiday(value: str) -> HolidayInterval:
    """Parse ``YYYY-MM-DD`` or an inclusive ``YYYY-MM-DD..YYYY-MM-DD`` range."""
    first, sep, last = value.partition("..")
    start = _parse_date(first.strip())
    end = _parse_date(last.strip()) if sep else start
    if end < start:
        raise ValueError(f"Holiday range {value!r} ends before it starts.")
    return (start, end + ONE_DAY, "Custom holiday")


def _one_year_later(d: datetime.date) -> datetime.date:
    try:
        return d.replace(year=d.year + 1)
    except ValueError:  # Feb 29
        return d.replace(year=d.year + 1, day=28)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _country_or_none(value: object) -> str | None:
    if value is None or str(value).lower() == "none":
        return None
    return str(value)


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------


def _load_config(path: str) -> dict[str, object]:
    """Load and validate a JSON config file."""
    p = pathlib.Path(path)
    if not p.exists():
        typer.echo(f"Error: Config file not found: {path}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    try:
        data = json.loads(p.read_text())
    except json.JSONDecodeError as exc:
        typer.echo(f"Error: Invalid JSON in config file: {exc}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None

    if not isinstance(data, dict):
        typer.echo("Error: Config file must contain a JSON object.", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    unknown = set(data) - set(DEFAULTS) - {"start", "end", "holidays"}
    if unknown:
        typer.echo(f"Error: Unknown config keys: {', '.join(sorted(unknown))}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    return data


def _merge(cli_values: dict[str, object], file_values: dict[str, object]) -> dict[str, object]:
    """Command-line values win over the config file, which wins over defaults."""
    merged = dict(DEFAULTS)
    merged.update(file_values)
    merged.update({k: v for k, v in cli_values.items() if v is not None})
    return merged


def _build_configuration(values: dict[str, object]) -> Configuration:
    """Build a :class:`Configuration`; raises ``ValueError`` naming the bad value."""
    start_date = _parse_date(str(values["start"])) if values.get("start") else datetime.date.today()
    end_date = _parse_date(str(values["end"])) if values.get("end") else _one_year_later(start_date)
    return Configuration(
        country=_country_or_none(values["country"]),
        region=values["region"],  # type: ignore[arg-type]
        total_days=_parse_int(values, "days"),
        period_count=_parse_int(values, "periods"),
        main_period_min_days=_parse_int(values, "main_min"),
        other_periods_min_days=_parse_int(values, "other_min"),
        start_date=start_date,
        end_date=end_date,
        min_gap_days=_parse_int(values, "min_gap"),
        spacing_days=_parse_int(values, "spacing"),
        horizon_days=_parse_int(values, "horizon"),
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def plan(
    country: str | None = typer.Option(
        None,
        "--country",
        "-c",
        help="Country code for public holidays (default BR). Use 'none' to skip.",
    ),
    region: str | None = typer.Option(
        None,
        "--region",
        "-r",
        help="State/region code within the country.",
    ),
    days: int | None = typer.Option(
        None,
        "--days",
        "-d",
        help="Total vacation days available (default 30).",
    ),
    periods: int | None = typer.Option(
        None,
        "--periods",
        "-p",
        help="Number of periods to split the vacation into (default 3).",
    ),
    main_min: int | None = typer.Option(
        None,
        "--main-min",
        help="Minimum length of the main (first) period (default 14).",
    ),
    other_min: int | None = typer.Option(
        None,
        "--other-min",
        help="Minimum length of every other period (default 5).",
    ),
    start: str | None = typer.Option(
        None,
        "--start",
        help="First date to consider (YYYY-MM-DD). Defaults to today.",
    ),
    end: str | None = typer.Option(
        None,
        "--end",
        help="Last date a period may start on (YYYY-MM-DD). Defaults to one year after "
        "start; widen the window if later periods cannot be scheduled.",
    ),
    holiday: list[str] | None = typer.Option(  # noqa: B008
        None,
        "--holiday",
        "-H",
        help="Extra holiday, YYYY-MM-DD or YYYY-MM-DD..YYYY-MM-DD. Repeatable.",
    ),
    min_gap: int | None = typer.Option(
        None,
        "--min-gap",
        help=f"Minimum days between periods (default {DEFAULT_MIN_GAP_DAYS}).",
    ),
    spacing: int | None = typer.Option(
        None,
        "--spacing",
        help=f"Days after a period before searching the next (default {DEFAULT_SPACING_DAYS}).",
    ),
    horizon: int | None = typer.Option(
        None,
        "--horizon",
        help=f"Days scanned forward for each period (default {DEFAULT_HORIZON_DAYS}).",
    ),
    adjust: bool = typer.Option(
        False,
        "--adjust",
        help="If the minimum lengths do not fit, plan with the largest feasible period count.",
    ),
    calendar: bool = typer.Option(
        True,
        "--calendar/--no-calendar",
        help="Show a month calendar for each period.",
    ),
    output_json: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON.",
    ),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Path to a JSON file providing any of the options above.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log search details to stderr.",
    ),
) -> None:
    """Split your vacation days into periods that maximize time off."""
    _setup_logging(verbose)

    file_values = _load_config(config) if config is not None else {}
    values = _merge(
        {
            "country": country,
            "region": region,
            "days": days,
            "periods": periods,
            "main_min": main_min,
            "other_min": other_min,
            "min_gap": min_gap,
            "spacing": spacing,
            "horizon": horizon,
            "start": start,
            "end": end,
        },
        file_values,
    )

    try:
        cfg = _build_configuration(values)
        extra = [_parse_holiday(str(h)) for h in file_values.get("holidays") or []]  # type: ignore[attr-defined]
        extra.extend(_parse_holiday(h) for h in holiday or [])
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None
    start_date, end_date = cfg.start_date, cfg.end_date

    try:
        entries = holidays_for_window(cfg.country, cfg.region, start_date, end_date, extra)
    except KeyError as exc:
        typer.echo(f"Error: {exc.args[0]}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None

    notes: list[str] = []
    try:
        result = _allocate_with_adjustment(cfg, entries, adjust, notes)
    except InfeasibleConstraints as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        if exc.adjusted_period_count > 0:
            typer.echo(
                f"Rerun with --periods {exc.adjusted_period_count} or pass --adjust.", err=True
            )
        raise typer.Exit(code=EXIT_INFEASIBLE) from None
    except AllocationError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        if isinstance(exc, NoPlacementFound):
            typer.echo(
                f"The search window ends on {cfg.end_date.isoformat()}; try a later --end.",
                err=True,
            )
        raise typer.Exit(code=EXIT_ERROR) from None

    final_cfg, result_periods = result
    if output_json:
        _print_json(final_cfg, result_periods, notes)
    else:
        _print_text(final_cfg, result_periods, entries, notes, calendar)


def _allocate_with_adjustment(
    cfg: Configuration, entries: list[HolidayDate], adjust: bool, notes: list[str]
) -> tuple[Configuration, list[Period]]:
    days_off = holiday_set(entries)
    try:
        return cfg, allocate(cfg, days_off)
    except InfeasibleConstraints as exc:
        if not adjust or exc.adjusted_period_count < 1:
            raise
        notes.append(
            f"Period count adjusted from {exc.requested_period_count} "
            f"to {exc.adjusted_period_count} to fit the minimum lengths."
        )
        adjusted = cfg._replace(period_count=exc.adjusted_period_count)
        return adjusted, allocate(adjusted, days_off)


def _print_text(
    cfg: Configuration,
    periods: list[Period],
    entries: list[HolidayDate],
    notes: list[str],
    show_calendar: bool,
) -> None:
    w = 64
    typer.echo("=" * w)
    typer.echo("  VACATION SPLITTER")
    typer.echo("=" * w)
    typer.echo(f"  Window:        {cfg.start_date.isoformat()} -> {cfg.end_date.isoformat()}")
    where = cfg.country or "none"
    if cfg.country and cfg.region:
        where += f"-{cfg.region}"
    typer.echo(f"  Holidays:      {where} ({len(entries)} days)")
    typer.echo(f"  Vacation days: {cfg.total_days}")
    typer.echo(
        f"  Periods:       {cfg.period_count} "
        f"(main >= {cfg.main_period_min_days}, others >= {cfg.other_periods_min_days})"
    )
    for note in notes:
        typer.echo(f"  Note: {note}")

    typer.echo(format_plan(periods, cfg))
    if show_calendar:
        for i, p in enumerate(periods, 1):
            typer.echo(f"  Period {i} ({p.worked_day_count} days)")
            typer.echo(format_calendar_view(p, entries))


def _print_json(cfg: Configuration, periods: list[Period], notes: list[str]) -> None:
    output = {
        "country": cfg.country,
        "region": cfg.region,
        "start_date": cfg.start_date.isoformat(),
        "end_date": cfg.end_date.isoformat(),
        "vacation_days": cfg.total_days,
        "period_count": cfg.period_count,
        "notes": notes,
        "periods": [
            {
                "worked_start": p.worked_start.isoformat(),
                "worked_end": p.worked_end.isoformat(),
                "extended_start": p.extended_start.isoformat(),
                "extended_end": p.extended_end.isoformat(),
                "worked_day_count": p.worked_day_count,
                "extra_days": p.extra_days,
                "total_days_off": p.total_days_off,
            }
            for p in periods
        ],
        "summary": {
            "total_days_off": sum(p.total_days_off for p in periods),
            "vacation_days_used": sum(p.worked_day_count for p in periods),
        },
    }
    json.dump(output, sys.stdout, indent=2)
    typer.echo()


@app.command()
def holidays(
    country: str = typer.Option(
        "BR",
        "--country",
        "-c",
        help="Country code.",
    ),
    region: str | None = typer.Option(
        None,
        "--region",
        "-r",
        help="State/region code within the country.",
    ),
    start: str | None = typer.Option(
        None,
        "--start",
        help="Window start (YYYY-MM-DD). Defaults to today.",
    ),
    end: str | None = typer.Option(
        None,
        "--end",
        help="Window end (YYYY-MM-DD). Defaults to one year after start.",
    ),
) -> None:
    """List the holidays of a country/region within a date window."""
    try:
        start_date = _parse_date(start) if start else datetime.date.today()
        end_date = _parse_date(end) if end else _one_year_later(start_date)
    except ValueError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None

    try:
        entries = holidays_for_window(country, region, start_date, end_date)
    except KeyError as exc:
        typer.echo(f"Error: {exc.args[0]}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None

    label = country.upper() + (f"-{region}" if region else "")
    typer.echo(f"  {label} holidays {start_date.isoformat()} -> {end_date.isoformat()}")
    typer.echo()
    for h in entries:
        if start_date <= h.date <= end_date:
            typer.echo(f"    {h.date.strftime('%a, %b %d %Y'):>16}  {h.name}")


def main() -> None:
    """Entry point for the CLI."""
    app()
