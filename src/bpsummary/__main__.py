"""
Command-line interface for the bpsummary toolkit.
Loads a blood-pressure export, prints severity statistics, sub-series counts
and the latest moving averages, and optionally writes the full summary as JSON.
"""

import asyncio
import json
import logging
import pathlib
import sys
import typing

from collections import namedtuple
from datetime import datetime

import click
import pandas as pd
from stairval.notepad import create_notepad

from .aggregation import BloodPressureSession, Snapshot
from .config import DATA_SOURCES, DEFAULT_WINDOW_DAYS, OPTIONAL_COLUMNS, REQUIRED_COLUMNS
from .errors import LoadError
from .export import snapshot_to_dict
from .loader import decode_source, load_csv_as_table
from .mapper import RecordMapper, known_columns
from .source import is_url, read_source, resolve_location
from .statistics import StatisticsBucket

AuditEntry = namedtuple("AuditEntry", ["step", "source", "message", "level"])


@click.group()
def main():
    """bpsummary: blood-pressure exports → severity statistics and moving averages."""
    pass


@main.command(name="download")
@click.option(
    "-d",
    "--data-path",
    "data_dir",
    default="data",
    type=click.Path(file_okay=False),
    help="where to save the CSV (default: data)",
)
@click.option(
    "-s",
    "--source",
    "source_name",
    required=True,
    type=click.Choice(DATA_SOURCES),
    help="named data source to fetch",
)
def download(data_dir: str, source_name: str):
    """
    Download one of the named sources into a local folder.
    Only works when BPSUMMARY_BASE_URL points at an http(s) location.
    """
    location = resolve_location(source_name)
    if not is_url(location):
        click.echo(
            f"Error: {source_name!r} resolves to the local path {location}; "
            "set BPSUMMARY_BASE_URL to an http(s) base to download",
            err=True,
        )
        sys.exit(1)

    datadir = pathlib.Path(data_dir)
    datadir.mkdir(parents=True, exist_ok=True)
    click.echo(f"Downloading source {source_name} …")
    try:
        content = read_source(source_name)
    except LoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    out = datadir / f"{source_name}.csv"
    with open(out, "wb") as f:
        f.write(content)

    click.echo(f"Saved {len(content)} bytes to {out}")


@main.command(name="summarize")
@click.option(
    "-s",
    "--source",
    "source_id",
    type=str,
    help=f"named source ({', '.join(DATA_SOURCES)}), file path or http(s) URL",
)
@click.option(
    "-c",
    "--csv-path",
    "csv_file",
    type=click.Path(exists=True, dir_okay=False),
    help="path to a CSV export",
)
@click.option(
    "-w",
    "--window",
    default=DEFAULT_WINDOW_DAYS,
    show_default=True,
    type=int,
    help="moving-average window in measurement days (clamped to 1-30)",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False),
    help="also write summary.json under a timestamped folder here",
)
@click.option("--verbose-logging", is_flag=True, help="Also emit debug logs to stderr")
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
def summarize(
    source_id: typing.Optional[str],
    csv_file: typing.Optional[str],
    window: int,
    output_dir: typing.Optional[str],
    verbose_logging: bool,
    log_file_path: typing.Optional[str],
):
    """
    Load one export, then print:
      - the measurement period and record counts
      - systolic and diastolic severity buckets
      - high / medium / night sub-series sizes
      - the moving averages of the latest reading
    """
    source = csv_file or source_id
    if not source:
        click.echo("Error: pass --source or --csv-path", err=True)
        sys.exit(1)

    _configure_logging(verbose_logging, log_file_path)

    notepad = create_notepad("bpsummary")
    session = BloodPressureSession(window=window)
    try:
        snapshot = asyncio.run(session.reload(source, notepad))
    except LoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _report_issues(notepad)
    _print_summary(snapshot)

    if output_dir:
        out = _prepare_output_dir(pathlib.Path(output_dir)) / "summary.json"
        with open(out, "w", encoding="utf-8") as out_f:
            json.dump(snapshot_to_dict(snapshot), out_f, indent=2)
        click.echo(f"Wrote summary to {out}")


@main.command(name="audit-csv")
@click.option(
    "-c",
    "--csv-path",
    "csv_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="path to a CSV export",
)
def audit_csv(csv_file: str):
    """
    Check the header and count which rows would be kept, without building
    any statistics.
    """
    try:
        table = load_csv_as_table(decode_source(pathlib.Path(csv_file).read_bytes()))
    except LoadError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    entries = preprocess(table, pathlib.Path(csv_file).name)
    for entry in entries:
        line = f"{entry.step:20} {entry.source:15} {entry.message}"
        if entry.level == "error":
            colored = click.style(line, fg="red")
        elif entry.level in ("warn", "warning"):
            colored = click.style(line, fg="yellow")
        else:
            colored = click.style(line, fg="cyan")
        click.echo(colored)

    if any(entry.level == "error" for entry in entries):
        sys.exit(1)


def _configure_logging(verbose_logging: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose_logging:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose_logging else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )


def _report_issues(notepad):
    # if there were errors, show them
    if notepad.has_errors(include_subsections=True):
        click.echo("Errors found while parsing:")
        for err in notepad.errors():
            click.echo(f"- {err}")
    # show any warnings but keep going
    if notepad.has_warnings(include_subsections=True):
        click.echo("Warnings found while parsing:")
        for w in notepad.warnings():
            click.echo(f"- {w}")


def _format_buckets(title: str, buckets: typing.Sequence[StatisticsBucket]) -> list[str]:
    lines = [title]
    for bucket in buckets:
        label = f">= {bucket.threshold}" if bucket.threshold else "below"
        lines.append(f"  {label:>8}  {bucket.count:6d}  {bucket.percentage:5.1f}%")
    return lines


def _print_summary(snapshot: Snapshot) -> None:
    start, end = snapshot.period
    click.echo(f"Period: {start.isoformat()} → {end.isoformat()}")
    click.echo(
        f"Records: {len(snapshot.dataset)} "
        f"(skipped {snapshot.diagnostics.skipped_rows} of {snapshot.diagnostics.total_rows} rows)"
    )
    for line in _format_buckets("Systolic (mmHg)", snapshot.statistics.systolic):
        click.echo(line)
    for line in _format_buckets("Diastolic (mmHg)", snapshot.statistics.diastolic):
        click.echo(line)
    click.echo(
        f"High: {len(snapshot.sub_series.high)}  "
        f"Medium: {len(snapshot.sub_series.medium)}  "
        f"Night: {len(snapshot.sub_series.night)}  "
        f"Night (classified): {len(snapshot.sub_series.classified_night)}"
    )
    average = snapshot.moving_average
    click.echo(
        f"Moving average ({average.window} d, latest): "
        f"{average.systolic[-1]}/{average.diastolic[-1]} mmHg"
    )


def _prepare_output_dir(base: pathlib.Path) -> pathlib.Path:
    # use YYYY-MM-DD_HH-MM-SS for human-readable timestamps
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    output_dir = base / timestamp
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def preprocess(table: pd.DataFrame, source_name: str) -> list[AuditEntry]:
    """
    Run lightweight audits on one export:
      - header size
      - required / optional / unknown columns
      - per-reason row counts (only when the header is usable)
    """
    entries: list[AuditEntry] = []
    columns = set(table.columns)

    # Step 1: header counts
    entries.append(AuditEntry(
        step="read-header",
        source=source_name,
        message=f"{len(table.columns)} cols, {len(table)} rows",
        level="info",
    ))

    # Step 2: columns
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        entries.append(AuditEntry(
            step="required-columns",
            source=source_name,
            message=f"missing {missing}",
            level="error",
        ))
    else:
        entries.append(AuditEntry(
            step="required-columns",
            source=source_name,
            message="all present",
            level="info",
        ))
    absent_optional = [c for c in OPTIONAL_COLUMNS if c not in columns]
    if absent_optional:
        entries.append(AuditEntry(
            step="optional-columns",
            source=source_name,
            message=f"absent {absent_optional}",
            level="info",
        ))
    unknown = sorted(columns - set(known_columns()))
    if unknown:
        entries.append(AuditEntry(
            step="unknown-columns",
            source=source_name,
            message=f"ignored {unknown}",
            level="warn",
        ))

    # Step 3: rows
    if not missing:
        records, diagnostics = RecordMapper().apply_mapping(table)
        entries.append(AuditEntry(
            step="row-check",
            source=source_name,
            message=(
                f"{len(records)} kept; skipped blank={diagnostics.blank_rows} "
                f"malformed={diagnostics.malformed_rows} "
                f"sentinel={diagnostics.sentinel_rows} "
                f"number={diagnostics.invalid_number_rows} "
                f"timestamp={diagnostics.invalid_timestamp_rows}"
            ),
            level="info" if records else "error",
        ))
    return entries


if __name__ == "__main__":
    main()
