# =============================================================================
# src/cli/search.py — CLI Event Search
# =============================================================================
#
# Runs the multi-source event aggregation from the command line, without
# the API server and without any taste matching:
#
#   python -m src.cli.search --location Berlin --start 2025-06-01 --end 2025-06-07
#   python -m src.cli.search --location "New York" --start 2025-06-01 \
#       --end 2025-06-03 --json
#
# Output modes:
#   - Text (default): per-provider summary followed by the events by date
#   - JSON (--json): the same data, machine readable
#
# Credentials are read from the environment / .env exactly as the server
# does; providers without a key show up as failed in the summary.
# =============================================================================

"""Standalone CLI for searching events across all configured providers.

Usage::

    python -m src.cli.search --location Berlin --start 2025-06-01 --end 2025-06-07
    python -m src.cli.search --location Berlin --start 2025-06-01 --end 2025-06-07 --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time

import httpx

from src.models.event import AggregationResult
from src.utils.errors import InvalidSearchError

# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _format_text_output(
    result: AggregationResult,
    location: str,
    start_date: str,
    end_date: str,
) -> str:
    """Format an aggregation result as a human-readable report."""
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append(f"  gigScout: {location}, {start_date} to {end_date}")
    lines.append(sep)
    lines.append("")

    lines.append("PROVIDERS")
    lines.append("-" * 40)
    for name, run in result.diagnostics.items():
        if run.success:
            status = f"ok, {run.count} events"
            if run.count == 0 and run.error:
                status = run.error
        else:
            status = f"FAILED: {run.error}"
        lines.append(f"  {name:<18} {status}")
    lines.append(f"  Total found: {result.total_found}  |  After dedup: {len(result.events)}")
    lines.append("")

    if not result.events:
        lines.append("No events found.")
        return "\n".join(lines)

    lines.append("EVENTS")
    lines.append("-" * 40)
    for event in result.events:
        lines.append(f"  {event.date.isoformat()}  {event.name}")
        lines.append(f"              {event.venue}, {event.city}  [{event.source}]")
        if event.artists != [event.name]:
            lines.append(f"              Lineup: {', '.join(event.artists)}")
        if event.url:
            lines.append(f"              {event.url}")

    return "\n".join(lines)


def _format_json_output(
    result: AggregationResult,
    location: str,
    start_date: str,
    end_date: str,
) -> str:
    output = {
        "searchParams": {"location": location, "startDate": start_date, "endDate": end_date},
        "apiResults": {
            name: run.model_dump(mode="json") for name, run in result.diagnostics.items()
        },
        "totalFound": result.total_found,
        "afterDedup": len(result.events),
        "events": [event.model_dump(mode="json") for event in result.events],
    }
    return json.dumps(output, indent=2)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def _suppress_logs() -> None:
    """Send all logging to stderr at WARNING+ so stdout holds only the report.

    Must run after ``src.main`` is imported (it configures logging at import
    time) and before anything logs; structlog caches loggers on first use.
    """
    import logging

    from src.utils.logging import configure_logging

    configure_logging(log_level="WARNING", json_output=False, app_env="cli", stream=sys.stderr)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def _run(
    location: str,
    start_date: str,
    end_date: str,
    json_output: bool,
    quiet: bool,
) -> int:
    """Run one aggregation and print the result.  Returns the exit code."""
    from src.main import build_service, settings

    if quiet:
        _suppress_logs()

    async with httpx.AsyncClient(timeout=settings.request_deadline) as http_client:
        service = build_service(settings, http_client)
        print(f"Searching {location} from {start_date} to {end_date}...", file=sys.stderr)
        start = time.monotonic()
        try:
            result = await service.search_events(location, start_date, end_date)
        except InvalidSearchError as exc:
            print(f"Error: {exc.message}", file=sys.stderr)
            return 1
        print(f"Done in {time.monotonic() - start:.1f}s", file=sys.stderr)

    location, start_date, end_date = location.strip(), start_date.strip(), end_date.strip()
    if json_output:
        print(_format_json_output(result, location, start_date, end_date))
    else:
        print(_format_text_output(result, location, start_date, end_date))
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli.search",
        description="Search every configured event provider for concerts in a city.",
    )
    parser.add_argument("--location", required=True, help="City to search, e.g. Berlin.")
    parser.add_argument("--start", required=True, help="First day, YYYY-MM-DD.")
    parser.add_argument("--end", required=True, help="Last day, YYYY-MM-DD.")
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON instead of formatted text.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point; exits 0 on success, 1 on invalid input."""
    args = _build_parser().parse_args(argv)

    # JSON mode implies quiet; log lines must not mix into the JSON.
    quiet = args.quiet or args.json_output
    exit_code = asyncio.run(
        _run(args.location, args.start, args.end, args.json_output, quiet)
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
