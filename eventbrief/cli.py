"""
CLI Interface
=============
Command-line interface for the Event Brief parser.

Usage:
    python -m eventbrief parse <pdf_path> [options]
    python -m eventbrief parse-text <text_path|-> [options]
    python -m eventbrief serve [options]
    python -m eventbrief info <pdf_path>
"""

from __future__ import annotations

import json
import os
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .engine import BriefParserEngine, ParserConfig
from .models import ExtractionResult
from .text_extractor import DEFAULT_MAX_PAGES, MAX_PAGES, PdfExtractionError, TextExtractor

console = Console()


def _json_payload(result: ExtractionResult, include_raw: bool, include_pages: bool) -> dict:
    payload = {"parsed": result.parsed.model_dump(mode="json")}
    if include_raw:
        payload["raw_text"] = result.canonical_text
    if include_pages:
        payload["pages"] = [p.model_dump() for p in result.pages]
    return payload


def _emit(result: ExtractionResult, config: ParserConfig, json_output: bool):
    if json_output:
        print(json.dumps(
            _json_payload(result, config.include_raw, config.include_pages),
            indent=2,
            ensure_ascii=False,
            default=str,
        ))
        return

    _display_results(result)
    if config.include_raw:
        console.print(Panel(result.canonical_text or "(empty)", title="Canonical Text"))


@click.group()
@click.version_option(version=__version__, prog_name="eventbrief")
def cli():
    """Event Brief Parser: structured facts from extracted brief text."""
    pass


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--max-pages", "-m",
    default=DEFAULT_MAX_PAGES,
    type=click.IntRange(1, MAX_PAGES),
    help="Number of pages to read",
)
@click.option("--raw", is_flag=True, default=False, help="Include canonical text")
@click.option("--pages", is_flag=True, default=False, help="Include per-page text (JSON only)")
@click.option(
    "--keep-unknown-labels",
    is_flag=True,
    default=False,
    help="Do not cut blocks at unrecognized all-caps labels",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option("--log-file", default=None, help="Path to log file")
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    pdf_path: str,
    max_pages: int,
    raw: bool,
    pages: bool,
    keep_unknown_labels: bool,
    log_level: str,
    log_file: str,
    json_output: bool,
):
    """Extract and parse an Event Brief PDF."""

    if json_output:
        # Keep stdout clean for JSON consumers
        log_level = "ERROR"

    config = ParserConfig(
        max_pages=max_pages,
        include_raw=raw,
        include_pages=pages,
        trim_unknown_labels=not keep_unknown_labels,
        log_level=log_level,
        log_file=log_file,
    )

    if not json_output:
        console.print()
        console.print(
            Panel.fit(
                f"[bold cyan]Event Brief Parser v{__version__}[/]\n"
                f"[dim]Parsing: {os.path.basename(pdf_path)}[/]",
                border_style="cyan",
            )
        )
        console.print()

    try:
        result = BriefParserEngine(config).parse_pdf(pdf_path)
    except (FileNotFoundError, PdfExtractionError) as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    _emit(result, config, json_output)


@cli.command("parse-text")
@click.argument("text_path", type=click.Path(allow_dash=True, dir_okay=False))
@click.option("--raw", is_flag=True, default=False, help="Include canonical text")
@click.option(
    "--keep-unknown-labels",
    is_flag=True,
    default=False,
    help="Do not cut blocks at unrecognized all-caps labels",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option("--json-output", is_flag=True, default=False, help="Output JSON to stdout")
def parse_text(
    text_path: str,
    raw: bool,
    keep_unknown_labels: bool,
    log_level: str,
    json_output: bool,
):
    """Parse already-extracted brief text (use - for stdin)."""

    config = ParserConfig(
        include_raw=raw,
        trim_unknown_labels=not keep_unknown_labels,
        log_level="ERROR" if json_output else log_level,
    )

    try:
        with click.open_file(text_path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    result = BriefParserEngine(config).parse_text(text)
    _emit(result, config, json_output)


@cli.command()
@click.option("--host", default="0.0.0.0", help="Server host")
@click.option("--port", default=5000, type=int, help="Server port")
@click.option("--debug", is_flag=True, default=False, help="Debug mode")
def serve(host: str, port: int, debug: bool):
    """Start the HTTP microservice server."""
    from .server import run_server

    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Event Brief Parser Microservice[/]\n"
            f"[dim]Starting on {host}:{port}[/]",
            border_style="cyan",
        )
    )
    console.print()

    run_server(host=host, port=port, debug=debug)


@cli.command()
@click.argument("pdf_path", type=click.Path(exists=True, dir_okay=False))
def info(pdf_path: str):
    """Display PDF file information."""

    try:
        page_count = TextExtractor().get_page_count(pdf_path)
    except PdfExtractionError as e:
        console.print(f"[red]Error:[/] {e}")
        sys.exit(1)

    console.print()
    table = Table(title="PDF Information", border_style="cyan")
    table.add_column("Property", style="bold")
    table.add_column("Value")

    table.add_row("File", os.path.basename(pdf_path))
    table.add_row("Pages", str(page_count))
    table.add_row(
        "File Size",
        f"{os.path.getsize(pdf_path) / 1024:.1f} KB",
    )
    table.add_row("Pages Read By Default", str(DEFAULT_MAX_PAGES))

    console.print(table)
    console.print()


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _value(v) -> str:
    return "[dim]-[/]" if v is None else str(v)


def _display_results(result: ExtractionResult):
    """Display a parsed brief as rich tables."""
    brief = result.parsed

    table = Table(title="Event Brief", border_style="cyan")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Booking #", _value(brief.booking_number))
    table.add_row("Talent", _value(brief.header.talent_name))
    table.add_row("Client", _value(brief.header.client_name))
    table.add_row("Event", _value(brief.header.event_title))
    table.add_row("Date", _value(brief.header.event_date_text))
    console.print(table)
    console.print()

    if brief.sites:
        sites = Table(title="Sites", border_style="cyan")
        for col in ("Type", "Name", "Address", "Phone", "Nights"):
            sites.add_column(col)
        for site in brief.sites:
            nights = site.hotel_details.nights if site.hotel_details else None
            sites.add_row(
                site.type.value, _value(site.name), _value(site.address),
                _value(site.phone), _value(nights),
            )
        console.print(sites)
        console.print()

    if brief.contacts:
        contacts = Table(title="Contacts", border_style="cyan")
        for col in ("Group", "Name", "Title", "Office", "Cell", "Email"):
            contacts.add_column(col)
        for c in brief.contacts:
            contacts.add_row(
                c.group.value, _value(c.name), _value(c.title),
                _value(c.office), _value(c.cell), _value(c.email),
            )
        console.print(contacts)
        console.print()

    if brief.schedule and brief.schedule.flights:
        flights = Table(title="Flights", border_style="cyan")
        for col in ("Airline", "Flight", "Reservation", "Seat"):
            flights.add_column(col)
        for leg in brief.schedule.flights:
            flights.add_row(
                leg.airline, leg.flight_number,
                _value(leg.reservation_code), _value(leg.seat),
            )
        console.print(flights)
        console.print()

    _display_confidence(brief.confidence.model_dump())

    t = result.timings
    console.print(
        f"[dim]Pages: {result.extracted_pages}/{result.total_pages} | "
        f"Extract: {t.extract_ms}ms | Parse: {t.parse_ms}ms[/]"
    )
    console.print()


def _display_confidence(confidence: dict):
    """Display the coverage checklist as a rich table."""
    table = Table(title="Confidence", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Status", justify="center")

    def status_icon(ok: bool) -> str:
        return "[green]✓[/]" if ok else "[red]✗[/]"

    overall = confidence.get("overall", 0)
    table.add_row(
        f"Overall ({overall}%)",
        "[green]✓[/]" if overall >= 85 else "[yellow]⚠[/]",
    )
    table.add_row("Booking Number", status_icon(confidence.get("has_booking_number", False)))
    table.add_row("Header", status_icon(confidence.get("has_header", False)))
    table.add_row("Sites", status_icon(confidence.get("has_sites", False)))
    table.add_row("Contacts", status_icon(confidence.get("has_contacts", False)))

    console.print(table)

    missing = confidence.get("missing", [])
    if missing:
        console.print(f"[yellow]Missing:[/] {', '.join(missing)}")
    console.print()


# ─── Entry point (for python -m eventbrief.cli) ───────────────────────────────


if __name__ == "__main__":
    cli()
