"""
Main CLI application using Typer.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..adapters.api_client import BookingApiClient
from ..adapters.memory_store import InMemoryBusinessStore
from ..adapters.sql_store import SqlReservationStore
from ..config import AppConfig, get_default_config_path
from ..domain.exceptions import BookingRulesError
from ..domain.time_model import format_12h
from ..services.booking_service import BookingService

app = typer.Typer(
    name="simbook",
    help="Slots, prices and reservations for golf-simulator businesses",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")]
BusinessOption = Annotated[Optional[int], typer.Option("--business", "-b", help="Business id")]
DateOption = Annotated[Optional[str], typer.Option("--date", help="Date (YYYY-MM-DD). Defaults to today.")]
RemoteOption = Annotated[bool, typer.Option("--remote", help="Use the booking web API from api_base_url instead of the local database.")]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    config = AppConfig.load_from_yaml(config_file or get_default_config_path())
    logging.basicConfig(
        level=config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return config


def _parse_date(value: Optional[str]) -> date:
    if value is None:
        return pendulum.today().date()
    try:
        return pendulum.from_format(value, "YYYY-MM-DD").date()
    except ValueError as e:
        console.print(f"[red]Could not parse date {value!r}: {e}[/red]")
        raise typer.Exit(1)


def _build_service(config: AppConfig, remote: bool) -> BookingService:
    """
    Wire the service to the local database or to the booking web API.
    """
    if remote:
        if not config.api_base_url:
            raise ValueError("api_base_url must be set in the config to use --remote")
        client = BookingApiClient(config.api_base_url)
        return BookingService(business_store=client, reservation_store=client)

    store = SqlReservationStore(config.database_url)
    store.create_schema()
    return BookingService(
        business_store=InMemoryBusinessStore.from_config(config),
        reservation_store=store,
    )


def _fail(error: Exception) -> None:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def businesses(config_file: ConfigOption = None):
    """
    List all configured businesses.
    """
    try:
        config = _load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        _fail(e)

    if not config.businesses:
        console.print("[yellow]No businesses defined in the config file.[/yellow]")
        return

    table = Table(title="Configured businesses", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Location", style="dim")

    for business in config.businesses:
        table.add_row(str(business.id), business.name, business.location)

    console.print()
    console.print(table)
    console.print()


@app.command()
def slots(
    config_file: ConfigOption = None,
    business: BusinessOption = None,
    day: DateOption = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Booking length in minutes")] = None,
    remote: RemoteOption = False,
):
    """
    Show the start times of a day with availability and peak pricing.

    Examples:

        simbook slots --date 2024-11-26
        simbook slots -b 2 --date 2024-11-30 --duration 90
    """
    try:
        config = _load_config(config_file)
        business_id = config.resolve_business_id(business)
        target = _parse_date(day)
        service = _build_service(config, remote)

        calculator = service.calculator_for(business_id)
        length = duration or calculator.duration_config.min_duration
        day_slots = service.available_slots(business_id, target, length)
    except (FileNotFoundError, ValueError, BookingRulesError) as e:
        _fail(e)

    if not day_slots:
        console.print(f"[yellow]Closed on {target.isoformat()}.[/yellow]")
        return

    table = Table(
        title=f"{target.isoformat()} - {length} minutes",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="bold")
    table.add_column("Status")
    table.add_column("Peak")
    table.add_column("Price", justify="right")

    for slot in day_slots:
        status = "[green]available[/green]" if slot.is_available else "[red]booked[/red]"
        price = calculator.quote(target, slot.value, length)
        table.add_row(slot.display, status, "yes" if slot.is_peak else "", f"{price:.2f}")

    console.print()
    console.print(table)
    console.print()


@app.command()
def price(
    start: Annotated[str, typer.Option("--start", "-s", help="Start time (HH:MM)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Booking length in minutes")],
    config_file: ConfigOption = None,
    business: BusinessOption = None,
    day: DateOption = None,
):
    """
    Quote the price of a booking.
    """
    try:
        config = _load_config(config_file)
        business_id = config.resolve_business_id(business)
        target = _parse_date(day)
        settings = config.find_business(business_id)
        if settings is None:
            raise ValueError(f"Business {business_id} is not configured")
        total = settings.slot_calculator().quote(target, start, duration)
    except (FileNotFoundError, ValueError, BookingRulesError) as e:
        _fail(e)

    console.print(f"\n{target.isoformat()} {format_12h(start)}, {duration} minutes: [bold green]{total:.2f}[/bold green]\n")


@app.command()
def durations(config_file: ConfigOption = None, business: BusinessOption = None):
    """
    List the selectable booking durations.
    """
    try:
        config = _load_config(config_file)
        business_id = config.resolve_business_id(business)
        settings = config.find_business(business_id)
        if settings is None:
            raise ValueError(f"Business {business_id} is not configured")
        options = settings.slot_calculator().duration_options()
    except (FileNotFoundError, ValueError, BookingRulesError) as e:
        _fail(e)

    for option in options:
        console.print(f"  {option.value:>4}  {option.label}")


@app.command()
def book(
    start: Annotated[str, typer.Option("--start", "-s", help="Start time (HH:MM)")],
    duration: Annotated[int, typer.Option("--duration", "-d", help="Booking length in minutes")],
    config_file: ConfigOption = None,
    business: BusinessOption = None,
    day: DateOption = None,
    remote: RemoteOption = False,
):
    """
    Book a reservation.
    """
    try:
        config = _load_config(config_file)
        business_id = config.resolve_business_id(business)
        target = _parse_date(day)
        service = _build_service(config, remote)
        result = service.book(business_id, target, start, duration)
    except (FileNotFoundError, ValueError, BookingRulesError) as e:
        _fail(e)

    if not result.ok:
        console.print(f"\n[bold red]✗ {result.error}[/bold red]")
        if result.reason is not None:
            console.print(f"[dim]{result.reason}[/dim]\n")
        raise typer.Exit(1)

    reservation = result.reservation
    console.print(Panel.fit(
        f"[bold]Date:[/bold] {reservation.date.isoformat()}\n"
        f"[bold]Time:[/bold] {format_12h(reservation.start_time)}\n"
        f"[bold]Duration:[/bold] {reservation.duration} minutes\n"
        f"[bold]Price:[/bold] {reservation.price:.2f}",
        title="✓ Reservation confirmed"
    ))


@app.command()
def reservations(
    config_file: ConfigOption = None,
    business: BusinessOption = None,
    day: DateOption = None,
):
    """
    List the reservations of a day from the local database.
    """
    try:
        config = _load_config(config_file)
        business_id = config.resolve_business_id(business)
        target = _parse_date(day)
        store = SqlReservationStore(config.database_url)
        store.create_schema()
        booked = store.list_reservations(business_id, target)
    except (FileNotFoundError, ValueError, BookingRulesError) as e:
        _fail(e)

    if not booked:
        console.print(f"[yellow]No reservations on {target.isoformat()}.[/yellow]")
        return

    table = Table(title=f"Reservations {target.isoformat()}", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Time", style="bold")
    table.add_column("Duration")
    table.add_column("Price", justify="right")

    for reservation in booked:
        table.add_row(
            str(reservation.id),
            format_12h(reservation.start_time),
            f"{reservation.duration} min",
            f"{reservation.price:.2f}",
        )

    console.print()
    console.print(table)
    console.print()


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]simbook[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
