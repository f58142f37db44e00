"""
Main CLI application using Typer.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..adapters.json_repository import JsonScheduleRepository
from ..config import EngineConfig, get_default_config_path
from ..domain.exceptions import SlotEngineError
from ..domain.slot_calculator import SlotCalculator
from ..services.availability_service import AvailabilityService
from ..services.cache import TTLCache
from ..services.context import RequestContext

app = typer.Typer(
    name="slotengine",
    help="Compute bookable time slots for service providers",
    add_completion=False
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml")
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="Path to the JSON schedule data. Overrides data_file from config.")
]
TenantOption = Annotated[
    Optional[str],
    typer.Option("--tenant", "-t", help="Tenant to query. Overrides tenant_id from config.")
]


def _load_config(config_file: Optional[Path]) -> EngineConfig:
    """
    Load the config file; an absent default config falls back to defaults.
    An explicitly requested file must exist.
    """
    if config_file is not None:
        return EngineConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return EngineConfig.load_from_yaml(default_path)

    return EngineConfig()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_service(config: EngineConfig, data_file: Optional[Path]) -> AvailabilityService:
    source = data_file or config.data_file
    if source is None:
        raise FileNotFoundError(
            "No schedule data configured. Pass --data or set data_file in config.yaml."
        )

    repository = JsonScheduleRepository.from_file(source)
    calculator = SlotCalculator(timezone=config.timezone, step_min=config.step_min)
    cache: TTLCache = TTLCache(
        ttl_seconds=config.cache.ttl_seconds,
        max_entries=config.cache.max_entries,
    )
    return AvailabilityService(repository=repository, slot_calculator=calculator, cache=cache)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {error}")
    raise typer.Exit(1)


@app.command()
def slots(
    service_id: Annotated[str, typer.Argument(help="Service identifier")],
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    provider: Annotated[Optional[str], typer.Option("--provider", "-p", help="Provider identifier. Defaults to the service's assigned provider.")] = None,
    variant: Annotated[Optional[str], typer.Option("--variant", "-v", help="Variant name. Defaults to the first variant.")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Total duration in minutes for multi-service bookings")] = None,
    step: Annotated[Optional[int], typer.Option("--step", help="Slot step in minutes. Overrides step_min from config.")] = None,
    tz: Annotated[Optional[str], typer.Option("--tz", help="IANA timezone of the working hours. Overrides timezone from config.")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print slots as JSON")] = False,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    tenant: TenantOption = None,
):
    """
    List bookable slots for a service on a date.

    Examples:

        slotengine slots svc-1 2025-12-22

        slotengine slots svc-1 2025-12-22 --provider p-1 --variant "60 min" --step 30

        slotengine slots svc-1 2025-12-22 --json

        slotengine slots svc-1 2025-12-22 --tz America/New_York
    """
    try:
        config = _load_config(config_file)
        overrides = {
            key: value
            for key, value in (("step_min", step), ("timezone", tz))
            if value is not None
        }
        if overrides:
            config = EngineConfig.model_validate({**config.model_dump(), **overrides})
        _configure_logging(config.log_level)

        service = _build_service(config, data_file)
        context = RequestContext(tenant_id=tenant or config.tenant_id)

        found = asyncio.run(
            service.find_slots(
                context,
                service_id=service_id,
                date=date,
                variant_name=variant,
                provider_id=provider,
                total_duration_min=duration,
            )
        )
    except (FileNotFoundError, ValueError, SlotEngineError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps({"slots": found}, indent=2))
        return

    if not found:
        console.print(f"[yellow]⚠ No available slots on {date}.[/yellow]")
        return

    table = Table(
        title=f"Available slots on {date} ({config.timezone})",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Start", style="bold green")
    table.add_column("End")
    table.add_column("Start (UTC)", style="dim")

    for slot in found:
        table.add_row(slot["startTime"], slot["endTime"], slot["startISO"])

    console.print()
    console.print(table)
    console.print(f"[bold green]✓ {len(found)} slot(s)[/bold green]\n")


@app.command("fully-booked")
def fully_booked(
    provider_id: Annotated[str, typer.Argument(help="Provider identifier")],
    year: Annotated[int, typer.Argument(help="Year, e.g. 2025")],
    month: Annotated[int, typer.Argument(help="Month, 1-12")],
    as_json: Annotated[bool, typer.Option("--json", help="Print dates as JSON")] = False,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    tenant: TenantOption = None,
):
    """
    List the dates in a month on which a provider has no bookable slot.
    """
    try:
        config = _load_config(config_file)
        _configure_logging(config.log_level)

        service = _build_service(config, data_file)
        context = RequestContext(tenant_id=tenant or config.tenant_id)

        dates = asyncio.run(
            service.fully_booked_dates(context, provider_id=provider_id, year=year, month=month)
        )
    except (FileNotFoundError, ValueError, SlotEngineError) as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps({"fullyBooked": dates}, indent=2))
        return

    console.print(f"\n[bold cyan]Fully booked dates for {provider_id} in {year}-{month:02d}:[/bold cyan]")
    for value in dates:
        console.print(f"  {value}")
    console.print(f"\n[bold]{len(dates)} date(s)[/bold]\n")


@app.command()
def providers(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    tenant: TenantOption = None,
):
    """
    List the providers in the schedule data.
    """
    try:
        config = _load_config(config_file)
        source = data_file or config.data_file
        if source is None:
            raise FileNotFoundError("No schedule data configured. Pass --data or set data_file in config.yaml.")

        repository = JsonScheduleRepository.from_file(source)
        found = asyncio.run(repository.list_providers(tenant or config.tenant_id))
    except (FileNotFoundError, ValueError, SlotEngineError) as e:
        _fail(e)

    if not found:
        console.print("[yellow]No providers defined for this tenant.[/yellow]")
        return

    table = Table(
        title="Providers",
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("ID", style="bold yellow")
    table.add_column("Name")
    table.add_column("Working days", style="dim")
    table.add_column("Active")

    for schedule in found:
        working_days = ", ".join(
            token for token, hours in schedule.working_hours.items() if hours is not None
        )
        table.add_row(
            schedule.provider_id,
            schedule.name,
            working_days or "-",
            "yes" if schedule.active else "no",
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
    console.print(f"\n[bold cyan]slotengine[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
