"""CLI entry point."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from stormspine.core.config import get_settings
from stormspine.core.exceptions import StormSpineError
from stormspine.core.logging import configure_logging
from stormspine.core.stormspine import StormSpine

app = typer.Typer(
    name="stormspine",
    help="Severe weather feeds from SPC, NWS, NHC and SWPC",
    no_args_is_help=True,
)
console = Console()


def _run(action: Callable[[StormSpine], Awaitable[Any]]) -> Any:
    """Run ``action`` against a fresh StormSpine, exiting 1 on feed errors."""
    settings = get_settings()
    configure_logging(settings)

    async def main() -> Any:
        async with StormSpine(settings) as spine:
            return await action(spine)

    try:
        return asyncio.run(main())
    except StormSpineError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def _time(value: Any) -> str:
    return value.strftime("%Y-%m-%d %H:%MZ") if value is not None else "-"


@app.command()
def version() -> None:
    """Show version."""
    from stormspine import __version__

    console.print(f"stormspine {__version__}")


@app.command()
def warnings(
    events: list[str] = typer.Argument(None, help="NWS event names, e.g. 'tornado warning'"),
) -> None:
    """List active NWS warnings."""
    found = _run(lambda spine: spine.warnings.fetch_active_warnings(events or None))

    table = Table(title=f"Active warnings ({len(found)})")
    table.add_column("Name")
    table.add_column("Sent")
    table.add_column("Expires")
    table.add_column("Area")
    for warning in found:
        table.add_row(warning.name, _time(warning.sent), _time(warning.expires), warning.area_description)
    console.print(table)


@app.command()
def watches() -> None:
    """List active tornado and severe thunderstorm watches."""

    async def fetch(spine: StormSpine):
        return await spine.watches.fetch_active_tornado_watches() + (
            await spine.watches.fetch_active_severe_thunderstorm_watches()
        )

    found = _run(fetch)
    table = Table(title=f"Active watches ({len(found)})")
    table.add_column("Watch")
    table.add_column("Sent")
    table.add_column("Expires")
    table.add_column("Counties", justify="right")
    table.add_column("Hazards")
    for watch in found:
        hazards = ""
        if watch.hazards is not None:
            hazards = watch.hazards.message or str(watch.hazards)
        table.add_row(watch.name, _time(watch.sent), _time(watch.expires), str(len(watch.counties)), hazards)
    console.print(table)


@app.command()
def mds() -> None:
    """List active mesoscale discussions."""
    found = _run(lambda spine: spine.mesoscale.fetch_active_mesoscale_discussions())
    table = Table(title=f"Mesoscale discussions ({len(found)})")
    table.add_column("#", justify="right")
    table.add_column("Issued")
    table.add_column("Concerning")
    table.add_column("Areas affected")
    for discussion in found:
        table.add_row(
            str(discussion.number), _time(discussion.issued), discussion.concerning, discussion.areas_affected
        )
    console.print(table)


@app.command()
def outlook(day: int = typer.Option(1, "--day", "-d", min=1, max=8, help="Outlook day (1-8)")) -> None:
    """Show the SPC convective outlook for a day."""

    async def fetch(spine: StormSpine):
        if day <= 3:
            return await spine.outlooks.fetch_categorical_outlook(day)
        return await spine.outlooks.fetch_extended_outlook(day)

    areas = _run(fetch)
    table = Table(title=f"Day {day} outlook")
    table.add_column("Risk")
    table.add_column("Valid")
    table.add_column("Expires")
    table.add_column("Polygons", justify="right")
    for area in areas:
        table.add_row(area.label2 or area.label, _time(area.valid), _time(area.expire), str(len(area.polygons)))
    console.print(table)


@app.command("space-weather")
def space_weather() -> None:
    """Show the current NOAA space weather scales."""

    async def fetch(spine: StormSpine):
        source = spine.space_weather
        return await asyncio.gather(
            source.current_geomagnetic_storm_scale(),
            source.current_solar_radiation_storm_scale(),
            source.current_radio_blackout_scale(),
        )

    (kp, geomagnetic), (protons, radiation), (xray, blackout) = _run(fetch)
    table = Table(title="Space weather")
    table.add_column("Scale")
    table.add_column("Level")
    table.add_column("Reading")
    table.add_row("Geomagnetic storm", geomagnetic, f"Kp {kp.kp_index:g}" if kp else "-")
    table.add_row("Solar radiation storm", radiation, f"{protons.flux:.3g} pfu" if protons else "-")
    table.add_row("Radio blackout", blackout, f"{xray.flux:.3g} W/m2" if xray else "-")
    console.print(table)


@app.command()
def listen() -> None:
    """Print new watches, mesoscale discussions and warnings until interrupted."""

    async def main(spine: StormSpine) -> None:
        events = spine.events

        @events.on_watch_issued
        def on_watches(new_watches, new_boxes) -> None:
            for watch in new_watches:
                console.print(f"[bold red]{watch.name}[/bold red] issued {_time(watch.sent)}")
            for box in new_boxes:
                console.print(f"  watch box {box.number}: {box.name}")

        @events.on_mesoscale_discussion_issued
        def on_discussions(discussions) -> None:
            for discussion in discussions:
                console.print(f"[bold yellow]MD {discussion.number}[/bold yellow] {discussion.concerning}")

        @events.on_warning_issued
        def on_warning(warning, transition) -> None:
            console.print(f"[bold]{warning.name}[/bold] ({transition.value}) {warning.area_description}")

        spine.enable_events()
        console.print("Listening for new watches, discussions and warnings. Ctrl+C to stop.")
        await asyncio.Event().wait()

    try:
        _run(main)
    except KeyboardInterrupt:
        console.print("Stopped.")


if __name__ == "__main__":
    app()
