"""CLI for the PT routine engine.

Developer CLI to generate, inspect, edit and schedule routines locally,
running the same service code path the app screens use.
"""

from datetime import date

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pt_routines.catalog.loader import ExerciseCatalog, get_default_catalog
from pt_routines.catalog.models import BodyArea, Equipment, Intensity
from pt_routines.config.settings import settings
from pt_routines.core.logger import setup_logger
from pt_routines.db.errors import RoutineNotFoundError, StorageError
from pt_routines.db.repository import RoutineStore
from pt_routines.planning.errors import NoEligibleExercisesError, PlanningInvariantError, RoutineEditError
from pt_routines.planning.invariants import OVERVIEW_SWAP_TIME_TOLERANCE_MIN
from pt_routines.planning.patterns import pattern_label
from pt_routines.planning.profile import UserProfile
from pt_routines.routines.edits import RoutineEdit
from pt_routines.routines.models import Routine
from pt_routines.services.routine_service import RoutineService

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="pt-routines",
    help="PT routine engine CLI - generate, edit and schedule weekly routines",
    add_completion=False,
)

DAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
DEFAULT_CANDIDATE_LIMIT = 10


def _get_service() -> RoutineService:
    """Service wired to the configured database and the bundled catalog."""
    return RoutineService(RoutineStore(), get_default_catalog())


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=settings.log_file)


def _fail(title: str, detail: str) -> None:
    console.print(Panel(Text(title, style="bold red"), subtitle=detail, border_style="red"))


def _print_routine(routine: Routine, catalog: ExerciseCatalog) -> None:
    header = f"{routine.description}\nid: {routine.id}"
    console.print(Panel(Text(routine.name, style="bold green"), subtitle=header, border_style="green"))

    for day_index in routine.training_days():
        slots = routine.slots_for_day(day_index)
        table = Table(
            title=f"{DAY_LABELS[day_index]} - {routine.day_minutes(day_index)} min ({pattern_label([s.exercise_id for s in slots])})",
            title_justify="left",
        )
        table.add_column("#", justify="right")
        table.add_column("Slot")
        table.add_column("Exercise")
        table.add_column("Min", justify="right")
        for slot in slots:
            exercise = catalog.get(slot.exercise_id)
            table.add_row(
                str(slot.order + 1),
                slot.id,
                exercise.name if exercise is not None else slot.exercise_id,
                str(slot.estimated_minutes),
            )
        console.print(table)


def _load_routine(service: RoutineService, routine_id: str | None) -> Routine:
    if routine_id is None:
        routine = service.get_active_routine()
        if routine is None:
            _fail("No active routine", "Pass a routine id or schedule a routine first")
            raise typer.Exit(1)
        return routine
    try:
        return service.get_routine(routine_id)
    except RoutineNotFoundError as e:
        _fail("Routine not found", routine_id)
        raise typer.Exit(1) from e


@app.command()
def generate(
    area: list[BodyArea] = typer.Option(..., "--area", "-a", help="Target body area (repeatable)"),
    intensity: Intensity | None = typer.Option(None, "--intensity", "-i", help="Target intensity (one step either side allowed)"),
    intensity_min: Intensity | None = typer.Option(None, "--intensity-min", help="Lowest intensity for a range"),
    intensity_max: Intensity | None = typer.Option(None, "--intensity-max", help="Highest intensity for a range"),
    equipment: list[Equipment] = typer.Option([], "--equipment", "-e", help="Available equipment (repeatable)"),
    days: int = typer.Option(3, "--days", "-d", help="Training days per week (1-7)"),
    minutes: int = typer.Option(20, "--minutes", "-m", help="Max minutes per day"),
    weekly_minutes: int | None = typer.Option(None, "--weekly-minutes", help="Max minutes per week"),
    save: bool = typer.Option(True, "--save/--no-save", help="Store the generated routine"),
) -> None:
    """Generate a weekly routine from profile constraints."""
    raw_profile: dict[str, object] = {
        "target_body_areas": area,
        "equipment_access": equipment,
        "days_per_week": days,
        "max_minutes_per_day": minutes,
        "max_minutes_per_week": weekly_minutes,
    }
    if intensity is not None:
        raw_profile["intensity"] = intensity
    else:
        raw_profile["intensity_min"] = intensity_min
        raw_profile["intensity_max"] = intensity_max

    try:
        profile = UserProfile.model_validate(raw_profile)
    except ValidationError as e:
        _fail("Invalid profile", str(e))
        raise typer.Exit(1) from e

    service = _get_service()
    try:
        routine = service.create_routine_from_profile(profile, save=save)
    except NoEligibleExercisesError as e:
        _fail("No routine generated", str(e))
        raise typer.Exit(1) from e
    except StorageError as e:
        _fail("Routine could not be saved", str(e))
        raise typer.Exit(1) from e

    _print_routine(routine, service.catalog)


@app.command()
def show(routine_id: str | None = typer.Argument(None, help="Routine id (active routine when omitted)")) -> None:
    """Show a routine day by day."""
    service = _get_service()
    _print_routine(_load_routine(service, routine_id), service.catalog)


@app.command(name="list")
def list_routines() -> None:
    """List stored routines, most recently updated first."""
    service = _get_service()
    routines = service.list_routines()
    if not routines:
        console.print("[yellow]No routines stored[/yellow]")
        return

    active_id = service.store.get_active_routine_id()
    table = Table(title="Routines")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Days", justify="right")
    table.add_column("Min/week", justify="right")
    table.add_column("Updated")
    for routine in routines:
        marker = " *" if routine.id == active_id else ""
        table.add_row(
            f"{routine.id}{marker}",
            routine.name,
            str(routine.days_per_week),
            str(routine.total_weekly_minutes),
            routine.updated_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command(name="swap-candidates")
def swap_candidates(
    routine_id: str = typer.Argument(..., help="Routine id"),
    slot_id: str = typer.Argument(..., help="Slot id"),
    tolerance: int | None = typer.Option(None, "--tolerance", "-t", help="Max minute difference for same-area matches"),
    overview: bool = typer.Option(
        False, "--overview", help=f"Use the routine overview tolerance ({OVERVIEW_SWAP_TIME_TOLERANCE_MIN} min) unless --tolerance is set"
    ),
    limit: int = typer.Option(DEFAULT_CANDIDATE_LIMIT, "--limit", "-n", help="Number of candidates to show"),
) -> None:
    """List ranked replacement exercises for a slot."""
    if tolerance is None and overview:
        tolerance = OVERVIEW_SWAP_TIME_TOLERANCE_MIN

    service = _get_service()
    try:
        candidates = service.swap_candidates(routine_id, slot_id, tolerance_min=tolerance)
    except RoutineNotFoundError as e:
        _fail("Routine not found", routine_id)
        raise typer.Exit(1) from e
    except RoutineEditError as e:
        _fail("Slot not found", str(e))
        raise typer.Exit(1) from e

    if not candidates:
        console.print("[yellow]No eligible replacement exercises[/yellow]")
        return

    table = Table(title=f"Swap candidates for {slot_id}")
    table.add_column("Exercise id")
    table.add_column("Name")
    table.add_column("Min", justify="right")
    table.add_column("Same area")
    for candidate in candidates[:limit]:
        table.add_row(
            candidate.exercise.id,
            candidate.exercise.name,
            str(candidate.minutes),
            "yes" if candidate.shares_body_area else "no",
        )
    console.print(table)


def _apply(routine_id: str, edit: RoutineEdit) -> None:
    service = _get_service()
    try:
        routine = service.edit_routine(routine_id, edit)
    except RoutineNotFoundError as e:
        _fail("Routine not found", routine_id)
        raise typer.Exit(1) from e
    except (RoutineEditError, PlanningInvariantError) as e:
        _fail("Edit rejected", str(e))
        raise typer.Exit(1) from e
    except StorageError as e:
        _fail("Routine could not be saved", str(e))
        raise typer.Exit(1) from e

    _print_routine(routine, service.catalog)


@app.command()
def swap(
    routine_id: str = typer.Argument(..., help="Routine id"),
    slot_id: str = typer.Argument(..., help="Slot id"),
    exercise_id: str = typer.Argument(..., help="Replacement exercise id"),
    whole_day: bool = typer.Option(False, "--whole-day", help="Replace every slot of this exercise on that day"),
) -> None:
    """Swap the exercise in a slot."""
    edit = RoutineEdit(
        change_type="swap_day" if whole_day else "swap_slot",
        slot_id=slot_id,
        replacement_exercise_id=exercise_id,
    )
    _apply(routine_id, edit)


@app.command()
def move(
    routine_id: str = typer.Argument(..., help="Routine id"),
    slot_id: str = typer.Argument(..., help="Slot id"),
    day: int = typer.Argument(..., help="Target day index (0=Mon .. 6=Sun)"),
) -> None:
    """Move a slot to another day."""
    _apply(routine_id, RoutineEdit(change_type="move_slot", slot_id=slot_id, target_day_index=day))


@app.command()
def schedule(
    routine_id: str = typer.Argument(..., help="Routine id"),
    start: str | None = typer.Option(None, "--start", "-s", help="Start date YYYY-MM-DD (today when omitted)"),
) -> None:
    """Confirm a routine and project it onto a calendar week."""
    try:
        start_date = date.fromisoformat(start) if start else date.today()
    except ValueError as e:
        _fail("Invalid start date", str(start))
        raise typer.Exit(1) from e

    service = _get_service()
    try:
        plan = service.confirm_and_start(routine_id, start_date)
    except RoutineNotFoundError as e:
        _fail("Routine not found", routine_id)
        raise typer.Exit(1) from e
    except StorageError as e:
        _fail("Week plan could not be saved", str(e))
        raise typer.Exit(1) from e

    logger.debug("Week plan created", plan_id=plan.id)
    console.print(
        Panel(
            Text(f"Week plan {plan.id}", style="bold green"),
            subtitle=f"{plan.start_date.isoformat()} .. {plan.end_date.isoformat()}",
            border_style="green",
        )
    )
    table = Table()
    table.add_column("Date")
    table.add_column("Session")
    table.add_column("Exercise")
    for session in plan.scheduled_sessions:
        table.add_row(
            f"{DAY_LABELS[session.session_date.weekday()]} {session.session_date.isoformat()}",
            session.id,
            session.exercise_id,
        )
    console.print(table)


@app.command()
def delete(
    routine_id: str = typer.Argument(..., help="Routine id"),
    confirm: bool = typer.Option(False, "--confirm", help="Confirm deletion (required for safety)"),
) -> None:
    """Delete a routine and its week plans."""
    if not confirm:
        console.print("[red]Error:[/red] --confirm flag is required for safety", style="bold red")
        raise typer.Exit(1)

    try:
        _get_service().delete_routine(routine_id)
    except RoutineNotFoundError as e:
        _fail("Routine not found", routine_id)
        raise typer.Exit(1) from e

    console.print(f"[green]Deleted routine {routine_id}[/green]")


if __name__ == "__main__":
    app()
