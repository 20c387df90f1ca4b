"""
Fact Universe CLI.

A terminal harness around the adaptive practice engine.

Commands:
- fact-universe practice   - Adaptive practice round
- fact-universe test       - 60 second master test
- fact-universe duel       - Two-player race on one keyboard
- fact-universe stats      - Mastery per grade and family
- fact-universe grades     - Grade table
- fact-universe reset      - Clear all mastery
"""
from __future__ import annotations

import random
import sys
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from config import get_settings
from src.adaptive.engine import PracticeEngine
from src.core.exceptions import FactUniverseError
from src.core.grades import GRADE_CONFIG, get_grade_config
from src.delivery.console import ConsoleDisplay
from src.delivery.display import run_duel, run_master_test, run_practice_round
from src.modes.duel import Duel
from src.modes.master_test import MasterTest
from src.modes.practice import PRACTICE_PROBLEM_LIMITS, PRACTICE_TIME_LIMITS, PracticeRound
from src.persistence.models import MASTERED_STRENGTH, MAX_STRENGTH

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="fact-universe",
    help="Fact Universe: adaptive arithmetic fact drills",
    no_args_is_help=True,
)
console = Console()


def _build_engine(seed: Optional[int]) -> PracticeEngine:
    rng = random.Random(seed) if seed is not None else None
    return PracticeEngine.from_settings(get_settings(), rng=rng)


# =============================================================================
# Drill Commands
# =============================================================================


@app.command()
def practice(
    grade: int = typer.Option(3, "--grade", "-g", help="Grade level (1-8)"),
    ops: Optional[list[str]] = typer.Option(
        None, "--op", "-o", help="Operation to drill (repeatable): + - x /"
    ),
    problems: int = typer.Option(0, "--problems", "-n", help="Problem limit (0 = none)"),
    seconds: int = typer.Option(0, "--seconds", "-t", help="Time limit in seconds (0 = none)"),
    keyed: bool = typer.Option(False, "--keyed", help="Type answers instead of multiple choice"),
    no_adapt: bool = typer.Option(False, "--no-adapt", help="Random problems at the grade's full range"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Start an adaptive practice round. Enter 'q' to stop."""
    if seconds not in PRACTICE_TIME_LIMITS:
        logger.warning(f"Unusual time limit {seconds}s (menu offers {PRACTICE_TIME_LIMITS})")
    if problems not in PRACTICE_PROBLEM_LIMITS:
        logger.warning(f"Unusual problem limit {problems} (menu offers {PRACTICE_PROBLEM_LIMITS})")

    engine = _build_engine(seed)
    try:
        session = engine.start_session(
            grade,
            ops or None,
            adaptive=not no_adapt,
            multiple_choice=not keyed,
            time_limit=seconds,
            problem_limit=problems,
        )
        console.print(f"\n[bold cyan]{get_grade_config(grade).name} Practice[/bold cyan]")
        run_practice_round(PracticeRound(engine, session), ConsoleDisplay(console))
    except FactUniverseError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        engine.close()


@app.command()
def test(
    grade: int = typer.Option(3, "--grade", "-g", help="Grade level (1-8)"),
    keyed: bool = typer.Option(False, "--keyed", help="Type answers instead of multiple choice"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """Take the 60 second master test for a grade."""
    settings = get_settings()
    engine = _build_engine(seed)
    try:
        master = MasterTest(engine, grade, multiple_choice=not keyed, duration=settings.master_test_seconds)
        console.print(
            f"\n[bold cyan]{get_grade_config(grade).name} Master Test[/bold cyan]  "
            f"[dim]target {master.target_score} in {settings.master_test_seconds}s[/dim]"
        )
        result = run_master_test(master, ConsoleDisplay(console))
    except FactUniverseError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        engine.close()

    if not result.passed:
        raise typer.Exit(2)


@app.command()
def duel(
    grade: int = typer.Option(3, "--grade", "-g", help="Grade level (1-8)"),
    ops: Optional[list[str]] = typer.Option(
        None, "--op", "-o", help="Operation to race on (repeatable): + - x /"
    ),
    max_addend: Optional[int] = typer.Option(None, "--max-addend", help="Largest addend (5-50)"),
    max_factor: Optional[int] = typer.Option(None, "--max-factor", help="Largest factor (2-20)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed"),
) -> None:
    """
    Two players race on one keyboard.

    Player 1 answers with a/s/d/f, player 2 with j/k/l/;. Type the keys
    pressed and hit Enter; 'q' stops the duel. Mastery is not recorded.
    """
    settings = get_settings()
    try:
        race = Duel(
            grade,
            ops or None,
            max_addend=max_addend,
            max_factor=max_factor,
            duration=settings.duel_seconds,
            rng=random.Random(seed) if seed is not None else None,
        )
    except FactUniverseError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"\n[bold cyan]{get_grade_config(grade).name} Duel[/bold cyan]  "
        f"[dim]{settings.duel_seconds}s, addends to {race.max_addend}, factors to {race.max_factor}[/dim]"
    )
    run_duel(race, ConsoleDisplay(console))


# =============================================================================
# Progress Commands
# =============================================================================


@app.command()
def stats(
    grade: Optional[int] = typer.Option(None, "--grade", "-g", help="Only this grade"),
) -> None:
    """Show mastery per grade and operator family."""
    engine = _build_engine(None)
    try:
        _show_stats(engine, grade)
    finally:
        engine.close()


def _show_stats(engine: PracticeEngine, grade: Optional[int]) -> None:
    store = engine.store

    console.print("\n[bold cyan]Mastery Statistics[/bold cyan]")
    console.print("=" * 40)

    summary = Table(show_header=False, box=None)
    summary.add_column("Metric", style="dim")
    summary.add_column("Value", style="bold")
    facts = store.facts()
    summary.add_row("Facts tracked", str(len(facts)))
    summary.add_row("Mastered (strength >= 3)", str(sum(1 for f in facts if f.strength >= MASTERED_STRENGTH)))
    summary.add_row("Retired (strength 5)", str(sum(1 for f in facts if f.strength >= MAX_STRENGTH)))
    summary.add_row("Answers recorded", str(sum(f.attempts for f in facts)))
    console.print(summary)

    grades = [grade] if grade is not None else sorted(store.document.grade_progress)
    if not grades:
        console.print("\n[dim]No grades practised yet.[/dim]")
        return

    table = Table()
    table.add_column("Grade")
    table.add_column("Addend ceiling")
    table.add_column("Factor ceiling")
    table.add_column("Mastery")
    for g in grades:
        try:
            config = get_grade_config(g)
        except FactUniverseError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)
        progress = store.grade_progress(g)
        lights = engine.mastery_lights(g)
        table.add_row(
            config.name,
            f"{progress.current_max_addend}/{config.max_addend}",
            f"{progress.current_max_factor}/{config.max_factor}" if config.max_factor else "-",
            "  ".join(f"{family.value} {fraction * 100:.0f}%" for family, fraction in lights.items()),
        )
    console.print(table)


@app.command()
def grades() -> None:
    """Show the grade table."""
    table = Table()
    table.add_column("Grade")
    table.add_column("Operations")
    table.add_column("Max addend")
    table.add_column("Max factor")
    table.add_column("Target")
    for config in GRADE_CONFIG.values():
        table.add_row(
            config.name,
            " ".join(op.display_symbol for op in config.operators),
            str(config.max_addend),
            str(config.max_factor) if config.max_factor else "-",
            str(config.target_score),
        )
    console.print(table)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Clear all mastery and grade progress."""
    if not confirm and not Confirm.ask("Reset ALL mastery? This cannot be undone!", default=False):
        raise typer.Exit(0)

    engine = _build_engine(None)
    try:
        engine.reset_progress()
    finally:
        engine.close()
    console.print("[green]All mastery has been reset.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging() -> None:
    """Route loguru output according to settings."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB", retention=5)


def run() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    run()
