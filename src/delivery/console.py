"""
Rich terminal display for drills.

Shows problems in a panel, reads the answer with a prompt and times it.
Multiple choice answers are entered as 1-4 (or the value itself); 'q' quits.
"""
from __future__ import annotations

import time

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from src.adaptive.models import AnswerOutcome, LevelUp, PresentedProblem
from src.core.operators import OperatorFamily
from src.delivery.display import Response
from src.modes.clock import SessionClock
from src.modes.duel import KEY_BINDINGS, Duel, DuelAnswer
from src.modes.master_test import MasterTestResult
from src.modes.practice import RoundSummary

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}

QUIT_WORDS = {"q", "quit", "exit"}

# Choice keys per player, in choice order
PLAYER_KEYS = {
    number: [key for key, (player, _) in sorted(KEY_BINDINGS.items(), key=lambda item: item[1]) if player == number]
    for number in (1, 2)
}


def light_style(fraction: float) -> str:
    """Colour for a mastery light."""
    if fraction >= 0.9:
        return "green"
    if fraction >= 0.7:
        return "cyan"
    if fraction >= 0.4:
        return "yellow"
    if fraction > 0:
        return "red"
    return "dim"


class ConsoleDisplay:
    """DisplayCollaborator and DuelDisplay backed by a rich Console."""

    def __init__(self, console: Console | None = None, pause: bool = False):
        self.console = console or Console()
        self.pause = pause  # Sleep for the feedback delay after each answer

    def present(self, presented: PresentedProblem, clock: SessionClock) -> Response:
        timer_style = STYLES["warning"] if clock.in_warning_zone else STYLES["dim"]
        title = f"[{timer_style}]{clock.display_seconds}s[/{timer_style}]"

        content = f"[bold]{presented.text} = ?[/bold]"
        if presented.choices:
            options = "   ".join(f"[cyan]{i + 1}[/cyan]) {c}" for i, c in enumerate(presented.choices))
            content += f"\n\n{options}"

        self.console.print(Panel(content, title=title, title_align="right", border_style="cyan", padding=(1, 2)))

        started = time.monotonic()
        raw = ""
        while not raw:  # Blank entry is not an answer
            raw = Prompt.ask("[dim]Answer[/dim]", console=self.console).strip()
        elapsed_ms = int((time.monotonic() - started) * 1000)

        if raw.lower() in QUIT_WORDS:
            return Response(user_answer=None, response_time_ms=elapsed_ms, quit=True)
        return Response(user_answer=self._resolve_choice(raw, presented), response_time_ms=elapsed_ms)

    @staticmethod
    def _resolve_choice(raw: str, presented: PresentedProblem) -> str:
        """Map '1'-'4' to the corresponding choice value."""
        if presented.choices and raw in {str(i + 1) for i in range(len(presented.choices))}:
            return str(presented.choices[int(raw) - 1])
        return raw

    def show_feedback(self, outcome: AnswerOutcome) -> None:
        if outcome.is_correct:
            self.console.print(f"[{STYLES['correct']}]✓ Correct[/]  [dim]strength {outcome.strength}/5[/dim]")
        else:
            self.console.print(
                f"[{STYLES['incorrect']}]✗ Correct answer: {outcome.correct_answer}[/]"
            )
        if self.pause:
            time.sleep(outcome.feedback_delay_ms / 1000)

    def show_level_up(self, level_up: LevelUp) -> None:
        self.console.print(Panel(
            f"[bold]Level up![/bold] {level_up.family.display_name} now goes up to "
            f"{level_up.new_ceiling}",
            border_style="green",
        ))

    def show_mastery(self, lights: dict[OperatorFamily, float]) -> None:
        table = Table(show_header=False, box=None)
        table.add_column("Family", style="dim")
        table.add_column("Mastery", style="bold")
        for family, fraction in lights.items():
            style = light_style(fraction)
            table.add_row(family.display_name, f"[{style}]●[/{style}] {fraction * 100:.0f}%")
        self.console.print(table)

    def show_round_summary(self, summary: RoundSummary) -> None:
        self.console.print(Panel(
            f"[bold]Practice Complete![/bold]\n\n"
            f"Score: {summary.score}\n"
            f"Correct: {summary.correct} / {summary.attempted}\n"
            f"Accuracy: {summary.accuracy_percent}%",
            title="Summary",
            border_style="green",
        ))

    def show_test_result(self, result: MasterTestResult) -> None:
        if result.passed:
            headline = f"[{STYLES['correct']}]You Passed![/] You met the target score of {result.target_score}!"
        else:
            headline = (
                f"[{STYLES['incorrect']}]Try Again![/] You were {result.points_away} points away "
                f"from the target of {result.target_score}."
            )
        self.console.print(Panel(
            f"{headline}\n\n"
            f"Score: {result.score}\n"
            f"Accuracy: {result.accuracy * 100:.0f}%\n"
            f"Correct: {result.correct} / {result.attempted}",
            title="Test Results",
            border_style="green" if result.passed else "red",
        ))

    # =========================================================================
    # Duel
    # =========================================================================

    def show_duel(self, duel: Duel) -> None:
        table = Table(title=f"{duel.clock.display_seconds}s", expand=True)
        for player in duel.players:
            table.add_column(f"Player {player.number}  [bold]{player.score}[/bold]", justify="center")

        cells = []
        for player in duel.players:
            keys = PLAYER_KEYS[player.number]
            if player.problem is None:
                cells.append("[dim]waiting[/dim]")
                continue
            options = "   ".join(f"[cyan]{key}[/cyan]) {c}" for key, c in zip(keys, player.choices))
            cells.append(f"[bold]{player.problem.text} = ?[/bold]\n\n{options}")
        table.add_row(*cells)
        self.console.print(table)

    def read_keys(self, duel: Duel) -> str | None:
        raw = Prompt.ask("[dim]Keys (a/s/d/f vs j/k/l/;)[/dim]", console=self.console, default="")
        if raw.strip().lower() in QUIT_WORDS:
            return None
        return raw

    def show_duel_answer(self, answer: DuelAnswer) -> None:
        if answer.is_correct:
            self.console.print(f"Player {answer.player}: [{STYLES['correct']}]✓ {answer.chosen}[/]")
        else:
            self.console.print(
                f"Player {answer.player}: [{STYLES['incorrect']}]✗ {answer.chosen}[/] "
                f"[dim](answer {answer.correct_answer})[/dim]"
            )

    def show_duel_result(self, duel: Duel, winner: int | None) -> None:
        first, second = duel.players
        headline = "It's a tie!" if winner is None else f"Player {winner} wins!"
        self.console.print(Panel(
            f"[bold]{headline}[/bold]\n\n"
            f"Player 1: {first.score}\n"
            f"Player 2: {second.score}",
            title="Duel Over",
            border_style="green",
        ))
