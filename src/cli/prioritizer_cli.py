"""
Tense Prioritizer CLI - inspect level-driven prioritization from the terminal.

Usage:
    tense-prioritizer plan B1 --progress progress.json
    tense-prioritizer plan B1 --json
    tense-prioritizer stage A2 --progress progress.json
    tense-prioritizer gaps B2 --progress progress.json
    tense-prioritizer weights B1 --progress progress.json
    tense-prioritizer chain "subjunctive|subjImpf"

The progress file is a JSON array of {"mood", "tense", "score"} records
(or an object mapping "mood|tense" keys to scores).
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from src.prioritizer.level_prioritizer import LevelDrivenPrioritizer
from src.prioritizer.models import RankedTense
from src.prioritizer.utils import normalize_level

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="tense-prioritizer",
    help="Level-driven mood/tense prioritization for CEFR learners",
    no_args_is_help=True,
)

console = Console()

STATUS_STYLES = {
    "completed": "green",
    "in_progress": "yellow",
    "started": "cyan",
    "not_started": "dim",
}


def _level_callback(value: str | None) -> str:
    if value is None:
        return get_settings().default_level
    level = normalize_level(value)
    if level is None:
        raise typer.BadParameter(f"'{value}' is not a CEFR level (A1, A2, B1, B2, C1, C2)")
    return level


LevelArg = Annotated[
    str | None,
    typer.Argument(help="Learner CEFR level (defaults to PRIORITIZER_DEFAULT_LEVEL)", callback=_level_callback),
]
ProgressOpt = Annotated[
    Path | None,
    typer.Option("--progress", "-p", help="JSON mastery snapshot"),
]


def _load_progress(path: Path | None) -> list[Any] | dict[str, Any] | None:
    """Read a mastery snapshot; exits with code 1 when it cannot be used."""
    if path is None:
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        console.print(f"[red]Cannot read progress file {escape(str(path))}: {escape(str(exc.strerror or exc))}[/]")
        raise typer.Exit(1)
    except ValueError as exc:
        # JSONDecodeError and UnicodeDecodeError
        console.print(f"[red]Invalid JSON in {escape(str(path))}: {escape(str(exc))}[/]")
        raise typer.Exit(1)

    if not isinstance(data, (list, dict)):
        console.print(f"[red]Progress file {escape(str(path))} must hold a list of records or a key -> score object[/]")
        raise typer.Exit(1)

    logger.debug("Loaded {} progress entries from {}", len(data), path)
    return data


def _fmt(value: float | None, digits: int = 1) -> str:
    return "-" if value is None else f"{value:.{digits}f}"


def _ranked_table(title: str, items: tuple[RankedTense, ...]) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Tense", style="cyan")
    table.add_column("Family")
    table.add_column("Level", justify="center")
    table.add_column("Priority", style="green", justify="right")
    table.add_column("Readiness", justify="right")
    table.add_column("Mastery", justify="right")

    for index, item in enumerate(items, start=1):
        tense = f"{item.key} [magenta](prereq)[/]" if item.is_prerequisite else item.key
        table.add_row(
            str(index),
            tense,
            item.family,
            item.original_level or item.introduced_at,
            _fmt(item.priority),
            _fmt(item.readiness, 2),
            _fmt(item.mastery),
        )
    return table


# =============================================================================
# Commands
# =============================================================================


@app.command()
def plan(
    level: LevelArg = None,
    progress: ProgressOpt = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the full debug summary as JSON")] = False,
) -> None:
    """Show the core / review / exploration plan for a level."""
    records = _load_progress(progress)
    prioritizer = LevelDrivenPrioritizer()

    if as_json:
        console.print_json(json.dumps(prioritizer.debug_prioritization(level, records)))
        return

    prioritized = prioritizer.get_prioritized_tenses(level, records)
    weights = prioritized.weights

    console.print(
        Panel(
            f"Weights: core [bold]{weights.core:.0%}[/] | review [bold]{weights.review:.0%}[/] | "
            f"exploration [bold]{weights.exploration:.0%}[/]\n"
            f"Focus: [bold]{prioritizer.get_recommended_focus(prioritized)}[/]",
            title=f"Level {prioritized.level}",
            border_style="blue",
        )
    )
    console.print(_ranked_table("Core", prioritized.core))
    if prioritized.review:
        console.print(_ranked_table("Review", prioritized.review))
    if prioritized.exploration:
        console.print(_ranked_table("Exploration", prioritized.exploration))
    if prioritized.progression:
        console.print(_ranked_table("Progression Path", prioritized.progression))


@app.command()
def stage(level: LevelArg = None, progress: ProgressOpt = None) -> None:
    """Show the learner's stage within a level and its tense families."""
    records = _load_progress(progress)
    prioritizer = LevelDrivenPrioritizer()
    summary = prioritizer.assessor.determine_learning_stage(level, records)

    console.print(
        Panel(
            f"Stage: [bold]{summary.stage.value}[/]\n"
            f"Average mastery: {summary.avg_mastery:.0f}\n"
            f"Mastered: {summary.mastered_count}/{summary.total_count} "
            f"({summary.completion_percent:.0f}%)\n\n"
            f"{summary.recommendation}",
            title=f"Level {level}",
            border_style="green",
        )
    )

    table = Table(title="Tense Families")
    table.add_column("Family", style="cyan")
    table.add_column("Status")
    table.add_column("Avg Mastery", justify="right")
    table.add_column("Readiness", justify="right")
    table.add_column("Tenses")
    for name, group in prioritizer.assessor.get_tense_family_groups(level, records).items():
        status = group.completion_status.value
        table.add_row(
            name,
            f"[{STATUS_STYLES[status]}]{status}[/]",
            _fmt(group.avg_mastery),
            _fmt(group.readiness, 2),
            ", ".join(group.keys),
        )
    console.print(table)


@app.command()
def gaps(level: LevelArg = None, progress: ProgressOpt = None) -> None:
    """List prerequisites that block the level's tenses."""
    records = _load_progress(progress)
    found = LevelDrivenPrioritizer().assessor.get_prerequisite_gaps(level, records)

    if not found:
        console.print(f"[green]No prerequisite gaps for {level}[/]")
        return

    table = Table(title=f"Prerequisite Gaps ({level})")
    table.add_column("Prerequisite", style="cyan")
    table.add_column("Required For")
    table.add_column("Mastery", justify="right")
    table.add_column("Urgency", justify="right")
    table.add_column("Priority", style="green", justify="right")
    for gap in found:
        table.add_row(gap.key, gap.required_for, _fmt(gap.mastery), _fmt(gap.urgency), _fmt(gap.priority))
    console.print(table)


@app.command()
def weights(level: LevelArg = None, progress: ProgressOpt = None) -> None:
    """Compare dynamic practice weights with the static level blend."""
    records = _load_progress(progress)
    prioritizer = LevelDrivenPrioritizer()
    dynamic = prioritizer.calculator.calculate_dynamic_weights(level, records).to_dict()
    static = prioritizer.get_level_weights(level).to_dict()

    table = Table(title=f"Practice Weights ({level})")
    table.add_column("Pool", style="cyan")
    table.add_column("Dynamic", style="green", justify="right")
    table.add_column("Level Table", justify="right")
    for pool in ("core", "review", "exploration", "consolidation"):
        value = dynamic.get(pool)
        table.add_row(pool, "-" if value is None else f"{value:.0%}", f"{static[pool]:.0%}")
    console.print(table)


@app.command()
def chain(
    key: Annotated[str, typer.Argument(help="Tense key, e.g. 'subjunctive|subjImpf'")],
    progress: ProgressOpt = None,
) -> None:
    """Show the transitive prerequisite chain of a tense."""
    records = _load_progress(progress)
    prioritizer = LevelDrivenPrioritizer()
    prerequisites = prioritizer.curriculum.get_prerequisite_chain(key)

    if not prerequisites:
        console.print(f"[green]{key} has no prerequisites[/]")
        return

    mastery_map = prioritizer.assessor.create_mastery_map(records)
    table = Table(title=f"Prerequisites of {key}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Tense", style="cyan")
    table.add_column("Mastery", justify="right")
    for index, prerequisite in enumerate(prerequisites, start=1):
        table.add_row(str(index), prerequisite, _fmt(mastery_map.get(prerequisite)))
    console.print(table)

    node = prioritizer.curriculum.get_node(key)
    if node is not None:
        readiness = prioritizer.assessor.assess_readiness(node, mastery_map)
        console.print(f"Readiness: [bold]{readiness:.0%}[/]")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="10 MB")

    app()


if __name__ == "__main__":
    main()
