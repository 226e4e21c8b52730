"""Typer CLI — ``dotti scan``, ``generate``, ``init``, ``validate``, ``fix`` and ``prune``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer

from dotti.config import load_config, load_project_config
from dotti.output.console import console

app = typer.Typer(
    name="dotti",
    help="dotti — generate and audit AI coding-tool configs from your project's tech stack.",
    no_args_is_help=True,
)

PROJECT_ARG = typer.Argument(Path("."), help="Project root (defaults to the current directory).")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # Per-pattern glob resolution is far too chatty even for --verbose
    logging.getLogger("dotti.analysis.globs").setLevel(logging.INFO)


def _reader(path: Path) -> "CodebaseReader":  # noqa: F821
    from dotti.shared.codebase_reader import CodebaseReader

    try:
        return CodebaseReader(path)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1)


def _config(path: Path, config: Path | None) -> "DottiConfig":  # noqa: F821
    try:
        return load_config(config) if config else load_project_config(path)
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)


def _report_event(message: str) -> None:
    console.print(f"[yellow]{message}[/]")


@app.command()
def scan(
    path: Path = PROJECT_ARG,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Detect the tech stack and show what dotti would recommend."""
    from dotti.output.console import render_recommendations, render_snapshot
    from dotti.recommender.engine import recommend
    from dotti.scanner.snapshot import build_snapshot

    _setup_logging(verbose)
    reader = _reader(path)
    snapshot = build_snapshot(reader.root, reader)
    render_snapshot(snapshot)
    console.print("")
    render_recommendations(recommend(snapshot, on_event=_report_event))


@app.command()
def generate(
    path: Path = PROJECT_ARG,
    target: list[str] = typer.Option(None, "--target", "-t", help="Destination to write (repeatable). Defaults to dotti.yml targets."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to a dotti.yml (defaults to <path>/dotti.yml)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be written without touching disk."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Scan the project and write configs for each target tool."""
    from dotti.recommender.engine import recommend
    from dotti.scanner.snapshot import build_snapshot

    _setup_logging(verbose)
    cfg = _config(path, config)
    reader = _reader(path)
    snapshot = build_snapshot(reader.root, reader)
    recommendations = recommend(snapshot, on_event=_report_event)
    _emit(reader.root, snapshot, recommendations, target or cfg.targets, dry_run=dry_run, force=force or cfg.force)


@app.command()
def init(
    path: Path = PROJECT_ARG,
    template: str = typer.Option(None, "--template", help="Preset to generate from instead of scanning."),
    target: list[str] = typer.Option(None, "--target", "-t", help="Destination to write (repeatable)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be written without touching disk."),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing files."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Bootstrap configs from a preset stack, for projects with little code yet.

    Examples:

        dotti init --template nextjs-app

        dotti init ./api --template python-api --target claude --target cursor
    """
    from dotti.recommender.engine import recommend
    from dotti.recommender.presets import PRESETS, get_preset

    _setup_logging(verbose)
    preset = get_preset(template) if template else None
    if preset is None:
        if template:
            console.print(f"[red]Unknown template:[/] {template}")
        console.print("[bold]Available templates:[/]")
        for p in PRESETS:
            console.print(f"  [cyan]{p.id:<12}[/] {p.description}")
        raise typer.Exit(code=1 if template else 0)

    cfg = _config(path, None)
    reader = _reader(path)
    snapshot = preset.snapshot_for(reader.root.name)
    console.print(f"[bold]Using template:[/] {preset.name}")
    recommendations = recommend(snapshot, on_event=_report_event)
    _emit(reader.root, snapshot, recommendations, target or cfg.targets, dry_run=dry_run, force=force or cfg.force)


def _emit(
    root: Path,
    snapshot: "TechStackSnapshot",  # noqa: F821
    recommendations: "RecommendationResult",  # noqa: F821
    targets: list[str],
    *,
    dry_run: bool,
    force: bool,
) -> None:
    """Serialize for each target, then print or write the artifacts."""
    from dotti.adapters.registry import serialize_all
    from dotti.output.console import render_recommendations, render_serialization, render_write_report
    from dotti.shared.writer import write_artifacts

    try:
        outputs = serialize_all(targets, snapshot, recommendations)
    except ValueError as exc:
        console.print(f"[red]Error:[/] {exc}")
        raise typer.Exit(code=1)

    render_recommendations(recommendations)
    for output in outputs:
        render_serialization(output)

    if dry_run:
        console.print("\n[yellow]DRY-RUN mode — nothing was written.[/]")
        return

    console.print("")
    report = write_artifacts(root, [a for o in outputs for a in o.artifacts], force=force)
    render_write_report(report)


@app.command()
def validate(
    path: Path = PROJECT_ARG,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Check existing AI configs for structural problems and dead globs. Exits 1 on errors."""
    from dotti.analysis.validator import validate_artifacts
    from dotti.output.console import render_validation

    _setup_logging(verbose)
    reader = _reader(path)
    result = asyncio.run(validate_artifacts(reader.discover_artifacts(), reader))
    render_validation(result)
    if result.errors:
        raise typer.Exit(code=1)


@app.command()
def fix(
    path: Path = PROJECT_ARG,
    config: Path = typer.Option(None, "--config", "-c", help="Path to a dotti.yml (defaults to <path>/dotti.yml)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Report routing conflicts between agents: overlapping triggers, vague descriptions, duplicates."""
    from dotti.analysis.fixer import analyze_agents
    from dotti.output.console import render_conflicts

    _setup_logging(verbose)
    cfg = _config(path, config)
    reader = _reader(path)
    render_conflicts(analyze_agents(reader.discover_artifacts(), cfg.policy))


@app.command()
def prune(
    path: Path = PROJECT_ARG,
    dry_run: bool = typer.Option(False, "--dry-run", help="List candidates without deleting them."),
    days: int = typer.Option(None, "--days", help="Unused-for-N-days threshold (not supported yet)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Find configs that are empty or whose globs match nothing, and delete them."""
    from dotti.analysis.pruner import find_prune_candidates
    from dotti.output.console import render_prune
    from dotti.shared.sizing import format_bytes

    _setup_logging(verbose)
    if days is not None:
        console.print("[yellow]--days is not supported yet: dotti does not track config usage. Ignoring.[/]")

    reader = _reader(path)
    result = asyncio.run(find_prune_candidates(reader.discover_artifacts(), reader))
    render_prune(result)
    if dry_run or not result.candidates:
        return

    for candidate in result.candidates:
        (reader.root / candidate.file_path).unlink(missing_ok=True)
        console.print(f"  [red]deleted[/] {candidate.file_path}")
    console.print(f"[green]Recovered {format_bytes(result.recoverable_bytes)}.[/]")
