"""Rich rendering of scan, generate and analyzer results."""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from dotti.schemas.artifacts import SerializationOutput
from dotti.schemas.issues import ConflictReport, PruneResult, ValidationIssue, ValidationResult
from dotti.schemas.recommendations import RecommendationResult
from dotti.schemas.tech_stack import TechStackSnapshot
from dotti.shared.sizing import format_bytes, format_size
from dotti.shared.writer import WriteReport

console = Console()

_SEVERITY_STYLE = {"error": "red", "warning": "yellow"}


def print_phase(label: str) -> None:
    console.print(Panel(f"[bold]{label}[/bold]", style="blue"))


def render_snapshot(snapshot: TechStackSnapshot) -> None:
    """Tech stack summary, followed by any AI configs already in the project."""
    print_phase(f"Tech stack: {snapshot.project_name}")
    for lang in snapshot.languages[:5]:
        console.print(f"  [cyan]{lang.name}[/] ({lang.file_count} files)")
    groups = (
        ("Frameworks", snapshot.frameworks),
        ("Build", snapshot.build_tools),
        ("Testing", snapshot.testing),
        ("Database", snapshot.databases),
        ("Styling", snapshot.styling),
        ("Linting", snapshot.linting),
        ("Deployment", snapshot.deployment),
    )
    for label, tools in groups:
        if tools:
            names = ", ".join(f"{t.name} {t.version}" if t.version else t.name for t in tools)
            console.print(f"  {label + ':':<12} {names}")
    if snapshot.package_manager != "unknown":
        console.print(f"  {'Packages:':<12} {snapshot.package_manager}")
    if snapshot.file_tree.has_monorepo:
        console.print(f"  {'Monorepo:':<12} {len(snapshot.file_tree.monorepo_packages or ())} packages")

    if snapshot.existing_artifacts:
        console.print("\n[bold]Existing AI configs[/]")
        for artifact in snapshot.existing_artifacts:
            console.print(
                f"  {artifact.destination}: {artifact.relative_path} ({format_bytes(artifact.size_bytes)})"
            )


def render_recommendations(result: RecommendationResult) -> None:
    table = Table(title="Recommended agents")
    table.add_column("Agent", style="cyan")
    table.add_column("Confidence", justify="right")
    table.add_column("Reason")
    for agent in result.agents:
        table.add_row(agent.name, f"{agent.confidence}%", agent.reason)
    console.print(table)

    if result.rules:
        console.print("\n[bold]Rules[/]")
        for rule in result.rules:
            console.print(f"  {rule.priority:<7}{rule.title} [dim]({', '.join(rule.applies_to)})[/]")
    if result.skipped:
        console.print("\n[dim]Skipped: " + ", ".join(f"{s.name} ({s.confidence}%)" for s in result.skipped) + "[/]")
    for diag in result.diagnostics:
        console.print(f"[yellow]Template {diag.template_id} failed during {diag.stage}:[/] {diag.message}")
    console.print(f"\n  Estimated agent tokens: {result.total_tokens:,}")


def render_serialization(output: SerializationOutput) -> None:
    console.print(
        f"\n[bold]{output.destination}[/] "
        f"[dim]{len(output.artifacts)} files, {format_size(output.total_size, output.size_unit)}[/]"
    )
    for artifact in output.artifacts:
        console.print(f"  {artifact.relative_path} [dim]{artifact.description}[/]")
    for warning in output.warnings:
        style = _SEVERITY_STYLE[warning.severity]
        console.print(f"  [{style}]{warning.severity}:[/] {warning.message}")


def render_write_report(report: WriteReport) -> None:
    for path in report.written:
        console.print(f"  [green]wrote[/] {path}")
    for path in report.skipped:
        console.print(f"  [yellow]skipped[/] {path} [dim](exists; use --force to overwrite)[/]")
    for entry in report.superseded:
        console.print(f"  [yellow]superseded[/] {entry} [dim](another destination writes this path)[/]")


def _render_issue(issue: ValidationIssue) -> None:
    style = _SEVERITY_STYLE[issue.severity]
    console.print(f"  [{style}]{issue.severity}[/] {issue.file_path}: {issue.message}")
    if issue.suggested_fix:
        console.print(f"    [dim]fix: {issue.suggested_fix}[/]")


def render_validation(result: ValidationResult) -> None:
    console.print(f"Found {result.found} config files, {result.valid} valid")
    for issue in [*result.errors, *result.warnings]:
        _render_issue(issue)
    if not result.errors and not result.warnings:
        console.print("[green]No issues found.[/]")


def render_conflicts(report: ConflictReport) -> None:
    console.print(f"Parsed {len(report.agents)} agents")
    if not report.issues:
        console.print("[green]No routing conflicts found.[/]")
        return
    table = Table(title="Routing conflicts")
    table.add_column("Type")
    table.add_column("Files", style="dim")
    table.add_column("Message")
    for issue in report.issues:
        table.add_row(issue.type, ", ".join(dict.fromkeys(issue.file_paths)), issue.message)
    console.print(table)


def render_prune(result: PruneResult) -> None:
    console.print(f"Scanned {result.scanned} config files")
    if not result.candidates:
        console.print("[green]Nothing to prune.[/]")
        return
    for candidate in result.candidates:
        console.print(
            f"  [yellow]{candidate.reason}[/] {candidate.file_path} "
            f"[dim]({format_bytes(candidate.size_bytes)})[/]: {candidate.message}"
        )
    console.print(f"  Recoverable: {format_bytes(result.recoverable_bytes)}")
