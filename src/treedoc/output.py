"""Terminal rendering of validation results, trunk views and info summaries."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treedoc.diagnostics import Diagnostic, ValidationResult
from treedoc.viewer import TrunkView

_SEVERITY_STYLE = {
    "error": "bold red",
    "warning": "bold yellow",
    "advisory": "bold blue",
}


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def summary_line(result: ValidationResult) -> str:
    """e.g. ``"1 error, 2 warnings, 1 advisory"``; empty when nothing was reported."""
    parts: list[str] = []
    if result.errors:
        parts.append(_plural(len(result.errors), "error", "errors"))
    if result.warnings:
        parts.append(_plural(len(result.warnings), "warning", "warnings"))
    if result.advisories:
        parts.append(_plural(len(result.advisories), "advisory", "advisories"))
    return ", ".join(parts)


def _print_diagnostic(console: Console, diag: Diagnostic) -> None:
    style = _SEVERITY_STYLE[diag.severity]
    console.print(
        f"  [{style}]{diag.severity}[/{style}] [dim]\\[{diag.rule}][/dim]: {escape(diag.message)}",
    )
    console.print(f"    [dim]at[/dim] {escape(str(diag.location))}")


def print_validation_result(result: ValidationResult, file: Path, *, console: Console | None = None) -> None:
    console = console or Console()
    name = escape(str(file))
    if result.is_valid:
        stats = result.stats
        console.print(
            f"[bold green]✓[/bold green] {name} is valid "
            f"({stats.node_count} nodes, {stats.edge_count} edges, tier {stats.tier})",
        )
    else:
        console.print(f"[bold red]✗[/bold red] {name} has validation errors")

    for diag in result.diagnostics:
        _print_diagnostic(console, diag)

    summary = summary_line(result)
    if summary:
        console.print()
        console.print(f"  {summary}")


def print_trunk_view(view: TrunkView, *, console: Console | None = None) -> None:
    console = console or Console()
    console.print(f"[bold]{escape(view.title)}[/bold]")
    console.print(f"[dim]{'─' * len(view.title)}[/dim]")
    console.print(f"[dim]{escape(view.stats)}[/dim]")
    console.print()

    for i, step in enumerate(view.steps):
        console.print(f"[cyan]\\[{escape(step.node_id)}][/cyan] {escape(step.content)}")

        if step.is_terminal:
            console.print("  [dim]└── (end of trunk)[/dim]")
        elif step.trunk_target is not None:
            console.print(
                f"  [dim]├──[/dim] [green]\\[trunk][/green] [dim]-> {escape(step.trunk_target)}[/dim]",
            )

        if step.branch_count > 0:
            badge = f"+{_plural(step.branch_count, 'branch', 'branches')}"
            console.print(f"  [dim]└──[/dim] [yellow]{badge}[/yellow]")
            for label in step.branch_labels:
                console.print(f"      [dim]·[/dim] {escape(label)}")

        if i < len(view.steps) - 1:
            console.print()


def print_info(result: ValidationResult, file: Path, *, console: Console | None = None) -> None:
    console = console or Console()
    stats = result.stats
    heading = str(file)
    console.print(f"[bold]{escape(heading)}[/bold]")
    console.print(f"[dim]{'─' * len(heading)}[/dim]")

    table = Table(show_header=False, box=None, padding=(0, 1, 0, 2))
    table.add_column(style="dim", min_width=16)
    table.add_column()
    table.add_row("Tier:", str(stats.tier))
    table.add_row("Nodes:", str(stats.node_count))
    table.add_row("Edges:", str(stats.edge_count))
    table.add_row("Trunk length:", str(stats.trunk_length))
    table.add_row("Branches:", str(stats.branch_count))
    table.add_row("Valid:", "[green]yes[/green]" if result.is_valid else "[red]no[/red]")
    console.print(table)
