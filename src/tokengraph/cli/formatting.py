"""
Human-readable rendering of analysis results with rich.
"""

from typing import List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..analysis.results import (
    DependencyValidationResult,
    GlobalDependencyAnalysis,
    ImpactTier,
    TokenDependencyAnalysis,
)
from ..transformers.chord_types import ChordDiagramData
from ..transformers.network_types import TokenDependencyGraph

console = Console()

IMPACT_STYLES = {
    ImpactTier.LOW: "green",
    ImpactTier.MEDIUM: "yellow",
    ImpactTier.HIGH: "bold red",
}


def _summary_table(title: str, rows: List[tuple]) -> Table:
    table = Table(title=title, show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for label, value in rows:
        table.add_row(label, str(value))
    return table


def print_global_analysis(analysis: GlobalDependencyAnalysis) -> None:
    console.print(_summary_table("Dependency Analysis", [
        ("Tokens", analysis.total_tokens),
        ("Dependencies", analysis.total_dependencies),
        ("Circular dependencies", len(analysis.circular_dependencies)),
        ("Max depth", analysis.max_dependency_depth),
        ("Average depth", f"{analysis.average_dependency_depth:.2f}"),
        ("Root tokens", len(analysis.root_tokens)),
        ("Leaf tokens", len(analysis.leaf_tokens)),
        ("Isolated tokens", len(analysis.isolated_tokens)),
    ]))

    if analysis.most_referenced_tokens:
        table = Table(title="Most Referenced Tokens")
        table.add_column("Token", style="cyan")
        table.add_column("References", justify="right")
        for ref in analysis.most_referenced_tokens:
            table.add_row(ref.token_id, str(ref.reference_count))
        console.print(table)

    if analysis.deepest_dependency_chains:
        table = Table(title="Deepest Chains")
        table.add_column("Depth", justify="right")
        table.add_column("Chain")
        for chain in analysis.deepest_dependency_chains:
            table.add_row(str(chain.depth), " → ".join(chain.chain))
        console.print(table)

    for rec in analysis.recommendations:
        style = {"error": "red", "warning": "yellow"}.get(rec.severity.value, "blue")
        console.print(Panel(
            f"{rec.description}\n[dim]{rec.suggested_action}[/dim]",
            title=f"[{style}]{rec.title}[/{style}]",
            border_style=style,
        ))


def print_validation(result: DependencyValidationResult) -> None:
    if result.is_valid:
        console.print("[bold green]✅ Token dependencies are valid[/bold green]")
    else:
        console.print("[bold red]❌ Token dependencies are invalid[/bold red]")

    if result.errors:
        table = Table(title="Errors", title_style="red")
        table.add_column("Token", style="cyan")
        table.add_column("Type")
        table.add_column("Message")
        for error in result.errors:
            table.add_row(error.token_id, error.error_type.value, error.message)
        console.print(table)

    for circular in result.circular_dependencies:
        console.print(f"[red]↻[/red] {circular.description}")

    if result.warnings:
        table = Table(title="Warnings", title_style="yellow")
        table.add_column("Token", style="cyan")
        table.add_column("Type")
        table.add_column("Message")
        for warning in result.warnings:
            table.add_row(warning.token_id, warning.warning_type.value, warning.message)
        console.print(table)


def print_token_analysis(analysis: TokenDependencyAnalysis) -> None:
    blast = analysis.blast_radius
    style = IMPACT_STYLES[blast.estimated_impact]

    console.print(Panel.fit(
        f"[bold]{analysis.token_name}[/bold] [dim]({analysis.token_id})[/dim]\n"
        f"Depth: {analysis.dependency_depth}   Used by: {analysis.usage_count}\n"
        f"Impact: [{style}]{blast.estimated_impact.value.upper()}[/{style}]",
        title="Blast Radius",
    ))

    if analysis.has_circular_dependency:
        for path in analysis.circular_dependency_paths:
            console.print(f"[red]↻ {' → '.join(path)}[/red]")

    if analysis.dependencies:
        table = Table(title="Depends On")
        table.add_column("Token", style="cyan")
        table.add_column("Kind")
        table.add_column("Path", style="dim")
        for dep in analysis.dependencies:
            table.add_row(dep.token_id, dep.dependency_type.value, " → ".join(dep.path))
        console.print(table)

    table = Table(title=f"Affected Tokens ({blast.total_affected})")
    table.add_column("Token", style="cyan")
    table.add_column("Kind")
    for token_id in blast.directly_affected:
        table.add_row(token_id, "direct")
    for token_id in blast.indirectly_affected:
        table.add_row(token_id, "indirect")
    console.print(table)

    if blast.affected_collections:
        console.print(f"Collections: {', '.join(blast.affected_collections)}")
    if blast.affected_platforms:
        console.print(f"Platforms: {', '.join(blast.affected_platforms)}")


def print_dependency_graph(graph: TokenDependencyGraph) -> None:
    stats = graph.statistics
    rows = [
        ("Nodes", len(graph.nodes)),
        ("Edges", len(graph.edges)),
        ("Clusters", len(graph.clusters)),
        ("Circular dependencies", stats.circular_dependencies),
        ("Max depth", stats.max_dependency_depth),
        ("Isolated tokens", stats.isolated_tokens),
    ]
    if stats.most_referenced_token:
        rows.append(("Most referenced", stats.most_referenced_token.token_id))
    console.print(_summary_table("Dependency Graph", rows))

    if graph.clusters:
        table = Table(title="Clusters")
        table.add_column("Value type", style="cyan")
        table.add_column("Tokens", justify="right")
        for cluster in graph.clusters:
            table.add_row(cluster.name, str(len(cluster.node_ids)))
        console.print(table)


def print_chord_data(data: ChordDiagramData) -> None:
    stats = data.statistics
    console.print(_summary_table("Mode / Platform Conflicts", [
        ("Modes", stats.total_modes),
        ("Platforms", stats.total_platforms),
        ("Links", len(data.links)),
        ("Total conflicts", stats.total_conflicts),
        ("Coupling score", f"{stats.mode_coupling_score:.2f}"),
        ("Platform complexity", f"{stats.platform_complexity_score:.2f}"),
    ]))

    matrix = data.mode_analysis.conflict_matrix
    if matrix.mode_ids:
        table = Table(title="Conflict Matrix")
        table.add_column("")
        for mode_id in matrix.mode_ids:
            table.add_column(mode_id, justify="right")
        for mode_id, row in zip(matrix.mode_ids, matrix.conflicts):
            table.add_row(mode_id, *(str(v) for v in row))
        console.print(table)

    if data.mode_analysis.most_volatile_tokens:
        table = Table(title="Most Volatile Tokens")
        table.add_column("Token", style="cyan")
        table.add_column("Frequency", justify="right")
        table.add_column("Unique values", justify="right")
        for volatile in data.mode_analysis.most_volatile_tokens:
            table.add_row(volatile.token_id, f"{volatile.change_frequency:.2f}", str(volatile.unique_values))
        console.print(table)

    for rec in stats.recommendations:
        console.print(f"[yellow]•[/yellow] [bold]{rec.title}[/bold]: {rec.description}")
