"""Rich terminal display for aicache."""

from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.tree import Tree

from aicache.models import BatchDeleteResult, CacheNode, SafetyTier, ScanResult, SearchResult
from aicache.safety_levels import SAFETY_DEFINITIONS

console = Console()

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

TIER_COLORS = {
    SafetyTier.SAFE: "green",
    SafetyTier.CAUTION: "yellow",
    SafetyTier.DANGER: "red",
}


def format_size(size_bytes: int) -> str:
    """
    Format bytes to a human-readable string (binary units).

    One decimal place, with a trailing ".0" dropped: 1536 -> "1.5 KB",
    1024 -> "1 KB".
    """
    if size_bytes <= 0:
        return "0 B"

    unit = 0
    value = float(size_bytes)
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    text = f"{value:.1f}"
    if text.endswith(".0"):
        text = text[:-2]
    return f"{text} {SIZE_UNITS[unit]}"


def tier_icon(tier: SafetyTier) -> str:
    """Get icon for a safety tier."""
    icons = {
        SafetyTier.SAFE: "[green]✓[/green]",
        SafetyTier.CAUTION: "[yellow]![/yellow]",
        SafetyTier.DANGER: "[red]✗[/red]",
    }
    return icons.get(tier, "?")


def tier_label(tier: SafetyTier) -> str:
    """Get styled label for a safety tier."""
    labels = {
        SafetyTier.SAFE: "[green]Safe[/green]",
        SafetyTier.CAUTION: "[yellow]Caution[/yellow]",
        SafetyTier.DANGER: "[red]Danger[/red]",
    }
    return labels.get(tier, "Unknown")


def _node_label(node: CacheNode) -> str:
    custom = " [cyan](custom)[/cyan]" if node.is_custom else ""
    return (
        f"{tier_icon(node.safety_tier)} [bold]{node.name}[/bold] "
        f"{format_size(node.size)} [dim]{node.description}[/dim]{custom}"
    )


def _add_children(branch: Tree, node: CacheNode) -> None:
    for child in node.children or []:
        _add_children(branch.add(_node_label(child)), child)


def show_scan_result(result: ScanResult) -> None:
    """Display scanned cache roots as a tree."""
    if not result.directories:
        console.print("[yellow]No AI tool caches found.[/yellow]")
        return

    for root in result.directories:
        tree = Tree(_node_label(root))
        _add_children(tree, root)
        console.print(tree)
        console.print(f"  [dim]{root.path}[/dim]")
        console.print()

    console.print(
        Panel(
            f"[bold]Total cache size:[/bold] {format_size(result.total_size)}",
            title="Summary",
            border_style="blue",
        )
    )


def show_search_results(results: list[SearchResult], title: str = "Search Results") -> None:
    """Display detected or searched directories."""
    if not results:
        console.print("[yellow]No matching directories found.[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("Tool", style="cyan")
    table.add_column("Size", justify="right")
    table.add_column("Match")
    table.add_column("Path")

    for item in results:
        table.add_row(item.tool_name, format_size(item.size), item.matched_pattern, item.path)

    console.print(table)
    console.print(f"[bold]Total: {format_size(sum(r.size for r in results))}[/bold]")


def show_delete_preview(items: list[tuple[str, SafetyTier, int]]) -> None:
    """Display paths about to be deleted with their tiers."""
    table = Table(title="Delete Preview", show_header=True, header_style="bold")
    table.add_column("", width=3)
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Safety")

    for path, tier, size in items:
        table.add_row(tier_icon(tier), path, format_size(size), tier_label(tier))

    console.print(table)
    counts = {tier: sum(1 for _, t, _ in items if t == tier) for tier in SafetyTier}
    console.print(
        f"\n[green]Safe: {counts[SafetyTier.SAFE]}[/green]  "
        f"[yellow]Caution: {counts[SafetyTier.CAUTION]}[/yellow]  "
        f"[red]Danger: {counts[SafetyTier.DANGER]}[/red]"
    )
    console.print(f"[bold]Total to delete: {format_size(sum(s for _, _, s in items))}[/bold]")


def show_delete_summary(batch: BatchDeleteResult) -> None:
    """Display the outcome of a batch deletion."""
    for result in batch.results:
        if result.success:
            console.print(
                f"  [green]✓[/green] {result.path}: {format_size(result.freed_bytes)} freed",
                soft_wrap=True,
            )
        else:
            console.print(f"  [red]✗[/red] {result.path}: {result.error}", soft_wrap=True)

    console.print()
    if batch.fail_count == 0:
        console.print(
            f"[bold green]Deleted {batch.success_count} item(s), "
            f"freed {format_size(batch.total_freed)}[/bold green]"
        )
    else:
        console.print(
            f"[bold yellow]Deleted {batch.success_count} item(s), "
            f"{batch.fail_count} failed, freed {format_size(batch.total_freed)}[/bold yellow]"
        )


def show_overrides(overrides: dict[str, SafetyTier]) -> None:
    """Display user safety overrides."""
    if not overrides:
        console.print("[dim]No custom safety levels set.[/dim]")
        return

    table = Table(title="Custom Safety Levels", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Safety")
    for path, tier in sorted(overrides.items()):
        table.add_row(path, tier_label(tier))
    console.print(table)


def show_safety_levels() -> None:
    """Display what each safety tier means."""
    for tier, definition in SAFETY_DEFINITIONS.items():
        color = TIER_COLORS[tier]
        body = [definition.definition, ""]
        body.extend(f"• {c}" for c in definition.criteria)
        body.append("")
        body.append(f"[dim]Examples:[/dim] {', '.join(definition.examples)}")
        body.append(f"[bold]If deleted:[/bold] {definition.consequence}")
        console.print(
            Panel(
                "\n".join(body),
                title=f"[bold {color}]{definition.label}[/bold {color}]",
                border_style=color,
            )
        )


def show_search_progress() -> Progress:
    """Create progress bar for searching."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def confirm_action(message: str) -> bool:
    """Ask for confirmation."""
    from rich.prompt import Confirm

    return Confirm.ask(message)
