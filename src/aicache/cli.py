"""CLI interface for aicache."""

import logging
import os
from pathlib import Path
from typing import Callable

import typer
from rich.logging import RichHandler

from aicache import __version__
from aicache.cleaner import delete_many
from aicache.config import load_settings
from aicache.display import (
    confirm_action,
    console,
    show_delete_preview,
    show_delete_summary,
    show_overrides,
    show_safety_levels,
    show_scan_result,
    show_search_progress,
    show_search_results,
)
from aicache.models import SafetyTier, SearchProgress, SearchResult
from aicache.overrides import JsonOverrideStore
from aicache.safety_levels import get_level_change_warning
from aicache.scanner import scan_all_caches
from aicache.search import MIN_QUERY_LENGTH, CancelToken, search_directories
from aicache.signatures import find_known_installations
from aicache.sizing import get_directory_size

# Create Typer app
app = typer.Typer(
    name="aicache",
    help="Find, classify and clean AI coding-tool caches",
    add_completion=False,
)
override_app = typer.Typer(help="Manage custom safety levels")
app.add_typer(override_app, name="override")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"aicache version {__version__}")
        raise typer.Exit()


def setup_logging(verbose: bool) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _get_store() -> JsonOverrideStore:
    return JsonOverrideStore()


def _normalize(path: Path) -> str:
    return os.path.abspath(os.path.expanduser(str(path)))


def _write_overrides(action: Callable[[], None]) -> None:
    """Run a store write, exiting cleanly if the overrides file can't be saved."""
    try:
        action()
    except OSError as e:
        console.print(f"[red]Error: Could not save safety levels: {e}[/red]")
        raise typer.Exit(1)


def _measure(path: str) -> int:
    target = Path(path)
    try:
        if target.is_dir() and not target.is_symlink():
            return get_directory_size(target)
        return target.lstat().st_size
    except OSError:
        return 0


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logging."),
) -> None:
    """aicache - AI coding-tool cache cleaner."""
    setup_logging(verbose)


@app.command()
def scan() -> None:
    """Scan known AI tool cache directories."""
    settings = load_settings()
    with console.status("[bold blue]Scanning caches...[/bold blue]"):
        result = scan_all_caches(settings=settings, overrides=_get_store())

    show_scan_result(result)


@app.command()
def detect() -> None:
    """Detect installed AI tools from their known locations."""
    with console.status("[bold blue]Detecting AI tools...[/bold blue]"):
        results = find_known_installations()

    show_search_results(results, title="Detected AI Tools")


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in directory names"),
) -> None:
    """Search common locations for directories matching a name."""
    if len(query.strip()) < MIN_QUERY_LENGTH:
        console.print(f"[red]Error: Query must be at least {MIN_QUERY_LENGTH} characters[/red]")
        raise typer.Exit(1)

    token = CancelToken()
    results: list[SearchResult] = []

    with show_search_progress() as progress:
        task = progress.add_task("Searching...", total=None)

        def update_progress(p: SearchProgress) -> None:
            progress.update(
                task,
                total=p.total,
                completed=p.current,
                description=f"Searching {Path(p.current_path).name}",
            )

        try:
            for result in search_directories(query.strip(), on_progress=update_progress, cancel=token):
                results.append(result)
        except KeyboardInterrupt:
            token.cancel()

    if token.cancelled:
        console.print("[yellow]Search cancelled - showing partial results[/yellow]")

    show_search_results(results)


@app.command()
def clean(
    paths: list[Path] = typer.Argument(..., help="Paths to delete"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
    allow_danger: bool = typer.Option(
        False, "--allow-danger", help="Also delete directories classified as danger"
    ),
) -> None:
    """Permanently delete cache directories."""
    settings = load_settings()
    store = _get_store()
    index = scan_all_caches(settings=settings, overrides=store).tier_index()

    def tier_of(path: str) -> SafetyTier:
        # Unscanned paths take the tier of their nearest classified ancestor
        for candidate in (path, *(str(p) for p in Path(path).parents)):
            tier = store.get(candidate) or index.get(candidate)
            if tier:
                return tier
        return settings.default_safety_tier

    targets = [_normalize(p) for p in paths]
    items = [(p, tier_of(p), _measure(p)) for p in targets]
    show_delete_preview(items)

    danger_count = sum(1 for _, tier, _ in items if tier == SafetyTier.DANGER)
    if danger_count and not allow_danger:
        console.print(
            f"[red]{danger_count} danger item(s) will be skipped. "
            f"Use --allow-danger to delete them.[/red]"
        )

    if not yes:
        if danger_count and allow_danger:
            prompt = "Delete anyway, including danger items? This cannot be undone"
        else:
            prompt = "Delete? This cannot be undone"
        if not confirm_action(prompt):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    batch = delete_many(targets, tier_lookup=tier_of, allow_danger=allow_danger)
    # Failures are always reported; the setting only quiets success output
    if settings.show_notifications or batch.fail_count:
        console.print()
        show_delete_summary(batch)


@app.command()
def levels() -> None:
    """Explain the safety levels."""
    show_safety_levels()


@override_app.command("set")
def override_set(
    path: Path = typer.Argument(..., help="Directory to reclassify"),
    tier: SafetyTier = typer.Argument(..., help="New safety level"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Set a custom safety level for a directory."""
    path_str = _normalize(path)
    if not Path(path_str).exists():
        console.print(f"[red]Path does not exist: {path}[/red]")
        raise typer.Exit(1)

    settings = load_settings()
    store = _get_store()
    node = scan_all_caches(settings=settings, overrides=store).find(path_str)
    current = node.safety_tier if node else settings.default_safety_tier

    warning = get_level_change_warning(current, tier, Path(path_str).name)
    if warning and warning.requires_confirmation and not yes:
        console.print(f"[bold yellow]{warning.title}[/bold yellow]")
        console.print(warning.message)
        if not confirm_action("Change level?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    _write_overrides(lambda: store.set(path_str, tier))
    console.print(f"Safety level for [bold]{path_str}[/bold] set to {tier.value}")


@override_app.command("reset")
def override_reset(
    path: Path = typer.Argument(..., help="Directory to reset"),
) -> None:
    """Reset a directory to its computed safety level."""
    path_str = _normalize(path)
    _write_overrides(lambda: _get_store().remove(path_str))
    console.print(f"Safety level for [bold]{path_str}[/bold] reset to default")


@override_app.command("reset-all")
def override_reset_all(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompts"),
) -> None:
    """Reset every custom safety level."""
    if not yes and not confirm_action("Reset all custom safety levels to default?"):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    _write_overrides(_get_store().clear)
    console.print("All safety levels reset to default")


@override_app.command("list")
def override_list() -> None:
    """List custom safety levels."""
    show_overrides(_get_store().all())


if __name__ == "__main__":
    app()
