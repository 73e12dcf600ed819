"""Free-text search for AI tool directories.

The search walks the immediate entries of a few broad roots (the home
directory and the platform's application-data directories) and matches
directory names against a query. It runs in two passes so progress can be
reported against a known total, and yields results as they are found.
"""

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional

from aicache.models import SearchProgress, SearchResult
from aicache.signatures import identify_tool
from aicache.sizing import expand_path, get_directory_size

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2

# Noisy directories skipped while counting and matching
EXCLUDED_NAMES = frozenset({".git", "node_modules", ".npm", ".yarn", "Homebrew"})

PLATFORM_SEARCH_LOCATIONS: dict[str, list[str]] = {
    "darwin": ["~/Library/Application Support", "~/Library/Caches", "~/.config"],
    "win32": ["~/AppData/Roaming", "~/AppData/Local"],
}
DEFAULT_SEARCH_LOCATIONS = ["~/.config", "~/.cache", "~/.local/share"]

ProgressCallback = Callable[[SearchProgress], None]


class CancelToken:
    """Cooperative cancellation flag, safe to set from another thread."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation was requested."""
        return self._event.is_set()


def get_search_locations(platform: Optional[str] = None) -> list[str]:
    """Search roots for a platform: home first, then application-data roots."""
    platform = platform or sys.platform
    for prefix, locations in PLATFORM_SEARCH_LOCATIONS.items():
        if platform.startswith(prefix):
            return ["~", *locations]
    return ["~", *DEFAULT_SEARCH_LOCATIONS]


def _list_names(path: Path) -> list[str]:
    """Non-excluded entry names of a directory, empty if unreadable."""
    try:
        names = sorted(os.listdir(path))
    except OSError as e:
        logger.debug("Cannot list search root %s: %s", path, e)
        return []
    return [name for name in names if name not in EXCLUDED_NAMES]


def search_directories(
    query: str,
    on_progress: Optional[ProgressCallback] = None,
    cancel: Optional[CancelToken] = None,
    home: Optional[Path] = None,
    platform: Optional[str] = None,
) -> Iterator[SearchResult]:
    """
    Search the search roots for directories whose name contains query.

    The query is matched case-insensitively. Callers must reject queries
    shorter than MIN_QUERY_LENGTH before calling.

    Args:
        query: Text to look for in directory names
        on_progress: Optional callback receiving a SearchProgress after every entry
        cancel: Optional token; once cancelled no further entries are visited
        home: Home directory for ~ expansion (default: the OS home)
        platform: Platform used to pick search roots (default: sys.platform)

    Yields:
        SearchResult for each matching directory, as it is found
    """
    normalized_query = query.lower()

    # First pass: count entries for progress
    listings: list[tuple[Path, list[str]]] = []
    for location in get_search_locations(platform):
        root = expand_path(location, home)
        try:
            if not root.is_dir():
                continue
        except OSError as e:
            logger.debug("Skipping search root %s: %s", root, e)
            continue
        listings.append((root, _list_names(root)))
    total = sum(len(names) for _, names in listings)

    # Second pass: match
    processed = 0
    for root, names in listings:
        for name in names:
            if cancel is not None and cancel.cancelled:
                logger.debug("Search for %r cancelled after %d of %d entries", query, processed, total)
                return

            processed += 1
            item_path = root / name

            if on_progress:
                on_progress(
                    SearchProgress(
                        current=processed,
                        total=total,
                        current_path=str(item_path),
                        percentage=round(processed / total * 100),
                    )
                )

            if normalized_query not in name.lower():
                continue

            try:
                if not item_path.is_dir():
                    continue
            except OSError:
                continue

            yield SearchResult(
                tool_name=identify_tool(name),
                path=str(item_path),
                size=get_directory_size(item_path),
                matched_pattern=name,
            )


def search_directories_sync(
    query: str,
    home: Optional[Path] = None,
    platform: Optional[str] = None,
) -> list[SearchResult]:
    """Run a search to completion without progress reporting."""
    return list(search_directories(query, home=home, platform=platform))
