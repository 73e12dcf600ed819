"""Cache directory scanning for aicache."""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from aicache.classifier import USER_DEFINED_DESCRIPTION, classify_path, resolve_override
from aicache.config import Settings
from aicache.models import CacheNode, CacheRoot, SafetyTier, ScanResult
from aicache.overrides import OverrideStore
from aicache.sizing import expand_path, get_directory_size, get_entry_size

logger = logging.getLogger(__name__)

# Platform metadata files: never surfaced, never classified
IGNORED_NAMES = frozenset({".DS_Store", "Thumbs.db", "desktop.ini"})

CACHE_ROOTS: tuple[CacheRoot, ...] = (
    CacheRoot(
        name=".claude",
        path="~/.claude",
        tool_name="Claude Code",
        safety_tier=SafetyTier.CAUTION,
        description="Claude Code CLI data",
    ),
    CacheRoot(
        name=".gemini",
        path="~/.gemini",
        tool_name="Gemini/Antigravity",
        safety_tier=SafetyTier.CAUTION,
        description="Gemini/Antigravity data",
        expand_subdir="antigravity",
        extra_children=("antigravity-browser-profile",),
    ),
    CacheRoot(
        name="claude-cli-nodejs",
        path="~/Library/Caches/claude-cli-nodejs",
        tool_name="Claude Code",
        safety_tier=SafetyTier.SAFE,
        description="Claude CLI cache - safe to delete",
        expand=False,
        platform="darwin",
    ),
)


def is_visible(name: str) -> bool:
    """Whether a directory entry is listed as a child node."""
    return name not in IGNORED_NAMES and not name.startswith(".")


def _list_entries(path: str) -> list[os.DirEntry]:
    """Entries of a directory in name order, empty if unreadable."""
    try:
        with os.scandir(path) as entries:
            return sorted(entries, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Cannot list %s: %s", path, e)
        return []


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def sort_nodes(nodes: list[CacheNode]) -> list[CacheNode]:
    """Sort nodes by size descending; equal sizes keep their order."""
    return sorted(nodes, key=lambda n: n.size, reverse=True)


def _make_node(
    path: str,
    name: str,
    size: int,
    tool_name: str,
    settings: Settings,
    overrides: Optional[OverrideStore],
    children: Optional[list[CacheNode]] = None,
) -> CacheNode:
    tier, description, is_custom = classify_path(
        tool_name, path, name, overrides, settings.default_safety_tier
    )
    return CacheNode(
        path=path,
        name=name,
        size=size,
        safety_tier=tier,
        description=description,
        is_custom=is_custom,
        children=children,
    )


def expand_directory(
    path: str,
    tool_name: str,
    depth: int,
    settings: Settings,
    overrides: Optional[OverrideStore] = None,
) -> tuple[int, list[CacheNode]]:
    """
    Measure a directory and build nodes for its visible subdirectories.

    Every entry is measured exactly once: the total is the sum of the
    child sizes, including hidden entries and plain files that are not
    turned into nodes.

    Args:
        path: Directory to expand
        tool_name: Signature used to classify children
        depth: Levels of children to build (1 = immediate children only)
        settings: Scan settings
        overrides: User override store

    Returns:
        Tuple of (total_bytes, child nodes sorted by size)
    """
    total_size = 0
    nodes: list[CacheNode] = []

    for entry in _list_entries(path):
        if not _is_dir(entry) or not is_visible(entry.name):
            total_size += get_entry_size(entry)
            continue

        if depth > 1:
            size, children = expand_directory(entry.path, tool_name, depth - 1, settings, overrides)
        else:
            size, children = get_directory_size(entry.path), None

        total_size += size
        nodes.append(
            _make_node(entry.path, entry.name, size, tool_name, settings, overrides, children)
        )

    return total_size, sort_nodes(nodes)


def _expand_nested(
    root_path: str, root: CacheRoot, settings: Settings, overrides: Optional[OverrideStore]
) -> tuple[int, list[CacheNode]]:
    """Expand a root whose children come from a subdirectory plus named extras."""
    total_size = 0
    nodes: list[CacheNode] = []

    for entry in _list_entries(root_path):
        is_dir = _is_dir(entry)
        if is_dir and entry.name == root.expand_subdir:
            size, children = expand_directory(
                entry.path, root.tool_name, settings.max_depth, settings, overrides
            )
            nodes.extend(children)
        elif is_dir and entry.name in root.extra_children:
            size = get_directory_size(entry.path)
            nodes.append(
                _make_node(entry.path, entry.name, size, root.tool_name, settings, overrides)
            )
        else:
            size = get_entry_size(entry)
        total_size += size

    return total_size, sort_nodes(nodes)


def scan_root(
    root: CacheRoot,
    settings: Optional[Settings] = None,
    overrides: Optional[OverrideStore] = None,
    home: Optional[Path] = None,
) -> Optional[CacheNode]:
    """
    Scan a single cache root.

    Args:
        root: Root definition
        settings: Scan settings (default: Settings())
        overrides: User override store
        home: Home directory for ~ expansion

    Returns:
        CacheNode for the root, or None if it does not exist
    """
    settings = settings or Settings()
    root_path = expand_path(root.path, home)

    try:
        if not root_path.is_dir():
            logger.debug("Cache root not present: %s", root_path)
            return None
    except OSError:
        return None

    path_str = str(root_path)
    children: Optional[list[CacheNode]] = None

    if not root.expand:
        size = get_directory_size(root_path)
    elif root.expand_subdir is not None:
        size, children = _expand_nested(path_str, root, settings, overrides)
    else:
        size, children = expand_directory(
            path_str, root.tool_name, settings.max_depth, settings, overrides
        )

    tier, description = root.safety_tier, root.description
    override = resolve_override(overrides, path_str)
    if override is not None:
        tier, description = override, USER_DEFINED_DESCRIPTION

    logger.debug("Scanned %s: %d bytes, %d children", path_str, size, len(children or []))
    return CacheNode(
        path=path_str,
        name=root.name,
        size=size,
        safety_tier=tier,
        description=description,
        is_custom=override is not None,
        children=children,
    )


def scan_all_caches(
    settings: Optional[Settings] = None,
    overrides: Optional[OverrideStore] = None,
    home: Optional[Path] = None,
    platform: Optional[str] = None,
) -> ScanResult:
    """
    Scan every known cache root that exists on this machine.

    Args:
        settings: Scan settings (default tier, expansion depth)
        overrides: User override store consulted for every node
        home: Home directory for ~ expansion (default: the OS home)
        platform: Platform name used to filter roots (default: sys.platform)

    Returns:
        ScanResult with one node per existing root, in root order
    """
    settings = settings or Settings()
    platform = platform or sys.platform

    directories: list[CacheNode] = []
    for root in CACHE_ROOTS:
        if not root.applies_to(platform):
            continue
        node = scan_root(root, settings, overrides, home)
        if node is not None:
            directories.append(node)

    return ScanResult(directories=directories)
