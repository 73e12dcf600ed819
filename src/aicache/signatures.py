"""Known AI coding-tool signatures for aicache."""

import logging
from pathlib import Path
from typing import Optional

from aicache.models import SearchResult, ToolSignature
from aicache.sizing import expand_path, get_directory_size

logger = logging.getLogger(__name__)

UNKNOWN_TOOL = "Unknown"

# Declaration order is significant: it drives detection output order and
# first-match tool attribution.
AI_TOOL_SIGNATURES: tuple[ToolSignature, ...] = (
    ToolSignature(
        name="Claude Code",
        patterns=[".claude", "claude-cli"],
        locations=["~", "~/Library/Caches"],
        safe_directories=[
            "debug",
            "cache",
            "telemetry",
            "shell-snapshots",
            "image-cache",
            "paste-cache",
            "session-env",
            "statsig",
        ],
        caution_directories=["projects", "todos", "file-history", "plans"],
        danger_directories=["plugins", "skills", "ide"],
    ),
    ToolSignature(
        name="Gemini/Antigravity",
        patterns=[".gemini", "antigravity"],
        locations=["~"],
        safe_directories=[
            "browser_recordings",
            "implicit",
            "context_state",
            "playground",
            "antigravity-browser-profile",
        ],
        caution_directories=["conversations", "brain", "code_tracker"],
    ),
    ToolSignature(
        name="Cursor",
        patterns=[".cursor", "Cursor"],
        locations=["~", "~/Library/Application Support", "~/Library/Caches"],
        safe_directories=["Cache", "CachedData", "logs", "CachedExtensions"],
        caution_directories=["User", "Backups"],
        danger_directories=["extensions"],
    ),
    ToolSignature(
        name="GitHub Copilot",
        patterns=["github-copilot", "copilot"],
        locations=["~/.config", "~/Library/Application Support"],
        safe_directories=["cache", "logs"],
        caution_directories=["hosts"],
    ),
    ToolSignature(
        name="Codeium",
        patterns=[".codeium", "codeium"],
        locations=["~", "~/Library/Application Support"],
        safe_directories=["cache", "logs"],
        danger_directories=["config"],
    ),
    ToolSignature(
        name="Continue",
        patterns=[".continue"],
        locations=["~"],
        safe_directories=["logs", "index"],
        caution_directories=["sessions"],
        danger_directories=["config"],
    ),
    ToolSignature(
        name="Tabnine",
        patterns=[".tabnine", "tabnine"],
        locations=["~", "~/Library/Application Support", "~/Library/Caches"],
        safe_directories=["cache", "logs"],
        danger_directories=["config"],
    ),
    ToolSignature(
        name="Amazon CodeWhisperer",
        patterns=["codewhisperer", "aws-toolkit"],
        locations=["~/.aws", "~/Library/Application Support"],
        safe_directories=["cache", "logs"],
    ),
    ToolSignature(
        name="Sourcegraph Cody",
        patterns=[".cody", "sourcegraph"],
        locations=["~", "~/Library/Application Support"],
        safe_directories=["cache", "logs"],
        caution_directories=["conversations"],
    ),
    ToolSignature(
        name="Windsurf",
        patterns=[".windsurf", "windsurf"],
        locations=["~", "~/Library/Application Support"],
        safe_directories=["cache", "logs"],
    ),
)


def get_signature(name: str) -> Optional[ToolSignature]:
    """Get a signature by tool name."""
    for signature in AI_TOOL_SIGNATURES:
        if signature.name == name:
            return signature
    return None


def get_all_signatures() -> list[ToolSignature]:
    """Get all signatures in declaration order."""
    return list(AI_TOOL_SIGNATURES)


def identify_tool(dir_name: str) -> str:
    """
    Attribute a directory name to a known tool.

    Args:
        dir_name: Directory base name

    Returns:
        Name of the first signature whose pattern occurs in dir_name
        (case-insensitive), or "Unknown"
    """
    for signature in AI_TOOL_SIGNATURES:
        if signature.matches(dir_name):
            return signature.name
    return UNKNOWN_TOOL


def find_known_installations(home: Optional[Path] = None) -> list[SearchResult]:
    """
    Detect installed AI tools by probing every signature location.

    Results follow signature, then location, then pattern order.

    Args:
        home: Home directory for ~ expansion (default: the OS home)

    Returns:
        One SearchResult per existing location/pattern directory
    """
    results: list[SearchResult] = []

    for signature in AI_TOOL_SIGNATURES:
        for location in signature.locations:
            base = expand_path(location, home)

            for pattern in signature.patterns:
                target = base / pattern
                try:
                    if not target.is_dir():
                        continue
                except OSError:
                    continue

                size = get_directory_size(target)
                logger.debug("Detected %s at %s (%d bytes)", signature.name, target, size)
                results.append(
                    SearchResult(
                        tool_name=signature.name,
                        path=str(target),
                        size=size,
                        matched_pattern=pattern,
                    )
                )

    return results
