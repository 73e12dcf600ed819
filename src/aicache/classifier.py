"""Safety classification for cache directories."""

from typing import Optional

from aicache.models import SafetyTier
from aicache.overrides import OverrideStore
from aicache.signatures import get_signature

USER_DEFINED_DESCRIPTION = "User-defined safety level"
UNKNOWN_DESCRIPTION = "Unknown directory"

# Per-directory descriptions for names that appear in signature buckets
DIRECTORY_DESCRIPTIONS: dict[str, str] = {
    # Claude Code (~/.claude)
    "debug": "Debug logs - safe to delete",
    "shell-snapshots": "Shell state snapshots",
    "telemetry": "Usage telemetry data",
    "cache": "Temporary cache files",
    "image-cache": "Cached images",
    "paste-cache": "Paste history cache",
    "session-env": "Session environment data",
    "statsig": "Feature flag cache",
    "file-history": "File edit history - may want to keep",
    "projects": "Project configurations",
    "todos": "Todo items - may contain important notes",
    "plugins": "Installed plugins - do not delete",
    "ide": "IDE integration settings",
    "plans": "Saved plans",
    "skills": "Custom skills - do not delete",
    # Gemini/Antigravity (~/.gemini/antigravity)
    "browser_recordings": "Browser recording videos - usually large",
    "conversations": "Conversation history",
    "brain": "AI task artifacts and plans",
    "implicit": "Implicit context cache",
    "code_tracker": "Code tracking data",
    "context_state": "Context state cache",
    "playground": "Playground files",
    "antigravity-browser-profile": "Browser profile cache",
    # Editors and extensions
    "Cache": "Editor cache files",
    "CachedData": "Cached editor data",
    "CachedExtensions": "Cached extension metadata",
    "logs": "Log files",
    "index": "Code index - rebuilt automatically",
    "User": "User settings and workspace state",
    "Backups": "Unsaved file backups",
    "sessions": "Session history",
    "hosts": "Account host configuration",
    "extensions": "Installed extensions - do not delete",
    "config": "Tool configuration - do not delete",
}

BUCKET_DESCRIPTIONS: dict[SafetyTier, str] = {
    SafetyTier.SAFE: "Regenerable cache data - safe to delete",
    SafetyTier.CAUTION: "May contain user data - review before deleting",
    SafetyTier.DANGER: "Required by the tool - do not delete",
}


def classify(
    tool_name: Optional[str],
    dir_name: str,
    override: Optional[SafetyTier] = None,
    default_tier: SafetyTier = SafetyTier.CAUTION,
) -> tuple[SafetyTier, str]:
    """
    Resolve the safety tier for a directory.

    Precedence: user override, then the tool's signature buckets (most
    conservative bucket wins), then the configured default tier.

    Args:
        tool_name: Tool whose namespace the directory lives in, if known
        dir_name: Directory base name
        override: User-chosen tier for this directory's path, if any
        default_tier: Tier for directories no signature knows about

    Returns:
        Tuple of (tier, description)
    """
    if override is not None:
        return override, USER_DEFINED_DESCRIPTION

    signature = get_signature(tool_name) if tool_name else None
    if signature is not None:
        tier = signature.tier_for(dir_name)
        if tier is not None:
            return tier, DIRECTORY_DESCRIPTIONS.get(dir_name, BUCKET_DESCRIPTIONS[tier])

    return default_tier, UNKNOWN_DESCRIPTION


def resolve_override(store: Optional[OverrideStore], path: str) -> Optional[SafetyTier]:
    """Look up a user override for a path, tolerating a missing store."""
    if store is None:
        return None
    return store.get(path)


def classify_path(
    tool_name: Optional[str],
    path: str,
    name: str,
    store: Optional[OverrideStore] = None,
    default_tier: SafetyTier = SafetyTier.CAUTION,
) -> tuple[SafetyTier, str, bool]:
    """
    Classify a directory by path, consulting the override store.

    Returns:
        Tuple of (tier, description, is_custom)
    """
    override = resolve_override(store, path)
    tier, description = classify(tool_name, name, override, default_tier)
    return tier, description, override is not None
