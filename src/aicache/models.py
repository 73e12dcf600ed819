"""Data models for aicache."""

from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, Field


class SafetyTier(str, Enum):
    """Deletion risk tier for a cache directory."""

    SAFE = "safe"  # Regenerable, freely deletable
    CAUTION = "caution"  # May hold user data
    DANGER = "danger"  # Required for the tool to function

    @property
    def rank(self) -> int:
        """Conservatism rank: higher means riskier to delete."""
        return _TIER_RANKS[self]


_TIER_RANKS = {
    SafetyTier.SAFE: 0,
    SafetyTier.CAUTION: 1,
    SafetyTier.DANGER: 2,
}


class ToolSignature(BaseModel):
    """Where a known AI tool keeps its data and how its directories classify."""

    model_config = {"frozen": True}

    name: str = Field(..., description="Display name of the tool")
    patterns: tuple[str, ...] = Field(..., description="Directory name fragments")
    locations: tuple[str, ...] = Field(..., description="Search roots (supports ~ expansion)")
    safe_directories: frozenset[str] = Field(default_factory=frozenset)
    caution_directories: frozenset[str] = Field(default_factory=frozenset)
    danger_directories: frozenset[str] = Field(default_factory=frozenset)

    def tier_for(self, dir_name: str) -> Optional[SafetyTier]:
        """Bucket tier for a directory name, most conservative bucket first."""
        if dir_name in self.danger_directories:
            return SafetyTier.DANGER
        if dir_name in self.caution_directories:
            return SafetyTier.CAUTION
        if dir_name in self.safe_directories:
            return SafetyTier.SAFE
        return None

    def matches(self, name: str) -> bool:
        """Whether any pattern occurs in name (case-insensitive)."""
        lowered = name.lower()
        return any(p.lower() in lowered for p in self.patterns)


class CacheRoot(BaseModel):
    """A top-level cache directory the scanner always probes."""

    model_config = {"frozen": True}

    name: str = Field(..., description="Display name of the root")
    path: str = Field(..., description="Root path (supports ~ expansion)")
    tool_name: str = Field(..., description="Signature used to classify children")
    safety_tier: SafetyTier = Field(..., description="Fixed tier of the root itself")
    description: str = Field(..., description="Fixed description of the root itself")
    expand: bool = Field(True, description="Whether to list children under the root")
    expand_subdir: Optional[str] = Field(
        None, description="List children of this subdirectory instead of the root"
    )
    extra_children: tuple[str, ...] = Field(
        default_factory=tuple,
        description="Root-level directories shown alongside the expanded children",
    )
    platform: Optional[str] = Field(
        None, description="sys.platform prefix the root is limited to (e.g. 'darwin')"
    )

    def applies_to(self, platform: str) -> bool:
        """Whether the root should be probed on the given platform."""
        return self.platform is None or platform.startswith(self.platform)


class CacheNode(BaseModel):
    """A scanned directory annotated with size and safety tier."""

    path: str = Field(..., description="Absolute path")
    name: str = Field(..., description="Base name used for classification")
    size: int = Field(0, description="Recursive size in bytes")
    safety_tier: SafetyTier = Field(..., description="Resolved safety tier")
    description: str = Field("", description="Why the tier was chosen")
    is_custom: bool = Field(False, description="Tier comes from a user override")
    children: Optional[list["CacheNode"]] = Field(
        None, description="Expanded children sorted by size, None if not expanded"
    )

    def walk(self) -> Iterator["CacheNode"]:
        """Yield this node and every expanded descendant."""
        yield self
        for child in self.children or []:
            yield from child.walk()


class ScanResult(BaseModel):
    """Result of scanning every known cache root."""

    directories: list[CacheNode] = Field(default_factory=list)

    @property
    def total_size(self) -> int:
        """Sum of top-level directory sizes."""
        return sum(d.size for d in self.directories)

    def find(self, path: str) -> Optional[CacheNode]:
        """Find a node by absolute path."""
        for root in self.directories:
            for node in root.walk():
                if node.path == path:
                    return node
        return None

    def tier_index(self) -> dict[str, SafetyTier]:
        """Map of every scanned path to its tier."""
        return {
            node.path: node.safety_tier
            for root in self.directories
            for node in root.walk()
        }


class SearchResult(BaseModel):
    """A directory found by detection or free-text search."""

    tool_name: str = Field(..., description="Attributed tool, or 'Unknown'")
    path: str = Field(..., description="Matched directory path")
    size: int = Field(0, description="Recursive size in bytes")
    matched_pattern: str = Field(..., description="Pattern or name that matched")


class SearchProgress(BaseModel):
    """Progress snapshot emitted after each visited search entry."""

    current: int
    total: int
    current_path: str
    percentage: int


class DeleteErrorKind(str, Enum):
    """Why a deletion failed."""

    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    FAILED = "failed"
    REFUSED = "refused"


class DeleteResult(BaseModel):
    """Outcome of deleting a single path."""

    path: str = Field(..., description="Path that was deleted")
    success: bool = Field(..., description="Whether deletion succeeded")
    freed_bytes: int = Field(0, description="Bytes freed")
    error: Optional[str] = Field(None, description="Error message if failed")
    error_kind: Optional[DeleteErrorKind] = Field(None, description="Failure category")


class BatchDeleteResult(BaseModel):
    """Outcome of deleting several paths independently."""

    results: list[DeleteResult] = Field(default_factory=list)

    @property
    def total_freed(self) -> int:
        """Total bytes freed by successful deletions."""
        return sum(r.freed_bytes for r in self.results if r.success)

    @property
    def success_count(self) -> int:
        """Number of successful deletions."""
        return sum(1 for r in self.results if r.success)

    @property
    def fail_count(self) -> int:
        """Number of failed deletions."""
        return sum(1 for r in self.results if not r.success)

    @property
    def failures(self) -> list[DeleteResult]:
        """Failed results, in request order."""
        return [r for r in self.results if not r.success]
