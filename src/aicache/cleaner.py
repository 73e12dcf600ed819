"""Deletion of cache directories for aicache."""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from aicache.models import BatchDeleteResult, DeleteErrorKind, DeleteResult, SafetyTier
from aicache.sizing import get_directory_size

logger = logging.getLogger(__name__)

TierLookup = Callable[[str], Optional[SafetyTier]]


def _failure(path: str, kind: DeleteErrorKind, message: str) -> DeleteResult:
    return DeleteResult(
        path=path,
        success=False,
        freed_bytes=0,
        error=message,
        error_kind=kind,
    )


def delete_path(path: Union[str, os.PathLike]) -> DeleteResult:
    """
    Permanently delete a file or directory.

    Directory sizes are measured before removal so the freed byte count
    reflects what was on disk.

    Args:
        path: Path to delete

    Returns:
        DeleteResult; failures are reported, never raised
    """
    target = Path(path)
    path_str = str(path)

    if not os.path.lexists(target):
        return _failure(path_str, DeleteErrorKind.NOT_FOUND, "Path does not exist")

    try:
        if target.is_symlink() or not target.is_dir():
            freed = target.lstat().st_size
            target.unlink()
        else:
            freed = get_directory_size(target)
            shutil.rmtree(target)
    except FileNotFoundError:
        return _failure(path_str, DeleteErrorKind.NOT_FOUND, "Path does not exist")
    except PermissionError as e:
        logger.debug("Permission denied deleting %s: %s", path_str, e)
        return _failure(path_str, DeleteErrorKind.PERMISSION_DENIED, f"Permission denied: {e}")
    except OSError as e:
        logger.debug("Failed deleting %s: %s", path_str, e)
        return _failure(path_str, DeleteErrorKind.FAILED, f"OS error: {e}")

    logger.debug("Deleted %s (%d bytes)", path_str, freed)
    return DeleteResult(path=path_str, success=True, freed_bytes=freed)


def delete_many(
    paths: Iterable[Union[str, os.PathLike]],
    tier_lookup: Optional[TierLookup] = None,
    allow_danger: bool = True,
) -> BatchDeleteResult:
    """
    Delete several paths one after another.

    Each path is handled independently: a failure never stops the
    remaining deletions.

    Args:
        paths: Paths to delete, in order
        tier_lookup: Optional callable returning the safety tier of a path
        allow_danger: If False, paths the lookup reports as DANGER are
            refused instead of deleted

    Returns:
        BatchDeleteResult with one DeleteResult per requested path
    """
    results: list[DeleteResult] = []

    for path in paths:
        path_str = str(path)
        if not allow_danger and tier_lookup is not None:
            if tier_lookup(path_str) == SafetyTier.DANGER:
                logger.debug("Refusing danger-tier path %s", path_str)
                results.append(
                    _failure(path_str, DeleteErrorKind.REFUSED, "Refused: danger-tier directory")
                )
                continue

        results.append(delete_path(path))

    batch = BatchDeleteResult(results=results)
    logger.debug(
        "Batch delete: %d succeeded, %d failed, %d bytes freed",
        batch.success_count,
        batch.fail_count,
        batch.total_freed,
    )
    return batch
