"""Path expansion and recursive size aggregation."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def expand_path(path: str, home: Optional[Path] = None) -> Path:
    """
    Expand a leading ~ against the user's home directory.

    Args:
        path: Path that may start with ``~`` or ``~/``
        home: Home directory to expand against (default: the OS home)

    Returns:
        Expanded path
    """
    if path == "~" or path.startswith("~/"):
        base = home if home is not None else Path.home()
        return base.joinpath(*path[2:].split("/")) if len(path) > 2 else base
    return Path(os.path.expandvars(path))


def get_directory_size(path: PathLike) -> int:
    """
    Calculate the total size of all files under a directory.

    Uses os.scandir with an explicit stack instead of recursion. Symlinks
    are not followed, and entries that cannot be read contribute nothing.

    Args:
        path: Directory to measure

    Returns:
        Total size in bytes (0 if path is not a readable directory)
    """
    total_size = 0
    pending = [os.fspath(path)]

    while pending:
        current = pending.pop()
        try:
            with os.scandir(current) as entries:
                for entry in entries:
                    try:
                        if entry.is_file(follow_symlinks=False):
                            total_size += entry.stat(follow_symlinks=False).st_size
                        elif entry.is_dir(follow_symlinks=False):
                            pending.append(entry.path)
                    except OSError:
                        continue
        except OSError as e:
            logger.debug("Skipping unreadable directory %s: %s", current, e)

    return total_size


def get_entry_size(entry: os.DirEntry) -> int:
    """Size of a scandir entry: recursive for directories, own size for files."""
    try:
        if entry.is_dir(follow_symlinks=False):
            return get_directory_size(entry.path)
        if entry.is_file(follow_symlinks=False):
            return entry.stat(follow_symlinks=False).st_size
    except OSError:
        pass
    return 0
