"""User safety-level overrides, keyed by absolute path."""

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from aicache.models import SafetyTier
from aicache.sizing import expand_path

logger = logging.getLogger(__name__)

CONFIG_DIR = "~/.aicache"
OVERRIDES_FILE_NAME = "overrides.json"
SCHEMA_VERSION = 1


class OverrideStore(Protocol):
    """Lookup/write interface for persisted safety overrides."""

    def get(self, path: str) -> Optional[SafetyTier]: ...

    def set(self, path: str, tier: SafetyTier) -> None: ...

    def remove(self, path: str) -> None: ...

    def clear(self) -> None: ...

    def all(self) -> dict[str, SafetyTier]: ...


class MemoryOverrideStore:
    """Override store that lives only for the current process."""

    def __init__(self, overrides: Optional[dict[str, SafetyTier]] = None):
        self._overrides: dict[str, SafetyTier] = dict(overrides or {})

    def get(self, path: str) -> Optional[SafetyTier]:
        return self._overrides.get(path)

    def set(self, path: str, tier: SafetyTier) -> None:
        self._overrides[path] = SafetyTier(tier)

    def remove(self, path: str) -> None:
        self._overrides.pop(path, None)

    def clear(self) -> None:
        self._overrides.clear()

    def all(self) -> dict[str, SafetyTier]:
        return dict(self._overrides)


class JsonOverrideStore:
    """
    Override store persisted as a versioned JSON document.

    File layout::

        {"version": 1, "overrides": {"/abs/path": "safe"}}

    Every write rewrites the file through a temporary file and os.replace.
    """

    def __init__(self, file: Optional[Path] = None):
        self.file = file if file is not None else expand_path(CONFIG_DIR) / OVERRIDES_FILE_NAME
        self._lock = threading.Lock()

    def _load(self) -> dict[str, SafetyTier]:
        if not self.file.exists():
            return {}

        try:
            with open(self.file) as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable overrides file %s: %s", self.file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed overrides file %s", self.file)
            return {}

        if data.get("version", SCHEMA_VERSION) != SCHEMA_VERSION:
            logger.warning(
                "Overrides file %s has unsupported version %r", self.file, data.get("version")
            )
            return {}

        overrides: dict[str, SafetyTier] = {}
        for path, value in (data.get("overrides") or {}).items():
            try:
                overrides[path] = SafetyTier(value)
            except ValueError:
                logger.warning("Dropping override for %s with unknown tier %r", path, value)
        return overrides

    def _save(self, overrides: dict[str, SafetyTier]) -> None:
        self.file.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "version": SCHEMA_VERSION,
            "overrides": {path: tier.value for path, tier in sorted(overrides.items())},
        }
        fd, tmp_name = tempfile.mkstemp(dir=self.file.parent, prefix=".overrides-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, self.file)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, path: str) -> Optional[SafetyTier]:
        return self._load().get(path)

    def set(self, path: str, tier: SafetyTier) -> None:
        with self._lock:
            overrides = self._load()
            overrides[path] = SafetyTier(tier)
            self._save(overrides)
        logger.debug("Override set: %s -> %s", path, SafetyTier(tier).value)

    def remove(self, path: str) -> None:
        with self._lock:
            overrides = self._load()
            if overrides.pop(path, None) is not None:
                self._save(overrides)
        logger.debug("Override removed: %s", path)

    def clear(self) -> None:
        with self._lock:
            self._save({})
        logger.debug("All overrides cleared")

    def all(self) -> dict[str, SafetyTier]:
        return self._load()
