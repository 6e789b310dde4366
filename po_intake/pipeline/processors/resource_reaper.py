"""Guaranteed cleanup of per-request artifacts.

Every file the pipeline writes is tracked here before it is created, and
`reap()` is called from the orchestrator's `finally` block. Cleanup problems
are reported as strings, never raised.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ResourceReaper:
    """Track transient files inside one request workspace and delete them.

    Usage:
        with ResourceReaper.create(base_dir) as reaper:
            path = reaper.track(reaper.workspace / "00_input.pdf")
            ...
        reaper.errors  # cleanup messages, if any
    """

    def __init__(self, workspace: Optional[Path] = None):
        self.workspace = workspace
        self.errors: list[str] = []
        self._tracked: list[Path] = []
        self._seen: set[Path] = set()

    @classmethod
    def create(cls, base_dir: Optional[PathLike] = None, prefix: str = "po_intake_") -> "ResourceReaper":
        if base_dir is not None:
            Path(base_dir).mkdir(parents=True, exist_ok=True)
        workspace = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
        return cls(workspace)

    @property
    def tracked(self) -> list[Path]:
        return list(self._tracked)

    def track(self, path: PathLike) -> Path:
        """Register an artifact for deletion; returns it as a Path."""
        path = Path(path)
        if path not in self._seen:
            self._seen.add(path)
            self._tracked.append(path)
        return path

    def reap(self) -> list[str]:
        """Delete every tracked artifact, then the workspace directory.

        Each artifact is attempted once regardless of earlier failures.
        Returns the cleanup errors produced by this call.
        """
        errors: list[str] = []
        pending, self._tracked = self._tracked, []

        for path in pending:
            if not path.exists():
                continue
            if not path.is_file():
                errors.append(f"{path} is not a file")
                continue
            try:
                path.unlink()
            except OSError as e:
                errors.append(f"Error deleting {path}: {e.strerror or e}")

        if self.workspace is not None and self.workspace.exists():
            try:
                self.workspace.rmdir()
            except OSError as e:
                errors.append(f"Error deleting {self.workspace}: {e.strerror or e}")

        if errors:
            logger.warning(
                "Cleanup finished with %d error(s)", len(errors), extra={"error_code": "CLEANUP"}
            )
        else:
            logger.debug("Cleanup finished, %d artifact(s) removed", len(pending))

        self.errors.extend(errors)
        return errors

    def __enter__(self) -> "ResourceReaper":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.reap()
