from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

from .errors import InvalidFormatError, IOFailureError

WORKBOOK_SUFFIXES: tuple[str, ...] = (".xlsx", ".xlsm", ".xltx", ".xltm")


class PathPolicy(BaseModel):
    """Restricts which workbook paths the selector may open."""

    root: Path = Field(..., description="Directory every workbook must live under.")
    deny_globs: list[str] = Field(
        default_factory=list, description="Glob patterns to deny."
    )

    def normalize_root(self) -> Path:
        return self.root.resolve()

    def ensure_allowed(self, path: Path) -> Path:
        """Resolve ``path`` against the root and check it against the policy.

        Args:
            path: Absolute path, or a path relative to the root.

        Returns:
            Resolved path.

        Raises:
            IOFailureError: If the path escapes the root or matches a deny glob.
        """
        root = self.normalize_root()
        candidate = path if path.is_absolute() else root / path
        resolved = candidate.resolve()
        if resolved != root and root not in resolved.parents:
            raise IOFailureError(f"Path is outside root: {resolved} (root={root})")
        rel = resolved.relative_to(root)
        for pattern in self.deny_globs:
            if rel.match(pattern) or resolved.match(pattern):
                raise IOFailureError(f"Path is denied by policy: {resolved}")
        return resolved


def resolve_workbook_path(path: Path | str, *, policy: PathPolicy | None) -> Path:
    """Resolve a workbook path, applying ``policy`` when one is configured.

    Raises:
        InvalidFormatError: If the suffix is not a workbook suffix openpyxl
            can write.
        IOFailureError: If the policy rejects the path.
    """
    candidate = Path(path)
    if candidate.suffix.lower() not in WORKBOOK_SUFFIXES:
        raise InvalidFormatError(
            f"Unsupported workbook extension: {candidate.suffix or '(none)'}"
        )
    if policy is not None:
        return policy.ensure_allowed(candidate)
    return candidate.resolve()


def file_is_not_writable(path: Path) -> bool:
    """Return True when saving to ``path`` would fail (e.g. locked by Excel)."""
    if not path.exists():
        return not os.access(path.parent, os.W_OK)
    try:
        with path.open("r+b"):
            return False
    except OSError:
        return True


__all__ = [
    "WORKBOOK_SUFFIXES",
    "PathPolicy",
    "file_is_not_writable",
    "resolve_workbook_path",
]
