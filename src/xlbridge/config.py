from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path

from pydantic import BaseModel, Field

from .io import PathPolicy

DEFAULT_PAGE_SIZE = 5000

_DISABLE_LIVE_ENV = "XLBRIDGE_DISABLE_LIVE"
_VISIBLE_ENV = "XLBRIDGE_VISIBLE"
_PAGE_SIZE_ENV = "XLBRIDGE_PAGE_SIZE"
_LOG_LEVEL_ENV = "XLBRIDGE_LOG_LEVEL"
_ROOT_ENV = "XLBRIDGE_ROOT"


class BridgeConfig(BaseModel):
    """Runtime configuration shared by the selector and the CLI."""

    default_page_size: int = Field(
        default=DEFAULT_PAGE_SIZE, description="Cells per page for fixed-size paging."
    )
    live_backend: bool = Field(
        default=True, description="Try the Excel automation backend first."
    )
    visible: bool = Field(
        default=False, description="Show Excel when the backend launches it."
    )
    log_level: str = Field(default="INFO", description="Logging level.")
    log_file: Path | None = Field(default=None, description="Optional log file path.")
    policy: PathPolicy | None = Field(
        default=None, description="Optional filesystem access policy."
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BridgeConfig:
        """Build a config from ``XLBRIDGE_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Parsed configuration.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if env.get(_DISABLE_LIVE_ENV) == "1":
            values["live_backend"] = False
        if env.get(_VISIBLE_ENV) == "1":
            values["visible"] = True
        page_size = env.get(_PAGE_SIZE_ENV)
        if page_size:
            values["default_page_size"] = int(page_size)
        log_level = env.get(_LOG_LEVEL_ENV)
        if log_level:
            values["log_level"] = log_level
        root = env.get(_ROOT_ENV)
        if root:
            values["policy"] = PathPolicy(root=Path(root))
        return cls.model_validate(values)


__all__ = ["DEFAULT_PAGE_SIZE", "BridgeConfig"]
