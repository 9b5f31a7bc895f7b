"""Centralised settings for distfetch.

Ambient defaults are resolved here in one place.  Values can be overridden
via environment variables or a `.env` file in the working directory (loaded
automatically when this module is imported).

Only the CLI reads :data:`settings`.  It turns them into a frozen
:class:`RunConfig` once at startup, and that value is passed down explicitly
to the pipeline and the downloader.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from dotenv import load_dotenv

from distfetch.errors import OutputDirectoryError

load_dotenv(Path.cwd() / ".env", override=False)

DIST_ROOT = "https://dist.torproject.org/torbrowser"
DEFAULT_VERSION = "14.5.1"

ALLOWED_EXTENSIONS: FrozenSet[str] = frozenset(
    {
        ".asc",
        ".asc-ma1",
        ".asc-pierov",
        ".apk",
        ".bspatch",
        ".dmg",
        ".exe",
        ".gz",
        ".idsig",
        ".mar",
        ".txt",
        ".zip",
        ".xz",
    }
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Release selection / output
    # ------------------------------------------------------------------
    default_version: str = field(
        default_factory=lambda: os.environ.get("DISTFETCH_VERSION", DEFAULT_VERSION)
    )
    output_root: Path = field(
        default_factory=lambda: Path(os.environ.get("DISTFETCH_OUTPUT_ROOT", "."))
    )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("DISTFETCH_REQUEST_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "DISTFETCH_USER_AGENT", "distfetch/0.1 (+https://dist.torproject.org/)"
        )
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("DISTFETCH_LOG_LEVEL", "INFO")
    )
    log_file: Optional[Path] = field(
        default_factory=lambda: (
            Path(os.environ["DISTFETCH_LOG_FILE"])
            if os.environ.get("DISTFETCH_LOG_FILE")
            else None
        )
    )

    def run_config(self, version: str | None = None) -> RunConfig:
        """Build the immutable configuration for a single run of *version*."""
        version = version or self.default_version
        return RunConfig(
            version=version,
            output_dir=self.output_root / version,
            request_timeout=self.request_timeout,
            user_agent=self.user_agent,
        )


@dataclass(frozen=True)
class RunConfig:
    """Everything one sync of one version needs, fixed at startup."""

    version: str
    output_dir: Path
    dist_root: str = DIST_ROOT
    request_timeout: float = 30.0
    user_agent: str = "distfetch/0.1"
    allowed_extensions: FrozenSet[str] = ALLOWED_EXTENSIONS

    @property
    def base_url(self) -> str:
        """Listing URL for the version; always ends with ``/``."""
        return f"{self.dist_root.rstrip('/')}/{self.version}/"

    def ensure_output_dir(self) -> None:
        """Create the output directory if it does not exist.

        Raises:
            OutputDirectoryError: If the directory cannot be created.
        """
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise OutputDirectoryError(self.output_dir, exc) from exc


# Module-level singleton, imported by the CLI only:
#   from distfetch.config import settings
settings = Settings()
