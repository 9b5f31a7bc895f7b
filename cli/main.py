"""distfetch CLI — mirror one Tor Browser release into a local directory.

Usage:
    distfetch --version 14.5.1
    python cli/main.py --help

The listing at ``https://dist.torproject.org/torbrowser/<version>/`` is
fetched, every allowed artifact on it is downloaded into ``<version>/``
(relative to ``DISTFETCH_OUTPUT_ROOT``), and files already present are
skipped.  Per-file failures are reported on stderr and do not change the
exit code; only failing to create the output directory does.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from distfetch.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer

from distfetch.config import settings
from distfetch.errors import OutputDirectoryError
from distfetch.log import setup_logging
from distfetch.pipeline import format_summary, sync_version

app = typer.Typer(
    name="distfetch",
    help="Download Tor Browser release artifacts for one version.",
    add_completion=False,
)


@app.command()
def main(
    version: Optional[str] = typer.Option(
        None,
        "--version",
        help="Tor Browser version to download (default: $DISTFETCH_VERSION or 14.5.1).",
    ),
) -> None:
    """Fetch the version's listing and download every allowed artifact."""
    setup_logging(settings.log_level, settings.log_file)
    config = settings.run_config(version)

    try:
        config.ensure_output_dir()
    except OutputDirectoryError as exc:
        typer.echo(f"Failed to create output directory: {exc.cause}", err=True)
        raise typer.Exit(code=1)

    report = sync_version(
        config, on_error=lambda exc: typer.echo(str(exc), err=True)
    )
    typer.echo(format_summary(report))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
