"""Cyclopts CLI entrypoint for building folio sites.

The ``folio`` console script defined here renders every page under the
configured root into the output directory. Typical usage involves running
``folio build`` locally or in CI; the command exits with status 1 when any
page had to fall back to an error page, after writing all pages.

Examples
--------
Build the site described by ``folio.yaml``:

>>> from folio_pages.cli import main
>>> main()  # doctest: +SKIP

Build into a custom directory:

>>> from folio_pages.cli import app
>>> app(["build", "--output-dir", "public"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_site_config
from .site import SiteBuilder

DEFAULT_CONFIG = Path("folio.yaml")

app = App(name="folio", config=cyclopts.config.Env("FOLIO_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render every page of the site into the output directory.")
def build(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="FOLIO_CONFIG")
    ] = DEFAULT_CONFIG,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="FOLIO_OUTPUT_DIR"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log layout and fragment decisions")
    ] = False,
) -> None:
    """Build the site described by ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``folio.yaml`` configuration file (overridable via
        ``FOLIO_CONFIG``).
    output_dir : Path or None, optional
        Directory to write pages into instead of the configured ``output``.
    verbose : bool, optional
        Enable debug logging for the rendering pipeline.

    Returns
    -------
    None
        Writes rendered pages and prints the generated paths.

    Raises
    ------
    SystemExit
        With status 1 when at least one page failed to render; every page,
        failed or not, has been written by then.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    site_config = load_site_config(config)
    if output_dir is not None:
        site_config.output_dir = output_dir

    report = SiteBuilder(site_config).run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    for failure in report.failures:
        label = _format_path(failure.path)
        print(f"failed {label}: {failure.message}", file=sys.stderr)
    if not report.ok:
        raise SystemExit(1)


def main() -> None:
    """Invoke the Cyclopts application that powers the `folio` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
