# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""cleanexit CLI - try out cleanup handlers from a terminal.

The functions in this package are intended to be called via the CLI,
not from Python code. No backwards compatibility guarantees are made
for Python calling patterns.
"""

from __future__ import annotations

from typing import Any

try:
    import click
except ModuleNotFoundError as e:
    if getattr(e, "name", None) == "click":
        raise ImportError(
            "cleanexit CLI requires the 'cli' extra. Install it with: pip install cleanexit[cli]",
            name="click",
        ) from e
    raise

from cleanexit.cli.config import show_config
from cleanexit.cli.demo import demo
from cleanexit.exceptions import CleanExitError


class _CleanExitCLI(click.Group):
    """Click group with top-level CleanExitError handling.

    Library errors (bad message keys, installation failures) are caught and
    printed as clean "Error: <message>" output instead of raw tracebacks.
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except CleanExitError as exc:
            raise click.ClickException(str(exc)) from None


@click.group(cls=_CleanExitCLI)
@click.version_option(package_name="cleanexit")
def cli() -> None:
    """cleanexit CLI."""


cli.add_command(demo, "demo")
cli.add_command(show_config, "config")
