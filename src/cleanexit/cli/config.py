# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""cleanexit config - show the termination messages install() would use."""

from __future__ import annotations

import json

import click

from cleanexit._defaults import (
    HANDLED_SIGNALS,
    UNCAUGHT_EXCEPTION_EXIT_CODE,
    TerminationMessages,
)


@click.command("config")
@click.option(
    "--output",
    "-o",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format.",
)
def show_config(output_format: str) -> None:
    """Show handled triggers and their messages.

    Messages come from CLEANEXIT_SIGINT_MESSAGE and CLEANEXIT_EXCEPTION_MESSAGE
    when set, otherwise from the built-in defaults.
    """
    messages = TerminationMessages.from_env()
    rows = [(sig.name, messages.for_signal(sig.name)) for sig in HANDLED_SIGNALS]
    rows.append(("exception", messages.on_uncaught_exception))

    if output_format == "json":
        data = {
            "messages": {trigger: message for trigger, message in rows},
            "uncaught_exception_exit_code": UNCAUGHT_EXCEPTION_EXIT_CODE,
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"{'TRIGGER':<12} {'MESSAGE'}")
    click.echo(f"{'-' * 12} {'-' * 24}")
    for trigger, message in rows:
        click.echo(f"{trigger:<12} {message or '-'}")
