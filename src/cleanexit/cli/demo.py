# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""cleanexit demo - run a process with stacked cleanup handlers."""

from __future__ import annotations

import builtins
import logging
import sys
import threading
import time

import click

import cleanexit
from cleanexit._types import CleanupHandler

# Messages offered to every install() after the first; they never take effect
_LATER_MESSAGES = {
    "on_signal_interrupt": "[ignored ctrl-C message]",
    "on_uncaught_exception": "[ignored exception message]",
}


def _make_handler(number: int, veto: bool) -> CleanupHandler:
    def handler(exit_code: int | None, signal_name: str | None) -> bool:
        reason = signal_name if signal_name is not None else exit_code
        click.echo(f"cleanup{number} {reason}")
        return not veto

    return handler


@click.command()
@click.option(
    "--handlers",
    "-n",
    "handler_count",
    type=click.IntRange(min=0),
    default=1,
    show_default=True,
    help="Number of cleanup handlers to install (0 installs a bare no-op).",
)
@click.option(
    "--veto",
    "vetoes",
    multiple=True,
    type=click.IntRange(min=1),
    help="Handler number that vetoes signals (repeatable).",
)
@click.option("--sigint-message", default=None, help="SIGINT message for the first install.")
@click.option(
    "--exception-message", default=None, help="Uncaught exception message for the first install."
)
@click.option(
    "--second-messages",
    is_flag=True,
    default=False,
    help="Pass different messages to later installs (they must be ignored).",
)
@click.option("--uninstall", is_flag=True, default=False, help="Uninstall before waiting.")
@click.option(
    "--wait",
    "wait_seconds",
    type=click.FloatRange(min=0),
    default=0.0,
    help="Seconds to wait for signals after printing 'ready'.",
)
@click.option("--raise-exception", is_flag=True, default=False, help="Finish with an exception.")
@click.option("--exit-code", type=int, default=0, help="Exit code when finishing normally.")
@click.option(
    "--exit-via",
    type=click.Choice(["click", "builtin", "thread"]),
    default="click",
    show_default=True,
    help="How to finish normally: click's exit, the builtin exit(), or sys.exit() in a "
    "worker thread followed by a clean exit.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def demo(
    ctx: click.Context,
    handler_count: int,
    vetoes: tuple[int, ...],
    sigint_message: str | None,
    exception_message: str | None,
    second_messages: bool,
    uninstall: bool,
    wait_seconds: float,
    raise_exception: bool,
    exit_code: int,
    exit_via: str,
    verbose: bool,
) -> None:
    """Install cleanup handlers, then exit, fail or wait for a signal.

    Each handler prints "cleanupN <reason>" where the reason is the exit
    code or the signal name.

    Examples:

        cleanexit demo -n 2 --veto 1 --wait 30

        cleanexit demo --raise-exception --exception-message "Boom"
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    first_messages = {
        "on_signal_interrupt": sigint_message,
        "on_uncaught_exception": exception_message,
    }

    if handler_count == 0:
        cleanexit.install(None, first_messages)
    for number in range(1, handler_count + 1):
        messages = first_messages if number == 1 or not second_messages else _LATER_MESSAGES
        cleanexit.install(_make_handler(number, number in vetoes), messages)

    if uninstall:
        cleanexit.uninstall()

    click.echo("ready")
    if wait_seconds:
        time.sleep(wait_seconds)

    if raise_exception:
        raise RuntimeError("demo failure")
    if exit_via == "builtin":
        builtins.exit(exit_code)
    if exit_via == "thread":
        worker = threading.Thread(target=sys.exit, args=(exit_code,))
        worker.start()
        worker.join()
        exit_code = 0
    ctx.exit(exit_code)
