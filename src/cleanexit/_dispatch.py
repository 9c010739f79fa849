# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Fan-out of termination events to registered cleanup handlers.

Two paths exist. Signal dispatch collects each handler's verdict and tells
the caller whether any handler vetoed the exit. Exit notification happens
when termination is already unconditional, so results are ignored and a
failing handler must not stop the ones after it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable

from cleanexit._types import CleanupHandler, TerminationEvent, Verdict, interpret_result

logger = logging.getLogger(__name__)


def _invoke(handler: CleanupHandler, event: TerminationEvent) -> Verdict:
    result = handler(event.exit_code, event.signal)
    if inspect.isawaitable(result):
        # Nothing here can await it, so the veto is unknowable
        logger.warning("Cleanup handler %r returned an awaitable; ignoring its result", handler)
        close = getattr(result, "close", None)
        if close is not None:
            close()
        return Verdict.CONTINUE
    return interpret_result(result)


def dispatch_signal(handlers: Iterable[CleanupHandler], event: TerminationEvent) -> bool:
    """Invoke every handler for a signal event.

    All handlers run, even after one has vetoed. Exceptions raised by a
    handler propagate to the caller.

    Args:
        handlers: Handlers in registration order.
        event: A signal event.

    Returns:
        True if the exit should proceed, False if at least one handler vetoed.
    """
    if not event.is_signal:
        raise ValueError("dispatch_signal requires a signal event")

    vetoes = 0
    for handler in handlers:
        if _invoke(handler, event) is Verdict.VETO:
            vetoes += 1

    if vetoes:
        logger.debug("%s vetoed by %d cleanup handler(s)", event.signal, vetoes)
        return False
    return True


def notify_exit(handlers: Iterable[CleanupHandler], event: TerminationEvent) -> int:
    """Invoke every handler for an exit event, isolating failures.

    SystemExit and KeyboardInterrupt from a handler are logged and
    swallowed like any other error, since the process is already exiting.

    Returns:
        The number of handlers that raised.
    """
    if event.is_signal:
        raise ValueError("notify_exit requires an exit event")

    failures = 0
    for handler in handlers:
        try:
            _invoke(handler, event)
        except BaseException:
            failures += 1
            logger.exception("Cleanup handler %r failed during exit", handler)
    return failures
