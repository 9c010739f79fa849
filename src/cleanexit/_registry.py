# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Ordered, append-only collection of cleanup handlers."""

from __future__ import annotations

import inspect

from cleanexit._types import CleanupHandler, InstallationState
from cleanexit.exceptions import AsyncHandlerError, InvalidHandlerError


def _noop(exit_code: int | None, signal: str | None) -> None:
    """Placeholder so a bare install() still gets the signal grace behavior."""


class HandlerRegistry:
    """Cleanup handlers in registration order.

    ``None`` marks the uninstalled state, which is distinct from an active
    registry that holds no handlers. Duplicates are kept and each entry is
    invoked on its own. Handlers cannot be removed individually; clear()
    drops them all.
    """

    def __init__(self) -> None:
        self._handlers: list[CleanupHandler] | None = None

    def register(self, handler: CleanupHandler | None) -> bool:
        """Append ``handler``, activating the registry if needed.

        Args:
            handler: The cleanup callback, or None for a no-op placeholder.

        Returns:
            True if this call moved the registry from uninstalled to active.

        Raises:
            AsyncHandlerError: If ``handler`` is a coroutine function.
            InvalidHandlerError: If ``handler`` is not callable.
        """
        if handler is None:
            handler = _noop
        elif inspect.iscoroutinefunction(handler):
            raise AsyncHandlerError(
                f"Cleanup handler {handler!r} is async; cleanup handlers must be synchronous"
            )
        elif not callable(handler):
            raise InvalidHandlerError(f"Cleanup handler must be callable, got {type(handler)}")

        activated = self._handlers is None
        if activated:
            self._handlers = []
        self._handlers.append(handler)
        return activated

    def clear(self) -> None:
        self._handlers = None

    def is_active(self) -> bool:
        return self._handlers is not None

    @property
    def state(self) -> InstallationState:
        if self._handlers is None:
            return InstallationState.UNINSTALLED
        return InstallationState.ACTIVE

    def snapshot(self) -> tuple[CleanupHandler, ...]:
        """Return the handlers as of now; later registrations don't affect it."""
        if self._handlers is None:
            return ()
        return tuple(self._handlers)

    def __len__(self) -> int:
        return 0 if self._handlers is None else len(self._handlers)
