# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Process-wide cleanup coordinator.

This module attaches atexit, signal and excepthook listeners the first time
a cleanup handler is installed, and fans every termination trigger out to
the registered handlers:

- SIGINT, SIGHUP, SIGQUIT and SIGTERM: handlers may veto. If none does, the
  listeners are detached and the signal is re-raised with its default
  disposition so the process dies from that signal.
- Uncaught exceptions: an optional message and the traceback are written to
  stderr, and the process exits with UNCAUGHT_EXCEPTION_EXIT_CODE.
- Interpreter exit: handlers are told the exit code. No veto is possible.

Only the messages passed with the first install() take effect.
"""

from __future__ import annotations

import atexit
import builtins
import logging
import signal
import sys
import threading
import traceback
from collections.abc import Callable, Mapping
from types import FrameType, TracebackType
from typing import Any, NoReturn

from cleanexit._defaults import (
    HANDLED_SIGNALS,
    UNCAUGHT_EXCEPTION_EXIT_CODE,
    TerminationMessages,
)
from cleanexit._dispatch import dispatch_signal, notify_exit
from cleanexit._registry import HandlerRegistry
from cleanexit._types import (
    CleanupHandler,
    InstallationState,
    TerminationEvent,
    normalize_exit_code,
)
from cleanexit.exceptions import InstallationError

logger = logging.getLogger(__name__)

# Type alias for signal handlers
_SignalHandler = Callable[[int, FrameType | None], Any] | int | None
_ExceptHook = Callable[[type[BaseException], BaseException, TracebackType | None], Any]

# Interactive helpers added by the site module; absent under python -S
_BUILTIN_EXITS = ("exit", "quit")


def _flush_std_streams() -> None:
    """Flush stdout and stderr before the process dies from a signal."""
    for stream in (sys.stdout, sys.stderr):
        if stream is None:
            continue
        try:
            stream.flush()
        except (OSError, ValueError):
            logger.debug("Could not flush %r", stream, exc_info=True)


class _RecordingQuitter:
    """Replacement for the builtin exit()/quit() that records the exit code."""

    def __init__(self, coordinator: _CleanupCoordinator, original: Callable[..., Any]) -> None:
        self.coordinator = coordinator
        self.original = original

    def __repr__(self) -> str:
        return repr(self.original)

    def __call__(self, code: object = None) -> NoReturn:
        self.coordinator._remember_exit_code(code)
        self.original(code)
        raise SystemExit(code)


class _CleanupCoordinator:
    """Singleton owning the handler registry and the termination listeners.

    Usage:
        coordinator = _CleanupCoordinator.get()
        coordinator.install(handler)
        ...
        coordinator.uninstall()

    State:
        The registry decides InstallationState (UNINSTALLED or ACTIVE).
        Listeners are attached on the UNINSTALLED -> ACTIVE transition and
        detached by uninstall() or right before a signal is re-raised. The
        latter keeps the registry, so an ACTIVE coordinator may have its
        listeners detached.

    Thread Safety:
        The singleton instance is created lazily and protected by a lock.
        Listeners can only be attached from the main thread, which is also
        where CPython runs signal handlers.
    """

    _instance: _CleanupCoordinator | None = None
    _instance_lock: threading.Lock = threading.Lock()

    def __init__(self) -> None:
        """Initialize the coordinator.

        Do not call directly - use _CleanupCoordinator.get() to obtain the singleton.
        """
        self._registry = HandlerRegistry()
        self._messages = TerminationMessages()
        self._attached = False
        self._original_handlers: dict[int, _SignalHandler] = {}
        self._original_excepthook: _ExceptHook | None = None
        self._original_exit: Callable[..., NoReturn] | None = None
        self._original_quitters: dict[str, Callable[..., Any]] = {}
        self._exit_code: int | None = None
        self._exit_notified = False
        self._dispatching = False

    @classmethod
    def get(cls) -> _CleanupCoordinator:
        """Get the singleton _CleanupCoordinator instance.

        Creates the instance on first call. Thread-safe.
        """
        if cls._instance is None:
            with cls._instance_lock:
                # Double-check after acquiring lock
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @property
    def state(self) -> InstallationState:
        return self._registry.state

    @property
    def messages(self) -> TerminationMessages:
        return self._messages

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def handlers(self) -> tuple[CleanupHandler, ...]:
        return self._registry.snapshot()

    def install(
        self,
        handler: CleanupHandler | None = None,
        messages: TerminationMessages | Mapping[str, Any] | None = None,
    ) -> None:
        """Register a cleanup handler, attaching listeners on first use.

        Args:
            handler: Called as ``handler(exit_code, signal_name)``. None
                installs a no-op so a bare call still honors signals
                gracefully.
            messages: Termination messages. Ignored unless this call
                activates the coordinator.

        Raises:
            InstallationError: If activation is attempted off the main thread.
            ConfigurationError: If ``messages`` has an unknown key.
            AsyncHandlerError: If ``handler`` is a coroutine function.
            InvalidHandlerError: If ``handler`` is not callable.
        """
        if self._registry.is_active():
            self._registry.register(handler)
            return

        if threading.current_thread() is not threading.main_thread():
            raise InstallationError("cleanexit.install() must first be called from the main thread")

        # Resolve before registering so a bad key leaves the coordinator untouched
        resolved = TerminationMessages.resolve(messages)
        self._registry.register(handler)
        self._messages = resolved
        self._attach()

    def uninstall(self) -> None:
        """Detach all listeners and drop every registered handler.

        Safe to call repeatedly, including when nothing is installed.
        """
        if not self._registry.is_active() and not self._attached:
            return
        self._detach()
        self._registry.clear()
        self._exit_code = None
        logger.debug("Uninstalled cleanup handlers")

    def _attach(self) -> None:
        for signum in HANDLED_SIGNALS:
            self._original_handlers[signum] = signal.signal(signum, self._on_signal)

        self._original_excepthook = sys.excepthook
        sys.excepthook = self._on_uncaught_exception

        self._original_exit = sys.exit
        sys.exit = self._record_exit

        for name in _BUILTIN_EXITS:
            original = getattr(builtins, name, None)
            if original is not None:
                self._original_quitters[name] = original
                setattr(builtins, name, _RecordingQuitter(self, original))

        atexit.register(self._on_exit)

        self._exit_code = None
        self._exit_notified = False
        self._dispatching = False
        self._attached = True
        names = ", ".join(s.name for s in HANDLED_SIGNALS)
        logger.debug("Installed cleanup handlers for %s", names)

    def _detach(self) -> None:
        if not self._attached:
            return

        for signum, original in self._original_handlers.items():
            # None means the previous handler was not installed from Python
            signal.signal(signum, signal.SIG_DFL if original is None else original)
        self._original_handlers.clear()

        # Leave hooks alone if someone else replaced them after us
        if sys.excepthook == self._on_uncaught_exception:
            sys.excepthook = self._original_excepthook or sys.__excepthook__
        if sys.exit == self._record_exit and self._original_exit is not None:
            sys.exit = self._original_exit
        for name, original in self._original_quitters.items():
            current = getattr(builtins, name, None)
            if isinstance(current, _RecordingQuitter) and current.coordinator is self:
                setattr(builtins, name, original)
        self._original_quitters.clear()

        atexit.unregister(self._on_exit)
        self._attached = False
        logger.debug("Detached cleanup listeners")

    def _remember_exit_code(self, status: object) -> None:
        # SystemExit outside the main thread only ends that thread
        if threading.current_thread() is threading.main_thread():
            self._exit_code = normalize_exit_code(status)

    def _record_exit(self, status: object = None) -> NoReturn:
        """Stand-in for sys.exit that remembers the requested exit code."""
        self._remember_exit_code(status)
        original = self._original_exit
        if original is None:
            raise SystemExit(status)
        original(status)

    def _on_signal(self, signum: int, frame: FrameType | None) -> None:
        """Handle SIGINT, SIGHUP, SIGQUIT and SIGTERM.

        Every handler is consulted. A single veto keeps the process running
        with listeners still attached; otherwise the signal is re-raised so
        the process terminates from it. A signal arriving while handlers are
        still running skips them and terminates the process right away.
        """
        if self._dispatching:
            logger.debug("%s received during cleanup, terminating", signal.Signals(signum).name)
            self._redeliver(signum)
            return

        event = TerminationEvent.for_signal(signum)
        self._dispatching = True
        try:
            proceed = dispatch_signal(self._registry.snapshot(), event)
        finally:
            self._dispatching = False
        if not proceed:
            return

        message = self._messages.for_signal(event.signal or "")
        if message:
            sys.stderr.write(message + "\n")
        self._redeliver(signum)

    def _redeliver(self, signum: int) -> None:
        logger.debug("Re-raising %s with its default disposition", signal.Signals(signum).name)
        _flush_std_streams()
        self._detach()
        signal.signal(signum, signal.SIG_DFL)
        signal.raise_signal(signum)

    def _on_uncaught_exception(
        self,
        exc_type: type[BaseException],
        exc_value: BaseException,
        tb: TracebackType | None,
    ) -> None:
        """Report an uncaught exception and mark the exit as failed.

        The interpreter exits with UNCAUGHT_EXCEPTION_EXIT_CODE once this
        hook returns, and the exit notification follows from atexit.
        """
        if not self._attached:
            hook = self._original_excepthook or sys.__excepthook__
            hook(exc_type, exc_value, tb)
            return

        message = self._messages.on_uncaught_exception
        if message:
            sys.stderr.write(message + "\n")
            sys.stderr.write("".join(traceback.format_exception(exc_type, exc_value, tb)))
        self._exit_code = UNCAUGHT_EXCEPTION_EXIT_CODE

    def _on_exit(self) -> None:
        """atexit callback: tell every handler the final exit code, once."""
        if self._exit_notified:
            return
        self._exit_notified = True

        code = 0 if self._exit_code is None else self._exit_code
        failures = notify_exit(self._registry.snapshot(), TerminationEvent.for_exit(code))
        if failures:
            logger.debug("%d cleanup handler(s) failed at exit", failures)

    @classmethod
    def _reset_for_testing(cls) -> None:
        """Reset the singleton for testing purposes.

        This method is intended for use in tests only. It detaches every
        listener and clears the singleton instance.
        """
        if cls._instance is not None:
            cls._instance.uninstall()
            cls._instance = None


def install(
    handler: CleanupHandler | None = None,
    messages: TerminationMessages | Mapping[str, Any] | None = None,
) -> None:
    """Install a function that runs just before the process terminates.

    The handler runs when the process exits normally, when it receives
    SIGINT, SIGHUP, SIGQUIT or SIGTERM, and when an exception goes uncaught.
    It is called as ``handler(exit_code, signal_name)`` where exactly one
    argument is not None. For signals, returning ``False`` (or
    ``Verdict.VETO``) keeps the process alive.

    Call this multiple times to install multiple handlers. Only the
    messages provided with the first call are used.

    The exit code handlers receive comes from ``sys.exit()``, ``exit()`` or
    ``quit()`` called in the main thread, or is 1 after an uncaught
    exception, and 0 otherwise. Python does not expose the final status to
    atexit, so ``raise SystemExit(n)`` written directly is reported as 0,
    and a ``sys.exit(n)`` whose SystemExit the application catches stays
    recorded as n.

    Example:
        ```python
        def cleanup(exit_code, signal_name):
            release_resources()
            if signal_name == "SIGINT":
                return not confirm_still_running()

        cleanexit.install(cleanup, {"on_signal_interrupt": ""})
        ```
    """
    _CleanupCoordinator.get().install(handler, messages)


def uninstall() -> None:
    """Remove all cleanup handlers and restore default termination behavior."""
    _CleanupCoordinator.get().uninstall()


def is_installed() -> bool:
    """Return True while at least one cleanup handler is registered."""
    return _CleanupCoordinator.get().state is InstallationState.ACTIVE


install.uninstall = uninstall  # type: ignore[attr-defined]


def _reset_for_testing() -> None:
    """Reset cleanup state for testing.

    This function is intended for use in tests only. It restores the
    original signal handlers, excepthook, sys.exit and the builtin
    exit()/quit().
    """
    _CleanupCoordinator._reset_for_testing()
