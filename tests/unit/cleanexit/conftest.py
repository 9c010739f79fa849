# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Shared fixtures for cleanexit unit tests."""

from __future__ import annotations

import builtins
import signal
import sys
from collections.abc import Iterator
from unittest.mock import patch

import pytest

from cleanexit._cleanup import _CleanupCoordinator, _reset_for_testing
from cleanexit._defaults import (
    EXCEPTION_MESSAGE_ENV_VAR,
    HANDLED_SIGNALS,
    SIGINT_MESSAGE_ENV_VAR,
)


@pytest.fixture(autouse=True)
def restore_process_hooks() -> Iterator[None]:
    """Put signal dispositions and the exit hooks back after each test.

    Tests that re-raise a signal (with raise_signal mocked) leave SIG_DFL
    behind, which the coordinator reset alone would not undo.
    """
    saved_signals = {signum: signal.getsignal(signum) for signum in HANDLED_SIGNALS}
    saved_excepthook = sys.excepthook
    saved_exit = sys.exit
    saved_quitters = {name: getattr(builtins, name, None) for name in ("exit", "quit")}
    _reset_for_testing()
    yield
    _reset_for_testing()
    for signum, handler in saved_signals.items():
        signal.signal(signum, signal.SIG_DFL if handler is None else handler)
    sys.excepthook = saved_excepthook
    sys.exit = saved_exit
    for name, quitter in saved_quitters.items():
        if quitter is not None:
            setattr(builtins, name, quitter)


@pytest.fixture(autouse=True)
def clean_message_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear message env vars so the developer's environment can't leak in."""
    monkeypatch.delenv(SIGINT_MESSAGE_ENV_VAR, raising=False)
    monkeypatch.delenv(EXCEPTION_MESSAGE_ENV_VAR, raising=False)


@pytest.fixture
def coordinator() -> _CleanupCoordinator:
    return _CleanupCoordinator.get()


@pytest.fixture
def mock_raise_signal() -> Iterator[object]:
    """Stop re-raised signals from reaching the test process."""
    with patch("cleanexit._cleanup.signal.raise_signal") as mock_raise:
        yield mock_raise


class Recorder:
    """Cleanup handler that records its calls and returns a fixed value."""

    def __init__(self, result: object = None, name: str = "handler") -> None:
        self.result = result
        self.name = name
        self.calls: list[tuple[int | None, str | None]] = []

    def __call__(self, exit_code: int | None, signal_name: str | None) -> object:
        self.calls.append((exit_code, signal_name))
        return self.result

    def __repr__(self) -> str:
        return f"Recorder({self.name})"


@pytest.fixture
def make_recorder() -> type[Recorder]:
    return Recorder
