# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Value types shared by the registry, dispatch and lifecycle modules."""

from __future__ import annotations

import signal
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# handler(exit_code, signal_name) -> Verdict | bool | None
CleanupHandler = Callable[[int | None, str | None], Any]


class Verdict(StrEnum):
    """A cleanup handler's opinion on a pending signal-triggered exit.

    Returning ``Verdict.VETO`` (or exactly ``False``) keeps the process
    alive. Any other return value, ``None`` included, lets it terminate.
    """

    VETO = "veto"
    CONTINUE = "continue"


class InstallationState(StrEnum):
    """Lifecycle state of the process-wide cleanup coordinator."""

    UNINSTALLED = "uninstalled"
    ACTIVE = "active"


def interpret_result(value: object) -> Verdict:
    """Map a handler's return value to a Verdict.

    Only ``False`` itself vetoes; ``0``, ``""`` and ``None`` do not.
    """
    if value is False or value is Verdict.VETO:
        return Verdict.VETO
    return Verdict.CONTINUE


def normalize_exit_code(code: object) -> int:
    """Convert a ``sys.exit`` argument to the status the interpreter reports."""
    if code is None:
        return 0
    if isinstance(code, int):
        return int(code)
    return 1


def signal_name(sig: int | str | signal.Signals) -> str:
    """Return the canonical ``SIGxxx`` name for a signal number or name."""
    if isinstance(sig, str):
        name = sig.upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        return signal.Signals[name].name
    return signal.Signals(sig).name


@dataclass(frozen=True)
class TerminationEvent:
    """Why the process is terminating.

    Exactly one of ``exit_code`` and ``signal`` is set, so handlers can
    branch on whichever is not None.
    """

    exit_code: int | None = None
    signal: str | None = None

    def __post_init__(self) -> None:
        if (self.exit_code is None) == (self.signal is None):
            raise ValueError("TerminationEvent needs exactly one of exit_code and signal")

    @classmethod
    def for_exit(cls, code: object) -> TerminationEvent:
        return cls(exit_code=normalize_exit_code(code))

    @classmethod
    def for_signal(cls, sig: int | str | signal.Signals) -> TerminationEvent:
        return cls(signal=signal_name(sig))

    @property
    def is_signal(self) -> bool:
        return self.signal is not None
