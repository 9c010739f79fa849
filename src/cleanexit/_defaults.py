# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

from __future__ import annotations

import os
import signal
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from typing import Any

from cleanexit.exceptions import ConfigurationError

DEFAULT_SIGINT_MESSAGE: str = "[ctrl-C]"
DEFAULT_EXCEPTION_MESSAGE: str = "Uncaught exception..."

# Matches the status the interpreter itself uses after an uncaught exception
UNCAUGHT_EXCEPTION_EXIT_CODE: int = 1

# SIGHUP and SIGQUIT do not exist on Windows
HANDLED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGHUP", "SIGQUIT", "SIGTERM")
    if hasattr(signal, name)
)

SIGINT_MESSAGE_ENV_VAR: str = "CLEANEXIT_SIGINT_MESSAGE"
EXCEPTION_MESSAGE_ENV_VAR: str = "CLEANEXIT_EXCEPTION_MESSAGE"

# Keys accepted in a messages mapping, including the camel-case spellings
_MESSAGE_KEYS: dict[str, str] = {
    "on_signal_interrupt": "on_signal_interrupt",
    "ctrl_C": "on_signal_interrupt",
    "on_uncaught_exception": "on_uncaught_exception",
    "uncaughtException": "on_uncaught_exception",
}


@dataclass(frozen=True)
class TerminationMessages:
    """Diagnostic text written to stderr before the process terminates.

    An empty string suppresses output for that case. Only SIGINT carries a
    message; SIGHUP, SIGQUIT and SIGTERM terminate silently.

    Example:
        ```python
        messages = TerminationMessages(on_signal_interrupt="")  # quiet ctrl-C
        cleanexit.install(cleanup, messages)
        ```
    """

    on_signal_interrupt: str = DEFAULT_SIGINT_MESSAGE
    on_uncaught_exception: str = DEFAULT_EXCEPTION_MESSAGE

    def for_signal(self, signal_name: str) -> str:
        """Return the message to print before honoring ``signal_name``."""
        if signal_name == "SIGINT":
            return self.on_signal_interrupt
        return ""

    def with_overrides(self, **kwargs: Any) -> TerminationMessages:
        """Create new messages with some values overridden."""
        return replace(self, **kwargs)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TerminationMessages:
        """Build messages from defaults overridden by environment variables.

        A variable that is set but empty suppresses that message.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        if SIGINT_MESSAGE_ENV_VAR in env:
            overrides["on_signal_interrupt"] = env[SIGINT_MESSAGE_ENV_VAR]
        if EXCEPTION_MESSAGE_ENV_VAR in env:
            overrides["on_uncaught_exception"] = env[EXCEPTION_MESSAGE_ENV_VAR]
        return cls(**overrides)

    @classmethod
    def resolve(
        cls,
        messages: TerminationMessages | Mapping[str, Any] | None,
        environ: Mapping[str, str] | None = None,
    ) -> TerminationMessages:
        """Resolve caller-supplied messages against env vars and defaults.

        Precedence is explicit value, then environment variable, then the
        built-in default. In a mapping, a value that is not a string falls
        back to the next source.

        Raises:
            ConfigurationError: If the mapping contains an unknown key.
        """
        if isinstance(messages, TerminationMessages):
            return messages

        base = cls.from_env(environ)
        if messages is None:
            return base

        overrides: dict[str, str] = {}
        for key, value in messages.items():
            field_name = _MESSAGE_KEYS.get(key)
            if field_name is None:
                known = ", ".join(f.name for f in fields(cls))
                raise ConfigurationError(f"Unknown message key {key!r} (expected one of: {known})")
            if isinstance(value, str):
                overrides[field_name] = value
        return base.with_overrides(**overrides)
