# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Run cleanup handlers before the Python process terminates."""

from cleanexit._cleanup import install, is_installed, uninstall
from cleanexit._defaults import (
    DEFAULT_EXCEPTION_MESSAGE,
    DEFAULT_SIGINT_MESSAGE,
    UNCAUGHT_EXCEPTION_EXIT_CODE,
    TerminationMessages,
)
from cleanexit._types import (
    CleanupHandler,
    InstallationState,
    TerminationEvent,
    Verdict,
)
from cleanexit.exceptions import (
    AsyncHandlerError,
    CleanExitError,
    ConfigurationError,
    InstallationError,
    InvalidHandlerError,
)

__all__ = [
    "DEFAULT_EXCEPTION_MESSAGE",
    "DEFAULT_SIGINT_MESSAGE",
    "UNCAUGHT_EXCEPTION_EXIT_CODE",
    "AsyncHandlerError",
    "CleanExitError",
    "CleanupHandler",
    "ConfigurationError",
    "InstallationError",
    "InstallationState",
    "InvalidHandlerError",
    "TerminationEvent",
    "TerminationMessages",
    "Verdict",
    "install",
    "is_installed",
    "uninstall",
]
