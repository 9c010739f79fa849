# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Exception hierarchy for cleanup installation."""

from __future__ import annotations


class CleanExitError(Exception):
    """Base exception for cleanexit."""


class InstallationError(CleanExitError):
    """Raised when the termination listeners cannot be attached.

    Signal dispositions can only be changed from the main thread, so
    install() must be called there.
    """


class ConfigurationError(CleanExitError, ValueError):
    """Raised when termination messages contain an unknown key."""


class InvalidHandlerError(CleanExitError, TypeError):
    """Raised when a cleanup handler is not callable."""


class AsyncHandlerError(CleanExitError, TypeError):
    """Raised when an async function is passed to install().

    Signal dispatch reads the handler's veto synchronously, so a coroutine
    would never be awaited. The handler must be a regular (sync) function.
    """
