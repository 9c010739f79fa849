# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: cleanexit

"""Unit tests for cleanexit._registry module."""

import pytest

from cleanexit._registry import HandlerRegistry, _noop
from cleanexit._types import InstallationState
from cleanexit.exceptions import AsyncHandlerError, CleanExitError, InvalidHandlerError


def _handler(exit_code, signal_name):
    return None


class TestHandlerRegistry:
    """Tests for HandlerRegistry."""

    def test_starts_uninstalled(self) -> None:
        registry = HandlerRegistry()
        assert not registry.is_active()
        assert registry.state is InstallationState.UNINSTALLED
        assert registry.snapshot() == ()
        assert len(registry) == 0

    def test_first_register_activates(self) -> None:
        registry = HandlerRegistry()
        assert registry.register(_handler) is True
        assert registry.is_active()
        assert registry.state is InstallationState.ACTIVE

    def test_later_register_does_not_activate(self) -> None:
        registry = HandlerRegistry()
        registry.register(_handler)
        assert registry.register(_handler) is False

    def test_preserves_order_and_duplicates(self) -> None:
        def other(exit_code, signal_name):
            return None

        registry = HandlerRegistry()
        registry.register(_handler)
        registry.register(other)
        registry.register(_handler)

        assert registry.snapshot() == (_handler, other, _handler)
        assert len(registry) == 3

    def test_none_registers_noop(self) -> None:
        registry = HandlerRegistry()
        registry.register(None)
        assert registry.snapshot() == (_noop,)
        assert _noop(None, "SIGINT") is None

    def test_clear_reverts_to_uninstalled(self) -> None:
        registry = HandlerRegistry()
        registry.register(_handler)
        registry.clear()
        assert not registry.is_active()
        assert registry.snapshot() == ()

    def test_clear_is_idempotent(self) -> None:
        registry = HandlerRegistry()
        registry.clear()
        registry.clear()
        assert registry.state is InstallationState.UNINSTALLED

    def test_register_after_clear_reactivates(self) -> None:
        registry = HandlerRegistry()
        registry.register(_handler)
        registry.clear()
        assert registry.register(_handler) is True
        assert registry.snapshot() == (_handler,)

    def test_snapshot_is_detached(self) -> None:
        registry = HandlerRegistry()
        registry.register(_handler)
        snapshot = registry.snapshot()
        registry.register(_handler)
        assert len(snapshot) == 1

    def test_rejects_async_handler(self) -> None:
        async def handler(exit_code, signal_name):
            return None

        registry = HandlerRegistry()
        with pytest.raises(AsyncHandlerError, match="synchronous"):
            registry.register(handler)
        assert not registry.is_active()

    def test_rejects_non_callable(self) -> None:
        registry = HandlerRegistry()
        with pytest.raises(InvalidHandlerError, match="callable"):
            registry.register("cleanup")  # type: ignore[arg-type]
        assert not registry.is_active()

    def test_handler_errors_are_type_errors(self) -> None:
        assert issubclass(InvalidHandlerError, TypeError)
        assert issubclass(AsyncHandlerError, CleanExitError)
