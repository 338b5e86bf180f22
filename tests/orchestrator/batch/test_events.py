"""Unit tests for bulk event observer pattern.

Tests cover:
- Observer registration
- Event emission to multiple observers
- Exception handling in observers
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ndrdesk.orchestrator.batch.events import BulkEventEmitter


def _mock_observer() -> MagicMock:
    observer = MagicMock()
    observer.on_bulk_started = AsyncMock()
    observer.on_item_rejected = AsyncMock()
    observer.on_bulk_submitted = AsyncMock()
    observer.on_bulk_failed = AsyncMock()
    return observer


class TestObserverRegistration:
    """Tests for add_observer/remove_observer."""

    @pytest.mark.asyncio
    async def test_removed_observer_not_notified(self):
        emitter = BulkEventEmitter()
        observer = _mock_observer()
        emitter.add_observer(observer)
        emitter.remove_observer(observer)

        await emitter.emit_bulk_started("RE-ATTEMPT", 3)

        observer.on_bulk_started.assert_not_called()

    def test_remove_unknown_observer_raises(self):
        with pytest.raises(ValueError):
            BulkEventEmitter().remove_observer(_mock_observer())


class TestEmission:
    """Tests for event delivery."""

    @pytest.mark.asyncio
    async def test_all_observers_receive_events(self):
        emitter = BulkEventEmitter()
        first, second = _mock_observer(), _mock_observer()
        emitter.add_observer(first)
        emitter.add_observer(second)

        await emitter.emit_bulk_started("RE-ATTEMPT", 3)
        await emitter.emit_item_rejected("W1", "nsl_code_not_permitted", "msg")
        await emitter.emit_bulk_submitted("RE-ATTEMPT", "UPL1", 2, 1)
        await emitter.emit_bulk_failed("RE-ATTEMPT", "E-3001", "down")

        for observer in (first, second):
            observer.on_bulk_started.assert_awaited_once_with("RE-ATTEMPT", 3)
            observer.on_item_rejected.assert_awaited_once_with(
                "W1", "nsl_code_not_permitted", "msg"
            )
            observer.on_bulk_submitted.assert_awaited_once_with("RE-ATTEMPT", "UPL1", 2, 1)
            observer.on_bulk_failed.assert_awaited_once_with("RE-ATTEMPT", "E-3001", "down")

    @pytest.mark.asyncio
    async def test_failing_observer_isolated(self, caplog):
        """One broken observer does not stop delivery to the next."""
        emitter = BulkEventEmitter()
        broken, healthy = _mock_observer(), _mock_observer()
        broken.on_bulk_started.side_effect = RuntimeError("boom")
        emitter.add_observer(broken)
        emitter.add_observer(healthy)

        with caplog.at_level("ERROR"):
            await emitter.emit_bulk_started("PICKUP_RESCHEDULE", 1)

        healthy.on_bulk_started.assert_awaited_once_with("PICKUP_RESCHEDULE", 1)
        assert "on_bulk_started" in caplog.text
        assert "boom" in caplog.text
