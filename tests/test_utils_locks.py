"""
Tests for per-league pick locks
"""
import asyncio
import pytest
from datetime import datetime, timedelta, UTC
from unittest.mock import patch

from utils.locks import LeagueLockRegistry


class TestLeagueLockRegistry:
    """Test LeagueLockRegistry."""

    @pytest.mark.asyncio
    async def test_one_lock_per_league(self):
        registry = LeagueLockRegistry()
        assert registry.get_lock(1) is registry.get_lock(1)
        assert registry.get_lock(1) is not registry.get_lock(2)

    @pytest.mark.asyncio
    async def test_hold_marks_league_locked(self):
        registry = LeagueLockRegistry()

        async with registry.hold(1, 'user:5'):
            assert registry.is_locked(1)
            assert not registry.is_locked(2)
            assert registry.held_for(1) >= 0

        assert not registry.is_locked(1)
        assert registry.held_for(1) is None

    @pytest.mark.asyncio
    async def test_released_on_error(self):
        registry = LeagueLockRegistry()

        with pytest.raises(RuntimeError):
            async with registry.hold(1):
                raise RuntimeError("write failed")

        assert not registry.is_locked(1)

    @pytest.mark.asyncio
    async def test_serializes_holders_of_same_league(self):
        registry = LeagueLockRegistry()
        order = []

        async def worker(name):
            async with registry.hold(1, name):
                order.append(f"{name}-in")
                await asyncio.sleep(0.01)
                order.append(f"{name}-out")

        await asyncio.gather(worker('a'), worker('b'))

        assert order in (['a-in', 'a-out', 'b-in', 'b-out'], ['b-in', 'b-out', 'a-in', 'a-out'])

    @pytest.mark.asyncio
    async def test_different_leagues_do_not_block(self):
        registry = LeagueLockRegistry()

        async with registry.hold(1):
            async with registry.hold(2):
                assert registry.is_locked(1) and registry.is_locked(2)

    @pytest.mark.asyncio
    async def test_waiting_logs_current_holder(self):
        registry = LeagueLockRegistry()

        async def first():
            async with registry.hold(1, 'user:5'):
                await asyncio.sleep(0.01)

        async def second():
            await asyncio.sleep(0)
            async with registry.hold(1, 'auto-pick'):
                pass

        with patch('utils.locks.logger') as mock_logger:
            await asyncio.gather(first(), second())

        mock_logger.info.assert_called_once()
        args, kwargs = mock_logger.info.call_args
        assert args == ("Waiting for league pick lock",)
        assert kwargs['holder'] == 'auto-pick'
        assert kwargs['held_by'] == 'user:5'
        assert kwargs['held_for'] >= 0
        mock_logger.warning.assert_not_called()

    @pytest.mark.asyncio
    async def test_slow_holder_logged_as_warning(self):
        registry = LeagueLockRegistry()

        async def first():
            async with registry.hold(1, 'user:5'):
                registry._acquired_at[1] = datetime.now(UTC) - timedelta(seconds=45)
                await asyncio.sleep(0.01)

        async def second():
            await asyncio.sleep(0)
            async with registry.hold(1, 'auto-pick'):
                pass

        with patch('utils.locks.logger') as mock_logger:
            await asyncio.gather(first(), second())

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs['held_for'] >= 45

    def test_contended_lock_in_a_second_event_loop(self):
        """Worker jobs each call asyncio.run against the same module-level registry."""
        registry = LeagueLockRegistry()
        locks = []

        async def contend():
            order = []

            async def worker(name):
                async with registry.hold(1, name):
                    order.append(name)
                    await asyncio.sleep(0.01)

            await asyncio.gather(worker('a'), worker('b'))
            locks.append(registry.get_lock(1))
            return order

        assert asyncio.run(contend()) == ['a', 'b']
        assert asyncio.run(contend()) == ['a', 'b']
        assert locks[0] is not locks[1]
