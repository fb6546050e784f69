"""
Tests for draft broadcasts and channel authorization
"""
import json
import pytest
from unittest.mock import AsyncMock, MagicMock

import config as cfg
from exceptions import APIException
from models.draft_event import DraftEvent, DraftEventType
from services.broadcast_service import DraftBroadcaster, authorize_draft_channel
from tests.factories import LeagueFactory, T0


@pytest.fixture
def connection():
    conn = MagicMock()
    conn.publish = AsyncMock(return_value=2)
    conn.aclose = AsyncMock()
    return conn


@pytest.fixture
def event():
    league = LeagueFactory.running(id=7, current_pick=4)
    return DraftEvent.for_league(
        DraftEventType.PLAYER_DRAFTED,
        league,
        picked_player_id=55,
        picked_team_id=2,
        next_team_id=1
    )


class TestDraftBroadcaster:
    """Test DraftBroadcaster publishing."""

    @pytest.mark.asyncio
    async def test_publish_on_league_channel(self, connection, event):
        broadcaster = DraftBroadcaster(connection=connection)

        assert await broadcaster.publish(event) is True

        channel, payload = connection.publish.call_args[0]
        assert channel == 'draft.7'
        body = json.loads(payload)
        assert body['event'] == 'player.drafted'
        assert body['current_pick'] == 4
        assert body['picked_player_id'] == 55
        assert body['next_team_id'] == 1
        assert body['end_time'] == int(T0.timestamp() * 1000) + 60_000

    @pytest.mark.asyncio
    async def test_publish_disabled(self, connection, event, monkeypatch):
        monkeypatch.setenv('BROADCAST_ENABLED', 'false')
        monkeypatch.setattr(cfg, '_config', None)
        broadcaster = DraftBroadcaster(connection=connection)

        assert await broadcaster.publish(event) is False
        connection.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_publish_failure_is_swallowed(self, connection, event):
        connection.publish.side_effect = ConnectionError("redis down")
        broadcaster = DraftBroadcaster(connection=connection)

        assert await broadcaster.publish(event) is False

    @pytest.mark.asyncio
    async def test_close_releases_connection(self, connection):
        broadcaster = DraftBroadcaster(connection=connection)

        await broadcaster.close()
        await broadcaster.close()

        connection.aclose.assert_awaited_once()
        assert broadcaster._connection is None


class TestAuthorizeDraftChannel:
    """Test subscription authorization."""

    @pytest.fixture
    def leagues(self):
        svc = MagicMock()
        svc.get_league = AsyncMock(return_value=LeagueFactory.create(id=7))
        svc.is_member = AsyncMock(return_value=True)
        return svc

    @pytest.mark.asyncio
    async def test_member_authorized(self, leagues):
        assert await authorize_draft_channel(102, 'draft.7', leagues=leagues) is True
        leagues.get_league.assert_awaited_once_with(7)
        leagues.is_member.assert_awaited_once_with(7, 102)

    @pytest.mark.asyncio
    async def test_non_member_rejected(self, leagues):
        leagues.is_member.return_value = False
        assert await authorize_draft_channel(999, 'draft.7', leagues=leagues) is False

    @pytest.mark.asyncio
    async def test_missing_league_rejected(self, leagues):
        leagues.get_league.return_value = None
        assert await authorize_draft_channel(102, 'draft.7', leagues=leagues) is False
        leagues.is_member.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("channel", ["draft.", "draft.abc", "chat.7", "draft.7.extra", "", None])
    async def test_malformed_channel_rejected(self, leagues, channel):
        assert await authorize_draft_channel(102, channel, leagues=leagues) is False
        leagues.get_league.assert_not_called()

    @pytest.mark.asyncio
    async def test_lookup_failure_rejected(self, leagues):
        leagues.get_league.side_effect = APIException("API down")
        assert await authorize_draft_channel(102, 'draft.7', leagues=leagues) is False
