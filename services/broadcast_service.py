"""
Real-time draft broadcasts

Publishes draft events to league subscribers over Redis pub/sub and decides
who may subscribe to a league's draft channel.
"""
import logging
import re
from typing import Optional

import redis.asyncio as aioredis

from config import get_config
from models.draft_event import DraftEvent
from services.league_service import LeagueService, league_service

logger = logging.getLogger(f'{__name__}.DraftBroadcaster')

_CHANNEL_PATTERN = re.compile(r'^draft\.(\d+)$')


class DraftBroadcaster:
    """
    Publishes DraftEvents on `draft.{league_id}`.

    Publishing happens after a transition has been committed. A failed publish
    is logged and swallowed; clients resynchronise from get_draft_status.
    """

    def __init__(self, connection: Optional[aioredis.Redis] = None):
        """
        Args:
            connection: Redis client override (built from configuration by default)
        """
        self._connection = connection

    def _get_connection(self) -> aioredis.Redis:
        if self._connection is None:
            self._connection = aioredis.from_url(get_config().redis_url)
        return self._connection

    async def publish(self, event: DraftEvent) -> bool:
        """
        Publish an event to its league channel.

        Args:
            event: Event to publish

        Returns:
            True if the event was handed to Redis
        """
        if not get_config().broadcast_enabled:
            logger.debug(f"Broadcast disabled, dropping {event.event.value} for league {event.league_id}")
            return False

        try:
            receivers = await self._get_connection().publish(event.channel, event.model_dump_json())
        except Exception as e:
            logger.error(f"Failed to publish {event.event.value} on {event.channel}: {e}")
            return False

        logger.debug(f"Published {event.event.value} on {event.channel} to {receivers} subscribers")
        return True

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._connection is not None:
            await self._connection.aclose()
            self._connection = None


async def authorize_draft_channel(
    user_id: int,
    channel: str,
    leagues: Optional[LeagueService] = None
) -> bool:
    """
    Check whether a user may listen on a draft channel.

    Args:
        user_id: Subscribing user
        channel: Channel name, expected as 'draft.{league_id}'
        leagues: League service override

    Returns:
        True only for members of an existing league
    """
    leagues = leagues or league_service

    match = _CHANNEL_PATTERN.match(channel or '')
    if not match:
        logger.warning(f"Rejected subscription by user {user_id} to malformed channel '{channel}'")
        return False

    league_id = int(match.group(1))

    try:
        league = await leagues.get_league(league_id)
        if not league:
            logger.warning(f"Rejected user {user_id} on {channel}: league not found")
            return False

        if not await leagues.is_member(league_id, user_id):
            logger.warning(f"Rejected user {user_id} on {channel}: not a league member")
            return False

    except Exception as e:
        logger.error(f"Channel authorization failed for user {user_id} on {channel}: {e}")
        return False

    logger.info(f"Authorized user {user_id} on {channel}")
    return True


# Global broadcaster instance
draft_broadcaster = DraftBroadcaster()
