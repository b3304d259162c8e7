"""Identity cache: opaque Slack IDs to display names.

Entries are filled three ways: the user-group bulk preload at session start,
lazy lookups the first time a user or channel is referenced, and update
events pushed on the stream. An entry, once present, is authoritative until
an update event overwrites it. Failed lookups are not cached, so the next
reference to the same ID tries again.

The cache is owned by the single event-processing loop and is never touched
concurrently.
"""

import logging
from enum import Enum

from slacktail.errors import SlackApiCallError
from slacktail.gateway.api.abc import SlackApi
from slacktail.types import UserGroup

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Kinds of ID-addressable entities.

    Only users and channels can be looked up remotely. Bots and user groups
    are resolved from the cache alone.
    """

    USER = "user"
    CHANNEL = "channel"
    BOT = "bot"
    USER_GROUP = "user_group"


class IdentityCache:
    """Process-lifetime mapping from entity ID to display name."""

    def __init__(self, api: SlackApi, names: dict[str, str] | None = None) -> None:
        """Initialize the cache.

        Args:
            api: SlackApi used for on-demand lookups
            names: Initial entries, mostly useful for tests
        """
        self._api = api
        self._names: dict[str, str] = dict(names) if names is not None else {}

    def get(self, entity_id: str) -> str | None:
        """Return the cached name without attempting a lookup."""
        return self._names.get(entity_id)

    def set(self, entity_id: str, name: str) -> None:
        """Store or overwrite the name for an ID."""
        self._names[entity_id] = name

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._names

    def __len__(self) -> int:
        return len(self._names)

    def resolve(self, kind: EntityKind, entity_id: str) -> str:
        """Get-or-fetch the display name for an ID.

        Args:
            kind: Which lookup to use on a cache miss
            entity_id: The opaque Slack ID

        Returns:
            The display name, or "" if it is not cached and could not be
            looked up
        """
        cached = self._names.get(entity_id)
        if cached is not None:
            return cached

        if kind == EntityKind.USER:
            self._fetch_user(entity_id)
        elif kind == EntityKind.CHANNEL:
            self._fetch_channel(entity_id)
        return self._names.get(entity_id, "")

    def resolve_user(self, user_id: str) -> str:
        return self.resolve(EntityKind.USER, user_id)

    def resolve_channel(self, channel_id: str) -> str:
        return self.resolve(EntityKind.CHANNEL, channel_id)

    def preload_user_groups(self) -> int:
        """Bulk-load every user group's handle into the cache.

        Returns:
            Number of groups loaded

        Raises:
            SlackApiCallError: If the listing call fails
        """
        groups = self._api.list_user_groups()
        self.merge_user_groups(groups)
        logger.debug("Preloaded %d user groups", len(groups))
        return len(groups)

    def merge_user_groups(self, groups: list[UserGroup]) -> None:
        for group in groups:
            self._names[group.id] = group.handle

    def _fetch_user(self, user_id: str) -> None:
        try:
            info = self._api.get_user(user_id)
        except SlackApiCallError as e:
            logger.warning("Could not resolve user %s: %s", user_id, e)
            return
        self._names[user_id] = info.preferred_name

    def _fetch_channel(self, channel_id: str) -> None:
        try:
            info = self._api.get_conversation(channel_id)
        except SlackApiCallError as e:
            logger.warning("Could not resolve channel %s: %s", channel_id, e)
            return

        if info.name is not None:
            self._names[channel_id] = info.name
        elif info.user is not None:
            # Direct message: shown under the other participant's name.
            name = self.resolve_user(info.user)
            if name:
                self._names[channel_id] = name
