"""Fake implementation of SlackApi for testing."""

from slacktail.errors import SlackApiCallError
from slacktail.gateway.api.abc import SlackApi
from slacktail.types import (
    ConversationInfo,
    SlackSession,
    SlackTeam,
    SlackUser,
    UserGroup,
    UserInfo,
)

DEFAULT_SESSION = SlackSession(
    url="wss://example.invalid/websocket",
    self_user=SlackUser(id="U00000SELF", name="me"),
    team=SlackTeam(id="T00000TEAM", name="example"),
)


class FakeSlackApi(SlackApi):
    """In-memory SlackApi with canned responses and call tracking.

    Unknown conversation and user IDs fail the same way a real lookup
    failure would. ``connect_errors`` are raised by successive connect()
    calls before connect starts succeeding.

    Example:
        >>> api = FakeSlackApi(users={"U1": UserInfo(id="U1", name="alice", display_name=None)})
        >>> api.get_user("U1").preferred_name
        'alice'
    """

    def __init__(
        self,
        *,
        session: SlackSession | None = None,
        connect_errors: list[str] | None = None,
        user_groups: list[UserGroup] | None = None,
        user_groups_error: str | None = None,
        conversations: dict[str, ConversationInfo] | None = None,
        users: dict[str, UserInfo] | None = None,
    ) -> None:
        self._session = session if session is not None else DEFAULT_SESSION
        self._connect_errors = list(connect_errors) if connect_errors is not None else []
        self._user_groups = list(user_groups) if user_groups is not None else []
        self._user_groups_error = user_groups_error
        self._conversations = dict(conversations) if conversations is not None else {}
        self._users = dict(users) if users is not None else {}
        self._connect_calls = 0
        self._conversation_lookups: list[str] = []
        self._user_lookups: list[str] = []

    def connect(self) -> SlackSession:
        self._connect_calls += 1
        if self._connect_errors:
            message = self._connect_errors.pop(0)
            raise SlackApiCallError(method="rtm.connect", message=message)
        return self._session

    def list_user_groups(self) -> list[UserGroup]:
        if self._user_groups_error is not None:
            raise SlackApiCallError(method="usergroups.list", message=self._user_groups_error)
        return list(self._user_groups)

    def get_conversation(self, channel_id: str) -> ConversationInfo:
        self._conversation_lookups.append(channel_id)
        if channel_id not in self._conversations:
            raise SlackApiCallError(method="conversations.info", message="channel_not_found")
        return self._conversations[channel_id]

    def get_user(self, user_id: str) -> UserInfo:
        self._user_lookups.append(user_id)
        if user_id not in self._users:
            raise SlackApiCallError(method="users.info", message="user_not_found")
        return self._users[user_id]

    @property
    def connect_calls(self) -> int:
        """Number of connect() calls made so far."""
        return self._connect_calls

    @property
    def conversation_lookups(self) -> list[str]:
        """Channel IDs passed to get_conversation(), in call order."""
        return list(self._conversation_lookups)

    @property
    def user_lookups(self) -> list[str]:
        """User IDs passed to get_user(), in call order."""
        return list(self._user_lookups)
