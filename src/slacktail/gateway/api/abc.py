"""Abstract interface for the Slack Web API calls slacktail needs."""

from abc import ABC, abstractmethod

from slacktail.types import ConversationInfo, SlackSession, UserGroup, UserInfo


class SlackApi(ABC):
    """Abstract interface for Slack Web API methods.

    Implementations hold the credential token. Every method raises
    SlackApiCallError on any failure, including timeouts and responses
    with ``ok: false``.
    """

    @abstractmethod
    def connect(self) -> SlackSession:
        """Start a real-time messaging session (rtm.connect).

        Returns:
            SlackSession carrying the websocket URL to stream from

        Raises:
            SlackApiCallError: If authentication or transport fails
        """
        ...

    @abstractmethod
    def list_user_groups(self) -> list[UserGroup]:
        """List every user group in the workspace (usergroups.list).

        Raises:
            SlackApiCallError: If the call fails
        """
        ...

    @abstractmethod
    def get_conversation(self, channel_id: str) -> ConversationInfo:
        """Look up a single conversation (conversations.info).

        Args:
            channel_id: Channel, group or direct-message ID

        Raises:
            SlackApiCallError: If the call fails
        """
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> UserInfo:
        """Look up a single user (users.info).

        Args:
            user_id: The Slack user ID

        Raises:
            SlackApiCallError: If the call fails
        """
        ...
