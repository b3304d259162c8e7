"""Real implementation of SlackApi using slack_sdk's WebClient."""

from collections.abc import Callable
from typing import Any

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError
from slack_sdk.web import SlackResponse

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


class RealSlackApi(SlackApi):
    """Production implementation backed by slack_sdk.WebClient.

    Attributes:
        token: The user or bot token used for every call
        timeout: Per-request timeout in seconds
    """

    def __init__(self, *, token: str, timeout: int) -> None:
        """Initialize the client.

        Args:
            token: Slack token authorized for rtm.connect
            timeout: Seconds before an HTTP call is abandoned
        """
        self._client = WebClient(token=token, timeout=timeout)

    def connect(self) -> SlackSession:
        data = self._call("rtm.connect", self._client.rtm_connect)
        url = data.get("url")
        if not isinstance(url, str) or not url:
            raise SlackApiCallError(method="rtm.connect", message="response has no websocket url")
        self_data = _as_dict(data.get("self"))
        team_data = _as_dict(data.get("team"))
        return SlackSession(
            url=url,
            self_user=SlackUser(
                id=str(self_data.get("id", "")),
                name=str(self_data.get("name", "")),
            ),
            team=SlackTeam(
                id=str(team_data.get("id", "")),
                name=str(team_data.get("name", "")),
            ),
        )

    def list_user_groups(self) -> list[UserGroup]:
        data = self._call("usergroups.list", self._client.usergroups_list)
        groups: list[UserGroup] = []
        for raw in data.get("usergroups", []):
            group = _as_dict(raw)
            if "id" not in group:
                continue
            groups.append(
                UserGroup(
                    id=str(group["id"]),
                    handle=str(group.get("handle", "")),
                    name=str(group.get("name", "")),
                )
            )
        return groups

    def get_conversation(self, channel_id: str) -> ConversationInfo:
        data = self._call(
            "conversations.info",
            lambda: self._client.conversations_info(channel=channel_id),
        )
        channel = _as_dict(data.get("channel"))
        name = channel.get("name")
        user = channel.get("user")
        return ConversationInfo(
            id=channel_id,
            name=name if isinstance(name, str) and name else None,
            user=user if isinstance(user, str) and user else None,
        )

    def get_user(self, user_id: str) -> UserInfo:
        data = self._call("users.info", lambda: self._client.users_info(user=user_id))
        user = _as_dict(data.get("user"))
        profile = _as_dict(user.get("profile"))
        display_name = profile.get("display_name")
        return UserInfo(
            id=user_id,
            name=str(user.get("name", "")),
            display_name=display_name if isinstance(display_name, str) else None,
        )

    def _call(self, method: str, fn: Callable[[], SlackResponse]) -> dict[str, Any]:
        """Run one WebClient call and translate its failures.

        slack_sdk raises SlackApiError for ``ok: false`` responses and lets
        urllib's OSError subclasses (including timeouts) escape for
        transport problems.
        """
        try:
            response = fn()
        except SlackApiError as e:
            error = e.response.get("error") if e.response is not None else None
            raise SlackApiCallError(method=method, message=str(error or e)) from e
        except (SlackClientError, OSError) as e:
            raise SlackApiCallError(method=method, message=str(e)) from e
        return _as_dict(response.data)


def _as_dict(value: object) -> dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}
