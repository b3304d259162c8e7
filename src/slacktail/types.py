"""Type definitions for slacktail.

Immutable dataclasses for data returned by the Slack Web API and for the
render requests passed from the event dispatcher to the renderer.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SlackUser:
    """Identity of the account the session is logged in as.

    Attributes:
        id: The Slack user ID (e.g., "U01234ABCDE")
        name: The account name
    """

    id: str
    name: str


@dataclass(frozen=True)
class SlackTeam:
    """Workspace metadata returned by rtm.connect."""

    id: str
    name: str


@dataclass(frozen=True)
class SlackSession:
    """Result of a successful rtm.connect call.

    Attributes:
        url: The websocket URL to open the event stream on
        self_user: The account the token belongs to
        team: The workspace the token belongs to
    """

    url: str
    self_user: SlackUser
    team: SlackTeam


@dataclass(frozen=True)
class UserGroup:
    """A user group ("subteam") as listed by usergroups.list.

    Attributes:
        id: The subteam ID (e.g., "S1A2B3C4D")
        handle: The mention handle, used as the display name
        name: The short description
    """

    id: str
    handle: str
    name: str


@dataclass(frozen=True)
class ConversationInfo:
    """Result of a conversations.info lookup.

    Direct-message conversations have no name; they carry the ID of the
    other user instead.
    """

    id: str
    name: str | None
    user: str | None


@dataclass(frozen=True)
class UserInfo:
    """Result of a users.info lookup."""

    id: str
    name: str
    display_name: str | None

    @property
    def preferred_name(self) -> str:
        """Profile display name if set, otherwise the account name."""
        if self.display_name:
            return self.display_name
        return self.name


@dataclass(frozen=True)
class RenderRequest:
    """One transcript entry produced by the event dispatcher.

    Attributes:
        timestamp: Event time in seconds since the epoch
        thread_ts: Thread parent time in seconds, 0 when not threaded
        channel: Resolved channel name
        user_type: Sender annotation such as "[bot]" or "[bot][app]"
        user: Resolved sender display name
        text: Raw body text, still containing markup and HTML entities
        annotation: Suffix appended after the body (e.g. the edit marker)
        emphasis: Render the body dimmed and italic ("/me" messages)
        forces_header: Print a header for the next entry regardless of sender
    """

    timestamp: int
    thread_ts: int
    channel: str
    user_type: str
    user: str
    text: str
    annotation: str = ""
    emphasis: bool = False
    forces_header: bool = False
