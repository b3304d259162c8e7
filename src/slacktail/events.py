"""Typed decoding of real-time event frames.

Each inbound JSON object is decoded into exactly one frozen dataclass variant,
or None when its type or subtype is not one slacktail acts on. Every field is
optional in the source: a missing field, or one of the wrong JSON type,
decodes to its empty default instead of raising.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Message subtypes that are never rendered.
IGNORED_MESSAGE_SUBTYPES = frozenset({"file_mention", "message_replied"})


@dataclass(frozen=True)
class Attachment:
    """A legacy message attachment block."""

    service_name: str | None
    author_name: str | None
    title: str | None
    footer: str | None
    text: str | None
    fallback: str | None


@dataclass(frozen=True)
class SharedFile:
    """The subset of a file object used for previews."""

    title: str | None
    preview: str | None
    preview_is_truncated: bool


@dataclass(frozen=True)
class FileComment:
    """A comment posted on a file."""

    user: str | None
    comment: str | None


@dataclass(frozen=True)
class MessagePayload:
    """Fields shared by every message variant.

    Attributes:
        channel: Channel ID the message was posted in
        user: Sender user ID
        bot_id: Bot ID when posted by a bot integration
        app_id: App ID when posted by an app
        username: Display name supplied by the poster (bots only)
        text: Message text with inline markup
        ts: Message timestamp string (e.g., "1234567890.123456")
        thread_ts: Parent timestamp string when posted in a thread
        attachments: Attachment blocks in display order
    """

    channel: str | None
    user: str | None
    bot_id: str | None
    app_id: str | None
    username: str | None
    text: str | None
    ts: str | None
    thread_ts: str | None
    attachments: tuple[Attachment, ...]


@dataclass(frozen=True)
class Hello:
    """First frame on every freshly opened stream."""


@dataclass(frozen=True)
class BotAdded:
    bot_id: str
    name: str


@dataclass(frozen=True)
class ChannelCreated:
    channel_id: str
    name: str


@dataclass(frozen=True)
class ChannelJoined:
    """The session joined a channel or private group."""

    channel_id: str
    name: str


@dataclass(frozen=True)
class UserUpdated:
    """A user joined the team or changed their profile."""

    user_id: str
    name: str
    display_name: str | None


@dataclass(frozen=True)
class PlainMessage:
    payload: MessagePayload


@dataclass(frozen=True)
class BotMessage:
    payload: MessagePayload


@dataclass(frozen=True)
class MeMessage:
    payload: MessagePayload


@dataclass(frozen=True)
class FileShareMessage:
    payload: MessagePayload
    file: SharedFile | None


@dataclass(frozen=True)
class FileCommentMessage:
    payload: MessagePayload
    file: SharedFile | None
    comment: FileComment | None


@dataclass(frozen=True)
class MessageChanged:
    """An edit: the new version of the message and the one it replaced."""

    payload: MessagePayload
    message: MessagePayload | None
    previous_message: MessagePayload | None


Frame = (
    Hello
    | BotAdded
    | ChannelCreated
    | ChannelJoined
    | UserUpdated
    | PlainMessage
    | BotMessage
    | MeMessage
    | FileShareMessage
    | FileCommentMessage
    | MessageChanged
)


def decode_frame(raw: Mapping[str, Any]) -> Frame | None:
    """Decode one frame into its typed variant.

    Args:
        raw: The frame as received from the stream

    Returns:
        The decoded variant, or None for frames that are not acted on
    """
    frame_type = _str(raw, "type")
    if frame_type == "hello":
        return Hello()
    if frame_type == "bot_added":
        return _decode_named(raw, "bot", BotAdded)
    if frame_type == "channel_created":
        return _decode_named(raw, "channel", ChannelCreated)
    if frame_type in ("channel_joined", "group_joined"):
        return _decode_named(raw, "channel", ChannelJoined)
    if frame_type in ("team_join", "user_change"):
        return _decode_user(raw)
    if frame_type == "message":
        return _decode_message(raw)
    return None


def _decode_named(
    raw: Mapping[str, Any],
    key: str,
    variant: type[BotAdded] | type[ChannelCreated] | type[ChannelJoined],
) -> Frame | None:
    entity = _dict(raw, key)
    if entity is None:
        return None
    entity_id = _str(entity, "id")
    name = _str(entity, "name")
    if entity_id is None or name is None:
        return None
    return variant(entity_id, name)


def _decode_user(raw: Mapping[str, Any]) -> UserUpdated | None:
    user = _dict(raw, "user")
    if user is None:
        return None
    user_id = _str(user, "id")
    name = _str(user, "name")
    if user_id is None or name is None:
        return None
    profile = _dict(user, "profile")
    display_name = _str(profile, "display_name") if profile is not None else None
    return UserUpdated(user_id=user_id, name=name, display_name=display_name)


def _decode_message(raw: Mapping[str, Any]) -> Frame | None:
    subtype = _str(raw, "subtype")
    if subtype in IGNORED_MESSAGE_SUBTYPES:
        return None

    payload = decode_payload(raw)
    if subtype == "bot_message":
        return BotMessage(payload)
    if subtype == "me_message":
        return MeMessage(payload)
    if subtype == "file_share":
        return FileShareMessage(payload, file=_decode_file(raw))
    if subtype == "file_comment":
        comment = _dict(raw, "comment")
        return FileCommentMessage(
            payload,
            file=_decode_file(raw),
            comment=FileComment(user=_str(comment, "user"), comment=_str(comment, "comment"))
            if comment is not None
            else None,
        )
    if subtype == "message_changed":
        message = _dict(raw, "message")
        previous = _dict(raw, "previous_message")
        return MessageChanged(
            payload,
            message=decode_payload(message) if message is not None else None,
            previous_message=decode_payload(previous) if previous is not None else None,
        )

    # Any other subtype is rendered as plain text, but only if it has text.
    if payload.text is None:
        return None
    return PlainMessage(payload)


def decode_payload(raw: Mapping[str, Any]) -> MessagePayload:
    """Decode the fields common to every message object."""
    attachments = raw.get("attachments")
    return MessagePayload(
        channel=_str(raw, "channel"),
        user=_str(raw, "user"),
        bot_id=_str(raw, "bot_id"),
        app_id=_str(raw, "app_id"),
        username=_str(raw, "username"),
        text=_str(raw, "text"),
        ts=_str(raw, "ts"),
        thread_ts=_str(raw, "thread_ts"),
        attachments=tuple(
            _decode_attachment(item) for item in attachments if isinstance(item, dict)
        )
        if isinstance(attachments, list)
        else (),
    )


def _decode_attachment(raw: Mapping[str, Any]) -> Attachment:
    return Attachment(
        service_name=_str(raw, "service_name"),
        author_name=_str(raw, "author_name"),
        title=_str(raw, "title"),
        footer=_str(raw, "footer"),
        text=_str(raw, "text"),
        fallback=_str(raw, "fallback"),
    )


def _decode_file(raw: Mapping[str, Any]) -> SharedFile | None:
    file = _dict(raw, "file")
    if file is None:
        return None
    return SharedFile(
        title=_str(file, "title"),
        preview=_str(file, "preview"),
        preview_is_truncated=file.get("preview_is_truncated") is True,
    )


def _str(raw: Mapping[str, Any] | None, key: str) -> str | None:
    if raw is None:
        return None
    value = raw.get(key)
    if isinstance(value, str):
        return value
    return None


def _dict(raw: Mapping[str, Any], key: str) -> Mapping[str, Any] | None:
    value = raw.get(key)
    if isinstance(value, dict):
        return value
    return None
