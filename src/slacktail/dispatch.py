"""Routing of decoded frames to their handlers.

Maintenance events update the identity cache and render nothing. Message
events are turned into RenderRequest objects carrying resolved names and the
raw body text; markup expansion happens later in the renderer. Frame types
and subtypes without a handler are dropped silently.
"""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

import click

from slacktail.events import (
    Attachment,
    BotAdded,
    BotMessage,
    ChannelCreated,
    ChannelJoined,
    FileCommentMessage,
    FileShareMessage,
    Hello,
    MeMessage,
    MessageChanged,
    MessagePayload,
    PlainMessage,
    UserUpdated,
    decode_frame,
)
from slacktail.gateway.console.abc import Console
from slacktail.identity import IdentityCache
from slacktail.types import RenderRequest

logger = logging.getLogger(__name__)

MAX_BODY_LENGTH = 1000
# 9999-12-31T23:59:59Z; later instants cannot be formatted as local datetimes.
MAX_TIMESTAMP = 253402300799
ELLIPSIS = "..."
EDITED_ANNOTATION = " " + click.style("(edited)", fg="bright_yellow")


def truncate(text: str) -> str:
    """Cut text longer than MAX_BODY_LENGTH and mark the cut with an ellipsis."""
    if len(text) > MAX_BODY_LENGTH:
        return text[:MAX_BODY_LENGTH] + ELLIPSIS
    return text


def parse_timestamp(ts: str | None) -> int:
    """Convert a Slack timestamp string to whole seconds.

    Returns 0 if the value is absent, unparseable, or outside the range of
    representable datetimes.
    """
    if ts is None:
        return 0
    try:
        seconds = int(float(ts))
    except (ValueError, OverflowError):
        return 0
    if seconds < 0 or seconds > MAX_TIMESTAMP:
        return 0
    return seconds


def user_type_of(payload: MessagePayload) -> str:
    """Annotation flagging bot and app senders, e.g. "[bot][app]"."""
    user_type = ""
    if payload.bot_id is not None:
        user_type += "[bot]"
    if payload.app_id is not None:
        user_type += "[app]"
    return user_type


def box(title: str) -> str:
    """Render a header line on a blue background, followed by a newline."""
    return click.style(title.strip(), bg="blue") + "\n"


def attachment_body(attachment: Attachment) -> str:
    """Header plus text of an attachment block.

    The header concatenates service name, author, title and footer, each only
    when supplied. The text falls back to the attachment's fallback string.
    """
    header = ""
    if attachment.service_name is not None:
        header += attachment.service_name + ": "
    if attachment.author_name is not None:
        header += attachment.author_name + " "
    if attachment.title is not None:
        header += attachment.title + " "
    if attachment.footer is not None:
        header += " (" + attachment.footer + ") "

    text = attachment.text if attachment.text is not None else attachment.fallback or ""
    text = truncate(text)
    if header.strip():
        return box(header) + text
    return text


def first_attachment_body(payload: MessagePayload) -> str:
    if not payload.attachments:
        return ""
    return attachment_body(payload.attachments[0])


class EventDispatcher:
    """Decodes frames and produces render requests.

    Sender and channel names are resolved through the identity cache, which
    may perform a blocking lookup on first reference.
    """

    def __init__(self, identities: IdentityCache, console: Console) -> None:
        """Initialize the dispatcher.

        Args:
            identities: Cache used for name resolution and updated by
                maintenance events
            console: Where connection status lines are written
        """
        self._identities = identities
        self._console = console

    def handle(self, raw: Mapping[str, Any]) -> list[RenderRequest]:
        """Handle one frame.

        Args:
            raw: The frame as received from the stream

        Returns:
            Render requests in display order; empty for non-message frames
            and for messages with nothing to show
        """
        frame = decode_frame(raw)
        if frame is None:
            logger.debug("Ignoring frame type=%s subtype=%s", raw.get("type"), raw.get("subtype"))
            return []

        if isinstance(frame, Hello):
            self._console.echo("Connected!")
            return []
        if isinstance(frame, BotAdded):
            self._identities.set(frame.bot_id, frame.name)
            return []
        if isinstance(frame, ChannelCreated | ChannelJoined):
            self._identities.set(frame.channel_id, frame.name)
            return []
        if isinstance(frame, UserUpdated):
            self._identities.set(frame.user_id, frame.display_name or frame.name)
            return []

        if isinstance(frame, PlainMessage):
            return [self._on_plain(frame)]
        if isinstance(frame, BotMessage):
            return [self._on_bot(frame)]
        if isinstance(frame, MeMessage):
            return [self._on_me(frame)]
        if isinstance(frame, FileShareMessage):
            return self._on_file_share(frame)
        if isinstance(frame, FileCommentMessage):
            return self._on_file_comment(frame)
        return self._on_message_changed(frame)

    def _on_plain(self, frame: PlainMessage) -> RenderRequest:
        payload = frame.payload
        return self._request(payload, self._user(payload.user), truncate(payload.text or ""))

    def _on_bot(self, frame: BotMessage) -> RenderRequest:
        payload = frame.payload
        user = ""
        if payload.bot_id is not None:
            user = self._identities.get(payload.bot_id) or ""
        if not user and payload.username is not None:
            user = payload.username

        if payload.attachments:
            return self._request(
                payload,
                user,
                attachment_body(payload.attachments[0]),
                forces_header=True,
            )
        return self._request(payload, user, truncate(payload.text or ""))

    def _on_me(self, frame: MeMessage) -> RenderRequest:
        payload = frame.payload
        return self._request(
            payload,
            self._user(payload.user),
            truncate(payload.text or ""),
            emphasis=True,
        )

    def _on_file_share(self, frame: FileShareMessage) -> list[RenderRequest]:
        if frame.file is None:
            return []
        payload = frame.payload
        if frame.file.preview is not None:
            preview = truncate(frame.file.preview)
            if frame.file.preview_is_truncated and preview == frame.file.preview:
                preview += ELLIPSIS
            text = box("file: " + (frame.file.title or "")) + preview
        else:
            text = truncate(payload.text or "")
        return [self._request(payload, self._user(payload.user), text, forces_header=True)]

    def _on_file_comment(self, frame: FileCommentMessage) -> list[RenderRequest]:
        if frame.file is None or frame.comment is None:
            return []
        title = "comment to: " + (frame.file.title or "")
        text = box(title) + truncate(frame.comment.comment or "")
        return [
            self._request(
                frame.payload,
                self._user(frame.comment.user),
                text,
                forces_header=True,
            )
        ]

    def _on_message_changed(self, frame: MessageChanged) -> list[RenderRequest]:
        message = frame.message
        previous = frame.previous_message
        if message is None or previous is None:
            return []

        # The edited message carries the sender and thread; the envelope
        # carries the channel.
        thread_ts = message.thread_ts if message.thread_ts is not None else frame.payload.thread_ts
        channel = frame.payload.channel if frame.payload.channel is not None else message.channel
        base = RenderRequest(
            timestamp=parse_timestamp(message.ts),
            thread_ts=parse_timestamp(thread_ts),
            channel=self._channel(channel),
            user_type=user_type_of(message),
            user=self._user(message.user),
            text="",
        )

        requests: list[RenderRequest] = []
        if (message.text or "") != (previous.text or ""):
            requests.append(
                replace(base, text=truncate(message.text or ""), annotation=EDITED_ANNOTATION)
            )

        attachment = first_attachment_body(message)
        if attachment != first_attachment_body(previous):
            requests.append(replace(base, text=attachment, forces_header=True))
        return requests

    def _request(
        self,
        payload: MessagePayload,
        user: str,
        text: str,
        *,
        emphasis: bool = False,
        forces_header: bool = False,
    ) -> RenderRequest:
        return RenderRequest(
            timestamp=parse_timestamp(payload.ts),
            thread_ts=parse_timestamp(payload.thread_ts),
            channel=self._channel(payload.channel),
            user_type=user_type_of(payload),
            user=user,
            text=text,
            emphasis=emphasis,
            forces_header=forces_header,
        )

    def _channel(self, channel_id: str | None) -> str:
        if channel_id is None:
            return ""
        return self._identities.resolve_channel(channel_id)

    def _user(self, user_id: str | None) -> str:
        if user_id is None:
            return ""
        return self._identities.resolve_user(user_id)
