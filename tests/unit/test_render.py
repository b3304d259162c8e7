"""Tests for Renderer."""

import re

import click

from slacktail.config import NotificationConfig
from slacktail.gateway.api.fake import FakeSlackApi
from slacktail.gateway.console.fake import FakeConsole
from slacktail.identity import IdentityCache
from slacktail.normalize import TextNormalizer
from slacktail.render import Renderer, RenderState, format_timestamp
from slacktail.types import RenderRequest


def _request(
    *,
    channel: str = "general",
    user: str = "alice",
    thread_ts: int = 0,
    text: str = "hello",
    user_type: str = "",
    annotation: str = "",
    emphasis: bool = False,
    forces_header: bool = False,
) -> RenderRequest:
    return RenderRequest(
        timestamp=1700000000,
        thread_ts=thread_ts,
        channel=channel,
        user_type=user_type,
        user=user,
        text=text,
        annotation=annotation,
        emphasis=emphasis,
        forces_header=forces_header,
    )


class TestRenderer:
    """Tests for Renderer filtering and header logic."""

    def _create_renderer(
        self,
        *,
        patterns: tuple[str, ...] = (),
        mute_channels: frozenset[str] = frozenset(),
        mute_users: frozenset[str] = frozenset(),
        names: dict[str, str] | None = None,
    ) -> tuple[Renderer, FakeConsole]:
        """Create a renderer writing to a fake console.

        Returns tuple of (renderer, console).
        """
        console = FakeConsole()
        renderer = Renderer(
            notification=NotificationConfig(
                patterns=tuple(re.compile(p) for p in patterns),
                mute_channels=mute_channels,
                mute_users=mute_users,
            ),
            normalizer=TextNormalizer(IdentityCache(FakeSlackApi(), names)),
            console=console,
        )
        return renderer, console

    def _headers(self, console: FakeConsole) -> list[str]:
        return [line for line in console.lines if line.startswith("\x1b[93m@")]

    def test_first_entry_prints_separator_header_and_body(self) -> None:
        renderer, console = self._create_renderer()

        assert renderer.render(_request()) is True

        assert len(console.lines) == 3
        assert console.lines[0] == ""
        assert "@alice" in console.lines[1]
        assert "#general" in console.lines[1]
        assert format_timestamp(1700000000) in console.lines[1]
        assert console.lines[2] == "hello"

    def test_header_layout(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request(user_type="[bot]", user="ci"))

        expected = f"@{'[bot]ci':<18} #{'general':<20} {format_timestamp(1700000000)}"
        assert console.lines[1] == click.style(expected, fg="bright_yellow")

    def test_consecutive_entries_share_one_header(self) -> None:
        """Same channel, sender and thread: one header, two bodies."""
        renderer, console = self._create_renderer()

        renderer.render(_request(text="one"))
        renderer.render(_request(text="two"))

        assert len(self._headers(console)) == 1
        assert console.lines[-2:] == ["one", "two"]

    def test_sender_change_prints_header_without_separator(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request(user="alice"))
        renderer.render(_request(user="bob"))

        assert len(self._headers(console)) == 2
        assert console.lines.count("") == 1

    def test_thread_change_prints_header(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request())
        renderer.render(_request(thread_ts=1690000000))

        headers = self._headers(console)
        assert len(headers) == 2
        assert "[at " + format_timestamp(1690000000) + "]" in headers[1]

    def test_channel_change_prints_separator_and_header(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request(channel="general"))
        renderer.render(_request(channel="random"))

        assert console.lines.count("") == 2
        assert len(self._headers(console)) == 2

    def test_forces_header_on_next_entry(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request(text="attachment", forces_header=True))
        renderer.render(_request(text="follow-up"))

        assert len(self._headers(console)) == 2

    def test_muted_channel_is_suppressed(self) -> None:
        renderer, console = self._create_renderer(mute_channels=frozenset({"random"}))

        assert renderer.render(_request(channel="random")) is False
        assert console.lines == []

    def test_muted_user_is_suppressed(self) -> None:
        renderer, console = self._create_renderer(mute_users=frozenset({"spammer"}))

        assert renderer.render(_request(user="spammer", text="buy now")) is False
        assert console.lines == []

    def test_mute_requires_exact_match(self) -> None:
        renderer, console = self._create_renderer(mute_channels=frozenset({"rand"}))

        assert renderer.render(_request(channel="random")) is True

    def test_empty_body_is_suppressed_and_state_unchanged(self) -> None:
        renderer, console = self._create_renderer()

        assert renderer.render(_request(text="")) is False
        assert console.lines == []
        assert renderer.state == RenderState()

    def test_body_is_normalized(self) -> None:
        renderer, console = self._create_renderer(names={"U1": "bob"})

        renderer.render(_request(text="hi <@U1> &amp; <!here>"))

        assert console.lines[-1] == "hi @bob & @here"

    def test_highlight_pattern_wraps_body(self) -> None:
        renderer, console = self._create_renderer(patterns=(r"deploy",))

        renderer.render(_request(text="please deploy now"))

        assert console.lines[-1] == click.style(
            "please deploy now", fg="bright_magenta", blink=True
        )

    def test_highlight_matches_normalized_text(self) -> None:
        renderer, console = self._create_renderer(patterns=(r"@alice",), names={"U1": "alice"})

        renderer.render(_request(text="ping <@U1>"))

        assert console.lines[-1] == click.style("ping @alice", fg="bright_magenta", blink=True)

    def test_annotation_and_emphasis(self) -> None:
        renderer, console = self._create_renderer()

        renderer.render(_request(text="waves", emphasis=True, annotation=" (edited)"))

        assert console.lines[-1] == click.style("waves", italic=True, fg="bright_black") + (
            " (edited)"
        )

    def test_state_tracks_last_entry(self) -> None:
        renderer, _ = self._create_renderer()

        renderer.render(_request(channel="dev", user="bob", thread_ts=42))

        assert renderer.state == RenderState(channel="dev", user="bob", thread_ts=42)


class TestFormatTimestamp:
    """Tests for format_timestamp()."""

    def test_unrepresentable_instant_is_empty(self) -> None:
        assert format_timestamp(10**20) == ""

    def test_epoch_is_formatted(self) -> None:
        assert len(format_timestamp(0)) == len("1970/01/01 00:00:00")
