"""Tests for SlackTailService."""

import re
from typing import Any

from slacktail.config import Config, GeneralConfig, NotificationConfig
from slacktail.connection import ConnectionPhase
from slacktail.gateway.api.fake import FakeSlackApi
from slacktail.gateway.console.fake import FakeConsole
from slacktail.gateway.stream.fake import FakeEventStream
from slacktail.gateway.time.fake import FakeTime
from slacktail.service import SlackTailService
from slacktail.types import ConversationInfo, UserGroup, UserInfo


def _config(
    *,
    patterns: tuple[str, ...] = (),
    mute_channels: frozenset[str] = frozenset(),
    mute_users: frozenset[str] = frozenset(),
) -> Config:
    return Config(
        general=GeneralConfig(token="xoxp-test", timeout=30),
        notification=NotificationConfig(
            patterns=tuple(re.compile(p) for p in patterns),
            mute_channels=mute_channels,
            mute_users=mute_users,
        ),
    )


def _message(text: str, **fields: Any) -> dict[str, Any]:
    frame: dict[str, Any] = {
        "type": "message",
        "channel": "C1",
        "user": "U1",
        "text": text,
        "ts": "1700000000.000100",
    }
    frame.update(fields)
    return frame


class TestSlackTailService:
    """End-to-end tests over fake gateways."""

    def _create_service(
        self,
        sessions: list[list[dict[str, Any]]],
        config: Config | None = None,
        api: FakeSlackApi | None = None,
    ) -> tuple[SlackTailService, FakeSlackApi, FakeEventStream, FakeTime, FakeConsole]:
        """Create a service with all fakes for testing.

        Returns tuple of (service, api, stream, time, console).
        """
        api = api or FakeSlackApi(
            user_groups=[UserGroup(id="S1", handle="devs", name="Developers")],
            conversations={
                "C1": ConversationInfo(id="C1", name="general", user=None),
                "C2": ConversationInfo(id="C2", name="random", user=None),
            },
            users={
                "U1": UserInfo(id="U1", name="alice", display_name=None),
                "U2": UserInfo(id="U2", name="bob", display_name=None),
            },
        )
        stream = FakeEventStream(sessions=sessions)
        time = FakeTime()
        console = FakeConsole()
        service = SlackTailService(
            config=config or _config(),
            api=api,
            stream=stream,
            time=time,
            console=console,
        )
        return service, api, stream, time, console

    def _run_session(self, service: SlackTailService) -> None:
        """Step the connection until the current session's stream drops."""
        assert service.connection.step() == ConnectionPhase.STREAMING
        assert service.connection.step() == ConnectionPhase.BACKOFF

    def test_renders_transcript(self) -> None:
        service, _, _, _, console = self._create_service(
            [[{"type": "hello"}, _message("hi <!subteam^S1> and <@U2>"), _message("again")]]
        )

        self._run_session(service)

        assert console.lines[0] == "Connected!"
        assert console.lines[1] == ""
        assert "@alice" in console.lines[2]
        assert "#general" in console.lines[2]
        assert console.lines[3:] == ["hi @devs and @bob", "again"]

    def test_preloads_user_groups_and_self_on_connect(self) -> None:
        service, _, _, _, _ = self._create_service([[]])

        service.connection.step()

        assert service.identities.get("S1") == "devs"
        assert service.identities.get("U00000SELF") == "me"

    def test_preload_failure_reconnects_without_streaming(self) -> None:
        api = FakeSlackApi(user_groups_error="missing_scope")
        service, _, stream, time, console = self._create_service(
            [[_message("never seen")]], api=api
        )

        assert service.connection.step() == ConnectionPhase.BACKOFF
        service.connection.step()

        assert console.lines == []
        assert stream.close_calls == 1
        assert time.sleep_calls == [1.0]

    def test_identities_and_render_state_survive_reconnect(self) -> None:
        """Names resolved before a reconnect are not looked up again."""
        service, api, _, _, console = self._create_service(
            [[_message("first")], [_message("second")]]
        )

        self._run_session(service)
        service.connection.step()
        self._run_session(service)

        assert api.user_lookups == ["U1"]
        assert api.conversation_lookups == ["C1"]
        # Same channel and sender across the reconnect: still one header.
        assert console.lines.count("") == 1
        assert console.lines[-2:] == ["first", "second"]

    def test_muted_channel_produces_no_output(self) -> None:
        service, _, _, _, console = self._create_service(
            [[_message("noise", channel="C2"), _message("signal")]],
            config=_config(mute_channels=frozenset({"random"})),
        )

        self._run_session(service)

        assert "noise" not in console.lines
        assert console.lines[-1] == "signal"

    def test_unchanged_edit_renders_nothing(self) -> None:
        edit = {
            "type": "message",
            "subtype": "message_changed",
            "channel": "C1",
            "message": {"user": "U1", "text": "same", "ts": "1700000000.1"},
            "previous_message": {"user": "U1", "text": "same", "ts": "1700000000.1"},
        }
        service, _, _, _, console = self._create_service([[edit]])

        self._run_session(service)

        assert console.lines == []

    def test_channel_created_event_names_new_channel(self) -> None:
        service, api, _, _, console = self._create_service(
            [
                [
                    {"type": "channel_created", "channel": {"id": "C9", "name": "launch"}},
                    _message("kickoff", channel="C9"),
                ]
            ]
        )

        self._run_session(service)

        assert "C9" not in api.conversation_lookups
        assert "#launch" in console.lines[1]

    def test_out_of_range_timestamps_do_not_stop_the_stream(self) -> None:
        service, _, _, _, console = self._create_service(
            [
                [
                    _message("infinite", ts="inf"),
                    _message("far future", ts="1e12", thread_ts="99999999999999"),
                    _message("overflow", ts="1e400"),
                    _message("still here"),
                ]
            ]
        )

        self._run_session(service)

        assert console.lines[-4:] == ["infinite", "far future", "overflow", "still here"]
