"""Expansion of Slack message markup into readable text.

Message text references entities with delimited markup, optionally carrying
a fallback label that may be stale and is therefore ignored:

    <#C01234|general>          channel reference    -> #general
    <@U01234|alice>            user mention         -> @alice
    <!subteam^S01234|@devs>    user-group mention   -> @devs
    <!here|here>               keyword              -> @here

Kinds are expanded in that order. Each kind is replaced across the whole
text in one left-to-right scan that never re-scans replacement text.
Unterminated markup is not a match and is left verbatim. HTML entities are
decoded last.
"""

import html
import re

from slacktail.identity import IdentityCache

CHANNEL_PATTERN = re.compile(r"<#([^>|]+)(\|([^>]*))?>")
MENTION_PATTERN = re.compile(r"<@([^>|]+)(\|([^>]*))?>")
USER_GROUP_PATTERN = re.compile(r"<!subteam\^([^>|]+)(\|([^>]*))?>")
# Unresolved user-group mentions must stay literal, so they are excluded here.
KEYWORD_PATTERN = re.compile(r"<!(?!subteam\^)([^>|]+)(\|([^>]*))?>")


class TextNormalizer:
    """Turns raw message text into display text using the identity cache."""

    def __init__(self, identities: IdentityCache) -> None:
        self._identities = identities

    def normalize(self, text: str) -> str:
        """Expand all markup and decode HTML entities.

        Args:
            text: Raw message text

        Returns:
            Display text
        """
        text = CHANNEL_PATTERN.sub(self._expand_channel, text)
        text = MENTION_PATTERN.sub(self._expand_mention, text)
        text = USER_GROUP_PATTERN.sub(self._expand_user_group, text)
        text = KEYWORD_PATTERN.sub(r"@\1", text)
        return html.unescape(text)

    def _expand_channel(self, match: re.Match[str]) -> str:
        channel_id = match.group(1)
        return "#" + (self._identities.resolve_channel(channel_id) or channel_id)

    def _expand_mention(self, match: re.Match[str]) -> str:
        user_id = match.group(1)
        return "@" + (self._identities.resolve_user(user_id) or user_id)

    def _expand_user_group(self, match: re.Match[str]) -> str:
        # No remote lookup for groups; only the bulk preload fills them in.
        name = self._identities.get(match.group(1))
        if name is None:
            return match.group(0)
        return "@" + name
