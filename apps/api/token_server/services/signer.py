"""Signer abstraction over the Agora token builder."""
from __future__ import annotations

import enum
import time
from typing import Protocol

from agora_token_builder.AccessToken import (
    AccessToken,
    kJoinChannel,
    kPublishAudioStream,
    kPublishDataStream,
    kPublishVideoStream,
)


class RtcRole(enum.IntEnum):
    """Privilege granted by a token, using Agora's role constants."""

    PUBLISHER = 1
    SUBSCRIBER = 2


class TokenSigner(Protocol):
    def build_token(
        self,
        app_id: str,
        app_certificate: str,
        channel_name: str,
        uid: int,
        role: RtcRole,
        token_expire: int,
        privilege_expire: int,
    ) -> str:
        """Return an opaque signed token. Expiries are seconds from now."""


PUBLISH_PRIVILEGES = (kPublishAudioStream, kPublishVideoStream, kPublishDataStream)


class AgoraTokenSigner:
    """Sign RTC tokens with ``agora-token-builder``'s ``AccessToken``.

    The token's own expiry and its privilege expiries are set separately,
    both as absolute Unix timestamps taken from the clock at signing time.
    Subscribers only get the join privilege; publishers also get the audio,
    video and data publish privileges.
    """

    def __init__(self, clock=time.time) -> None:
        self._clock = clock

    def access_token(
        self,
        app_id: str,
        app_certificate: str,
        channel_name: str,
        uid: int,
        role: RtcRole,
        token_expire: int,
        privilege_expire: int,
    ) -> AccessToken:
        """Return the unsigned access token with expiries and privileges applied."""

        now = int(self._clock())
        token = AccessToken(app_id, app_certificate, channel_name, uid)
        token.ts = now + token_expire

        privilege_ts = now + privilege_expire
        token.addPrivilege(kJoinChannel, privilege_ts)
        if role is RtcRole.PUBLISHER:
            for privilege in PUBLISH_PRIVILEGES:
                token.addPrivilege(privilege, privilege_ts)
        return token

    def build_token(
        self,
        app_id: str,
        app_certificate: str,
        channel_name: str,
        uid: int,
        role: RtcRole,
        token_expire: int,
        privilege_expire: int,
    ) -> str:
        return self.access_token(
            app_id, app_certificate, channel_name, uid, role, token_expire, privilege_expire
        ).build()
