"""Shared fixtures for token server tests."""
from __future__ import annotations

import threading
from dataclasses import dataclass
from uuid import uuid4

import pytest

from token_server.core.config import Settings
from token_server.main import create_app
from token_server.services.signer import RtcRole

APP_ID = "970CA35de60c44645bbae8a215061b33"
APP_CERTIFICATE = "5CFd2fd1755d40ecb72977518be15d3b"


@dataclass
class SignerCall:
    app_id: str
    app_certificate: str
    channel_name: str
    uid: int
    role: RtcRole
    token_expire: int
    privilege_expire: int


class RecordingSigner:
    """Signer stand-in that records its arguments and returns a unique token."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[SignerCall] = []
        self._lock = threading.Lock()

    def build_token(self, app_id, app_certificate, channel_name, uid, role, token_expire, privilege_expire):
        with self._lock:
            self.calls.append(
                SignerCall(app_id, app_certificate, channel_name, uid, role, token_expire, privilege_expire)
            )
        if self.error is not None:
            raise self.error
        return f"tok:{channel_name}:{uid}:{int(role)}:{uuid4().hex}"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        agora_app_id=APP_ID,
        agora_app_certificate=APP_CERTIFICATE,
        _env_file=None,
    )


@pytest.fixture
def signer() -> RecordingSigner:
    return RecordingSigner()


@pytest.fixture
def app(settings: Settings, signer: RecordingSigner):
    return create_app(settings, signer=signer)


@pytest.fixture
def failing_signer() -> RecordingSigner:
    return RecordingSigner(error=ValueError("malformed certificate"))
