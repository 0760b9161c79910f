"""RTC token issuance.

Validates a join request, resolves the effective uid and role, and asks the
signer for a token. Every outcome comes back as an ``IssueResult``: callers
branch on it instead of catching exceptions, and signer faults never escape.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from ..core.config import Settings
from .signer import RtcRole, TokenSigner

logger = logging.getLogger(__name__)

TOKEN_EXPIRATION_SECONDS = 3600
PRIVILEGE_EXPIRATION_SECONDS = 3600

VALID_ROLES = ("publisher", "subscriber")


class IssuanceErrorKind(str, enum.Enum):
    MISSING_CHANNEL = "missing_channel"
    INVALID_CHANNEL = "invalid_channel"
    INVALID_UID = "invalid_uid"
    INVALID_ROLE = "invalid_role"
    SIGNING_FAILURE = "signing_failure"


ERROR_KIND_TO_STATUS: dict[IssuanceErrorKind, int] = {
    IssuanceErrorKind.MISSING_CHANNEL: 400,
    IssuanceErrorKind.INVALID_CHANNEL: 400,
    IssuanceErrorKind.INVALID_UID: 400,
    IssuanceErrorKind.INVALID_ROLE: 400,
    IssuanceErrorKind.SIGNING_FAILURE: 500,
}


@dataclass(slots=True, frozen=True)
class AppCredentials:
    app_id: str
    app_certificate: str = field(repr=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppCredentials":
        return cls(
            app_id=settings.agora_app_id,
            app_certificate=settings.agora_app_certificate.get_secret_value(),
        )


@dataclass(slots=True, frozen=True)
class TokenGrant:
    """A validated request with defaults resolved."""

    channel_name: str
    uid: int
    role: RtcRole
    token_expire: int = TOKEN_EXPIRATION_SECONDS
    privilege_expire: int = PRIVILEGE_EXPIRATION_SECONDS


@dataclass(slots=True, frozen=True)
class Credential:
    token: str = field(repr=False)


@dataclass(slots=True, frozen=True)
class IssuanceError:
    kind: IssuanceErrorKind
    message: str
    details: str | None = None

    @property
    def status_code(self) -> int:
        return ERROR_KIND_TO_STATUS[self.kind]


@dataclass(slots=True, frozen=True)
class IssueResult:
    credential: Credential | None = None
    error: IssuanceError | None = None

    @property
    def ok(self) -> bool:
        return self.credential is not None


def _as_uid(value: Any) -> int | None:
    """Return ``value`` as a non-negative int, or None if it is not one.

    JSON numbers like ``42.0`` are integers; booleans are not.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None


def _is_unset(value: Any) -> bool:
    """True for JSON values that count as absent: null, "", false, 0 and NaN.

    Empty arrays and objects count as present.
    """

    if value is None or value == "":
        return True
    if isinstance(value, (bool, int, float)):
        return not value or value != value
    return False


def validate_request(payload: Mapping[str, Any]) -> TokenGrant | IssuanceError:
    """Check a raw request body; the first failing rule wins."""

    channel_name = payload.get("channelName")
    if _is_unset(channel_name):
        return IssuanceError(IssuanceErrorKind.MISSING_CHANNEL, "channelName is required")
    if not isinstance(channel_name, str) or not channel_name.strip():
        return IssuanceError(IssuanceErrorKind.INVALID_CHANNEL, "channelName must be a non-empty string")

    uid = 0
    if "uid" in payload:
        resolved = _as_uid(payload["uid"])
        if resolved is None:
            return IssuanceError(IssuanceErrorKind.INVALID_UID, "uid must be a non-negative integer")
        uid = resolved

    role = payload.get("role")
    if not _is_unset(role) and role not in VALID_ROLES:
        return IssuanceError(
            IssuanceErrorKind.INVALID_ROLE, 'role must be either "publisher" or "subscriber"'
        )

    return TokenGrant(
        channel_name=channel_name,
        uid=uid,
        role=RtcRole.PUBLISHER if role == "publisher" else RtcRole.SUBSCRIBER,
    )


def issue_token(
    payload: Mapping[str, Any],
    credentials: AppCredentials,
    signer: TokenSigner,
) -> IssueResult:
    """Validate ``payload`` and produce a signed credential.

    The signer is called at most once and its token is returned verbatim.
    """

    checked = validate_request(payload)
    if isinstance(checked, IssuanceError):
        logger.info("Rejected RTC token request: %s", checked.kind.value)
        return IssueResult(error=checked)

    grant = checked
    try:
        token = signer.build_token(
            credentials.app_id,
            credentials.app_certificate,
            grant.channel_name,
            grant.uid,
            grant.role,
            grant.token_expire,
            grant.privilege_expire,
        )
    except Exception as exc:  # noqa: BLE001 - every signer fault maps to a 500
        logger.exception("Signing failed for channel=%s role=%s", grant.channel_name, grant.role.name)
        details = str(exc) or exc.__class__.__name__
        return IssueResult(
            error=IssuanceError(IssuanceErrorKind.SIGNING_FAILURE, "Internal server error", details),
        )

    logger.info(
        "Issued RTC token channel=%s uid=%s role=%s", grant.channel_name, grant.uid, grant.role.name
    )
    return IssueResult(credential=Credential(token=token))
