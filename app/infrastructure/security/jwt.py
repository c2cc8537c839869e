"""JWT verification (and issuance for tooling and tests).

Tokens are HS256 by default; ``sub`` carries the user id that owns every
case and note created with the token.
"""

from datetime import timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings
from app.shared.utils.datetime import utc_now


def create_access_token(
    subject: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict[str, Any] | None = None,
) -> str:
    """Encode a token for ``subject`` that expires after expires_delta.

    The default lifetime is settings.access_token_expire_minutes.
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = dict(extra_claims or {})
    claims.update(sub=subject, exp=utc_now() + lifetime)
    encoded = jwt.encode(
        claims,
        settings.secret_key.get_secret_value(),
        algorithm=settings.algorithm,
    )
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT, requiring ``exp`` and a non-empty ``sub``.

    Raises:
        ValueError: If the token is invalid, expired, or missing claims.
    """
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key.get_secret_value(),
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    sub = payload.get("sub")
    if not isinstance(sub, str) or not sub.strip():
        raise ValueError("Token missing required claim: sub")
    return payload
