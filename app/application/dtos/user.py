"""Identity of the caller, resolved from the bearer token once per request."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    user_id: str
