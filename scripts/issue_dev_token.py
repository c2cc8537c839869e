"""Print a bearer token for a user id, for calling the API locally.

Usage:
    uv run python -m scripts.issue_dev_token <user_id> [minutes]
Tokens are signed with SECRET_KEY; the API only checks ``sub``.
All imports use app.*.
"""

import sys
from datetime import timedelta

from app.infrastructure.security.jwt import create_access_token


def main() -> None:
    """Issue a token for the user id given on the command line."""
    if len(sys.argv) < 2:
        print(
            "Usage: uv run python -m scripts.issue_dev_token <user_id> [minutes]",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id = sys.argv[1].strip()
    if not user_id:
        print("user_id must not be blank", file=sys.stderr)
        sys.exit(1)
    expires = timedelta(minutes=int(sys.argv[2])) if len(sys.argv) > 2 else None
    print(create_access_token(user_id, expires_delta=expires))


if __name__ == "__main__":
    main()
