#!/usr/bin/env python3
"""JWT token generation utility for testing and development.

Generates bearer tokens accepted by the radix converter API.
"""

import argparse
import sys

from radix_app.auth.jwt_auth import generate_jwt_token


def generate_single_token(user_id: str, expires_in: int | None = None) -> None:
    """Generate and print a JWT token for a user.

    Args:
        user_id: User identifier
        expires_in: Token expiration in seconds (None for no expiration)
    """
    try:
        token = generate_jwt_token(user_id=user_id, expires_in_seconds=expires_in)
    except ValueError as e:
        print(f"Error generating token: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Generated JWT token for user_id={user_id}")
    print(f"Token: {token}")
    print(f"Authorization Header: Bearer {token}")

    if expires_in is None:
        print("Expiration: Never (development mode)")
    else:
        print(f"Expires in: {expires_in} seconds")


def main() -> None:
    """Parse arguments and generate a token."""
    parser = argparse.ArgumentParser(description="Generate JWT tokens for the radix converter API")
    parser.add_argument("--user-id", required=True, help="User identifier")
    parser.add_argument(
        "--expires-in", type=int, help="Token expiration in seconds (default: never)"
    )
    args = parser.parse_args()

    generate_single_token(args.user_id, args.expires_in)


if __name__ == "__main__":
    main()
