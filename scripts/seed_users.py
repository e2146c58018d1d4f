"""Insert random demo users through the configured user repository."""

from __future__ import annotations

import argparse
import secrets
import string
import sys
from collections.abc import Sequence
from pathlib import Path
from uuid import UUID

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

ALPHABET = string.ascii_lowercase + string.digits
FIRST_NAMES = ["Thomas", "Trinity", "Morpheus", "Niobe", "Tank", "Dozer", "Apoc", "Switch"]
LAST_NAMES = ["Anderson", "Smith", "Jones", "Brown", "Taylor", "Wilson", "Clark", "Hall"]


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Create random demo users in the configured repository.",
    )
    parser.add_argument(
        "count",
        type=int,
        help="How many users to create.",
    )
    parser.add_argument(
        "--login-length",
        type=int,
        default=8,
        help="Length of generated logins (default: 8).",
    )
    return parser.parse_args(argv)


def random_login(length: int) -> str:
    """Return a lowercase alphanumeric login."""
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def seed_users(count: int, login_length: int, service=None) -> list[UUID]:
    """Create ``count`` users and return their ids."""
    if count <= 0:
        raise ValueError("count must be >= 1")
    if login_length < 1:
        raise ValueError("login length must be >= 1")

    if service is None:
        from app.dependencies import get_user_repository
        from app.services.user_service import UserService

        service = UserService(get_user_repository())

    created: list[UUID] = []
    for _ in range(count):
        payload = {
            "login": random_login(login_length),
            "firstName": secrets.choice(FIRST_NAMES),
            "lastName": secrets.choice(LAST_NAMES),
        }
        created.append(service.create_user(payload))
    return created


def print_ids(user_ids: Sequence[UUID]) -> None:
    """Print created ids in copy-friendly form."""
    print(f"Created {len(user_ids)} user(s):")
    for user_id in user_ids:
        print(user_id)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_args(argv)
    print_ids(seed_users(count=args.count, login_length=args.login_length))


if __name__ == "__main__":
    main()
