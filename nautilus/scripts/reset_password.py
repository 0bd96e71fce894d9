# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Reset a user's password and sign them out everywhere."""

from __future__ import annotations

import argparse
import getpass
import sys

from nautilus.application.use_cases.admin.update_user_access import AccessUpdate
from nautilus.domain.users.exceptions import UserNotFoundError
from nautilus.infrastructure.audit import AuditAction, audit_log
from nautilus.infrastructure.container import container
from nautilus.infrastructure.db import init_db
from nautilus.shared.logging import setup_logging

MIN_PASSWORD_LENGTH = 8


def _read_password() -> str:
    first = getpass.getpass("New password: ")
    second = getpass.getpass("Repeat password: ")
    if first != second:
        print("Passwords do not match", file=sys.stderr)
        raise SystemExit(2)
    return first


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("username", help="Account to reset")
    parser.add_argument(
        "--password",
        help="New password (prompted for when omitted)",
    )
    args = parser.parse_args(argv)

    setup_logging(debug_mode=container.config.debug_logging)
    init_db()

    password = args.password if args.password is not None else _read_password()
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"Password must be at least {MIN_PASSWORD_LENGTH} characters", file=sys.stderr)
        return 2

    user = container.user_repository.find_by_username(args.username)
    if user is None:
        print(f"User {args.username!r} not found", file=sys.stderr)
        return 1

    try:
        result = container.update_user_access_use_case.execute(
            user.id, AccessUpdate(password=password)
        )
    except UserNotFoundError:
        print(f"User {args.username!r} not found", file=sys.stderr)
        return 1

    audit_log(
        AuditAction.PASSWORD_RESET,
        user_id=user.id,
        details={"username": user.username, "sessions_revoked": result.sessions_revoked},
    )
    print(
        f"Password updated for {user.username} "
        f"({result.sessions_revoked} sessions revoked)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
