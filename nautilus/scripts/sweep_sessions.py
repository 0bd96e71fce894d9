# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Delete expired session rows. Meant for cron."""

from __future__ import annotations

from nautilus.infrastructure.audit import AuditAction, audit_log
from nautilus.infrastructure.container import container
from nautilus.infrastructure.db import init_db
from nautilus.shared.logging import setup_logging


def main() -> int:
    setup_logging(debug_mode=container.config.debug_logging)
    init_db()
    removed = container.sweep_sessions_use_case.execute()
    audit_log(AuditAction.SESSIONS_SWEPT, details={"removed": removed, "source": "cli"})
    print(f"Removed {removed} expired sessions")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
