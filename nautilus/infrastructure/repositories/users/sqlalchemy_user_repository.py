# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sqlalchemy.orm import Session as OrmSession

from nautilus.domain.users.entities import Role
from nautilus.domain.users.entities import Session as DomainSession
from nautilus.domain.users.entities import SessionProvenance
from nautilus.domain.users.entities import User as DomainUser
from nautilus.domain.users.repositories import SessionRepository, UserRepository
from nautilus.infrastructure.db.models import Session, User
from nautilus.infrastructure.resilience import retry_transient
from nautilus.infrastructure.unit_of_work import unit_of_work_scope
from nautilus.shared.config.settings import AuthConfig, ResilienceConfig


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain_user(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        role=Role(row.role),
        is_active=bool(row.is_active),
        full_name=row.full_name,
        email=row.email,
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
        last_login=_as_utc(row.last_login),
    )


def _to_domain_session(row: Session) -> DomainSession:
    return DomainSession(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=_as_utc(row.expires_at),
        created_at=_as_utc(row.created_at),
        ip_address=row.ip_address,
        user_agent=row.user_agent,
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], OrmSession]):
        self._session_factory = session_factory

    def find_by_username(self, username: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.find_by_username") as session:
            row = session.query(User).filter(User.username == username).first()
            return _to_domain_user(row) if row else None

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.find_by_id") as session:
            row = session.get(User, user_id)
            return _to_domain_user(row) if row else None

    def update_access(
        self,
        user_id: int,
        *,
        password_hash: str | None = None,
        role: Role | None = None,
        is_active: bool | None = None,
    ) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory, "users.update_access") as session:
            row = session.get(User, user_id)
            if row is None:
                return None
            if password_hash is not None:
                row.password_hash = password_hash
            if role is not None:
                row.role = Role(role).value
            if is_active is not None:
                row.is_active = is_active
            row.updated_at = _utcnow()
            session.flush()
            return _to_domain_user(row)


class SqlAlchemySessionRepository(SessionRepository):
    """Server-side session rows; the only authority for revocation."""

    def __init__(
        self,
        session_factory: Callable[[], OrmSession],
        *,
        auth: AuthConfig,
        resilience: ResilienceConfig,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._session_factory = session_factory
        self._ttl = timedelta(seconds=auth.token_ttl_seconds)
        self._recheck_active = auth.recheck_active
        self._resilience = resilience
        self._clock = clock

    def create(self, user_id: int, token: str, provenance: SessionProvenance) -> DomainSession:
        now = self._clock()
        with unit_of_work_scope(self._session_factory, "sessions.create") as session:
            row = Session(
                user_id=user_id,
                token=token,
                expires_at=now + self._ttl,
                ip_address=provenance.ip_address,
                user_agent=provenance.user_agent,
                created_at=now,
            )
            session.add(row)
            session.query(User).filter(User.id == user_id).update(
                {User.last_login: now}, synchronize_session=False
            )
            session.flush()
            return _to_domain_session(row)

    def find_live(self, token: str) -> DomainSession | None:
        def _lookup() -> DomainSession | None:
            with unit_of_work_scope(self._session_factory, "sessions.find_live") as session:
                query = session.query(Session).filter(
                    Session.token == token,
                    Session.expires_at > self._clock(),
                )
                if self._recheck_active:
                    query = query.join(User, User.id == Session.user_id).filter(
                        User.is_active.is_(True)
                    )
                row = query.first()
                return _to_domain_session(row) if row else None

        return retry_transient(_lookup, config=self._resilience, operation="sessions.find_live")

    def delete(self, token: str) -> None:
        with unit_of_work_scope(self._session_factory, "sessions.delete") as session:
            session.query(Session).filter(Session.token == token).delete(
                synchronize_session=False
            )

    def delete_all_for_user(self, user_id: int) -> int:
        with unit_of_work_scope(self._session_factory, "sessions.delete_all_for_user") as session:
            return session.query(Session).filter(Session.user_id == user_id).delete(
                synchronize_session=False
            )

    def sweep_expired(self) -> int:
        with unit_of_work_scope(self._session_factory, "sessions.sweep_expired") as session:
            return session.query(Session).filter(Session.expires_at <= self._clock()).delete(
                synchronize_session=False
            )
