# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

INSECURE_JWT_SECRET = "your-secret-key-change-in-production"


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///nautilus.db", alias="DATABASE_URL")
    pool_size: int = Field(5, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(10.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    connect_timeout: int = Field(10, ge=1, alias="DATABASE_CONNECT_TIMEOUT")

    model_config = SettingsConfigDict(validate_by_name=True, extra="ignore")


class AuthConfig(BaseSettings):
    jwt_secret: str = Field(INSECURE_JWT_SECRET, alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    # Shared by the token exp claim, the session row and the cookie Max-Age.
    token_ttl_seconds: int = Field(60 * 60 * 24 * 7, ge=1, alias="AUTH_TOKEN_TTL")
    cookie_name: str = Field("auth_token", alias="AUTH_COOKIE_NAME")
    bcrypt_rounds: int = Field(10, ge=4, le=31, alias="AUTH_BCRYPT_ROUNDS")
    recheck_active: bool = Field(True, alias="AUTH_RECHECK_ACTIVE")

    model_config = SettingsConfigDict(validate_by_name=True, extra="ignore")

    @field_validator("recheck_active", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


class ResilienceConfig(BaseSettings):
    max_retries: int = Field(2, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.1, ge=0.01, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(1.0, ge=0.01, alias="RESILIENCE_BACKOFF_CAP")

    model_config = SettingsConfigDict(validate_by_name=True, extra="ignore")


class SecurityConfig(BaseSettings):
    # None means "secure in production only"
    cookie_secure: bool | None = Field(None, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Strict", alias="COOKIE_SAMESITE")

    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = SettingsConfigDict(validate_by_name=True, extra="ignore")

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("cookie_secure", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool | None) -> bool | None:
        if value is None:
            return None
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        if isinstance(value, str):
            return value.lower() in ("1", "true", "yes")
        return bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        insecure = []
        if self.secret_key in ("dev", "development", "test", ""):
            insecure.append("SECRET_KEY")
        if self.auth.jwt_secret in (INSECURE_JWT_SECRET, ""):
            insecure.append("JWT_SECRET")
        if insecure:
            print(
                f"\n❌ CRITICAL SECURITY ERROR: insecure {', '.join(insecure)} in production!\n"
                "   Signing secrets must be strong random values in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.cookie_secure():
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if "*" in self.security.allowed_origins:
            warnings.append("⚠️  CORS allows wildcard (*) origins")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)
            print(
                "   Consider enabling these security features in production.\n",
                file=sys.stderr,
            )

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def cookie_secure(self) -> bool:
        if self.security.cookie_secure is None:
            return self.is_production()
        return self.security.cookie_secure


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = [
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "ResilienceConfig",
    "SecurityConfig",
    "load_config",
]
