# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_GROUP_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_flag(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///feedline.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")
    connect_timeout: int = Field(5, ge=1, alias="DATABASE_CONNECT_TIMEOUT")
    # Milliseconds; 0 leaves the server default in place.
    statement_timeout_ms: int = Field(5000, ge=0, alias="DATABASE_STATEMENT_TIMEOUT")

    model_config = _GROUP_CONFIG


class CacheConfig(BaseSettings):
    backend: str = Field("redis", alias="CACHE_BACKEND")
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")
    credential_ttl: int = Field(300, ge=1, alias="CREDENTIAL_CACHE_TTL")
    key_prefix: str = Field("feedline:cred:", alias="CACHE_KEY_PREFIX")
    socket_timeout: float = Field(0.5, ge=0.01, alias="CACHE_SOCKET_TIMEOUT")
    connect_timeout: float = Field(0.5, ge=0.01, alias="CACHE_CONNECT_TIMEOUT")
    # Cache outages degrade to the credential store instead of failing login.
    fail_open: bool = Field(True, alias="CACHE_FAIL_OPEN")
    # A cached hash that rejects the password is final unless this is set.
    stale_hit_fallback: bool = Field(False, alias="AUTH_STALE_HIT_FALLBACK")

    model_config = _GROUP_CONFIG

    @field_validator("backend", mode="before")
    @classmethod
    def _parse_backend(cls, value: str) -> str:
        backend = str(value).strip().lower()
        if backend not in ("redis", "memory"):
            raise ValueError("CACHE_BACKEND must be 'redis' or 'memory'")
        return backend

    @field_validator("fail_open", "stale_hit_fallback", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


class ResilienceConfig(BaseSettings):
    max_retries: int = Field(1, ge=0, alias="RESILIENCE_RETRIES")
    backoff_base: float = Field(0.05, ge=0.0, alias="RESILIENCE_BACKOFF_BASE")
    backoff_cap: float = Field(0.5, ge=0.0, alias="RESILIENCE_BACKOFF_CAP")
    circuit_fail_threshold: int = Field(5, ge=1, alias="RESILIENCE_CIRCUIT_THRESHOLD")
    circuit_reset_timeout: float = Field(30.0, ge=0.1, alias="RESILIENCE_CIRCUIT_RESET")

    model_config = _GROUP_CONFIG


class ObservabilityConfig(BaseSettings):
    metrics_enabled: bool = Field(True, alias="METRICS_ENABLED")

    model_config = _GROUP_CONFIG

    @field_validator("metrics_enabled", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


class SecurityConfig(BaseSettings):
    cookie_secure: bool = Field(False, alias="COOKIE_SECURE")
    cookie_samesite: str = Field("Strict", alias="COOKIE_SAMESITE")
    session_lifetime_days: int = Field(7, ge=1, alias="SESSION_LIFETIME_DAYS")

    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    login_max_attempts: int = Field(5, ge=1, alias="LOGIN_MAX_ATTEMPTS")
    login_lockout_seconds: float = Field(15 * 60, ge=1.0, alias="LOGIN_LOCKOUT_SECONDS")
    login_attempt_window: float = Field(60 * 60, ge=1.0, alias="LOGIN_ATTEMPT_WINDOW")

    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _GROUP_CONFIG

    @field_validator("cookie_secure", "enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_bool(cls, value: str | bool) -> bool:
        return _parse_flag(value)


class StorageConfig(BaseSettings):
    upload_dir: Path = Field(Path("instance/uploads"), alias="UPLOAD_DIR")
    allowed_extensions: Annotated[list[str], NoDecode] = Field(
        ["png", "jpg", "jpeg", "gif", "webp"], alias="ALLOWED_IMAGE_EXTENSIONS"
    )
    max_upload_bytes: int = Field(5 * 1024 * 1024, ge=1, alias="MAX_UPLOAD_BYTES")

    model_config = _GROUP_CONFIG

    @field_validator("allowed_extensions", mode="before")
    @classmethod
    def _parse_extensions(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            value = value.split(",")
        return [ext.strip().lower().lstrip(".") for ext in value if ext.strip()]


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _cache_config_factory() -> CacheConfig:
    return CacheConfig()  # type: ignore[call-arg]


def _resilience_config_factory() -> ResilienceConfig:
    return ResilienceConfig()  # type: ignore[call-arg]


def _observability_config_factory() -> ObservabilityConfig:
    return ObservabilityConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


def _storage_config_factory() -> StorageConfig:
    return StorageConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    cache: CacheConfig = Field(default_factory=_cache_config_factory)
    resilience: ResilienceConfig = Field(default_factory=_resilience_config_factory)
    observability: ObservabilityConfig = Field(default_factory=_observability_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)
    storage: StorageConfig = Field(default_factory=_storage_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_flag(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.secret_key in ("dev", "development", "test", ""):
            print(
                "\n❌ CRITICAL SECURITY ERROR: Insecure SECRET_KEY detected in production!\n"
                "   SECRET_KEY must be a strong random value in production.\n",
                file=sys.stderr,
            )
            sys.exit(1)

        warnings = []
        if not self.security.cookie_secure:
            warnings.append("⚠️  Cookie Secure flag is DISABLED (use HTTPS!)")
        if self.cache.backend == "memory":
            warnings.append("⚠️  Credential cache is process-local (CACHE_BACKEND=memory)")
        if not self.security.enable_hsts:
            warnings.append("⚠️  HSTS is DISABLED (recommended for HTTPS)")

        if warnings:
            print("\n⚠️  PRODUCTION SECURITY WARNINGS:", file=sys.stderr)
            for warning in warnings:
                print(f"   {warning}", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "load_config"]
