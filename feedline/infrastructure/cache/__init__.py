# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from feedline.shared.config import AppConfig

from .memory import InMemoryTTLCache
from .redis_cache import RedisCredentialCache


def build_credential_cache(config: AppConfig) -> InMemoryTTLCache | RedisCredentialCache:
    if config.cache.backend == "memory":
        return InMemoryTTLCache()
    return RedisCredentialCache.from_config(config.cache, config.resilience)


__all__ = ["InMemoryTTLCache", "RedisCredentialCache", "build_credential_cache"]
