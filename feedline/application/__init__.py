# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .services.authenticator import Authenticator, CachedCredential

__all__ = ["Authenticator", "CachedCredential"]
