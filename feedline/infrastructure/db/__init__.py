# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .session import ENGINE, Base, SessionFactory, init_db

__all__ = ["Base", "ENGINE", "SessionFactory", "init_db"]
