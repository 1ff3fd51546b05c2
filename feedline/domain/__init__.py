# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .accounts import Account, Identity, InvalidCredentialsError
from .posts import FeedItem, Post

__all__ = ["Account", "FeedItem", "Identity", "InvalidCredentialsError", "Post"]
