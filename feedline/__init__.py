# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""feedline: a small social feed service with cached credential checks."""

__version__ = "0.1.0"
