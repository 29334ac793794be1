# flowstate/runtime/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Runtime package for per-instance workflow bookkeeping.
"""

from .context import RuntimeContext

__all__ = ["RuntimeContext"]
