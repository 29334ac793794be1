# flowstate/interfaces/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Capabilities a host object offers to the engine, and shared type aliases.
"""

from .protocols import CallbackProvider, StatePersistence

__all__ = ["CallbackProvider", "StatePersistence"]
