# flowstate/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from flowstate.core.transitions import EventTable
from flowstate.interfaces.types import StateHook, StateName


@dataclass(frozen=True, eq=False)
class State:
    """
    A named node of the machine. Owns its outgoing transitions and optional
    entry/exit closures, which take precedence over the host's
    ``on_<name>_entry`` / ``on_<name>_exit`` methods.
    """

    name: StateName
    events: EventTable = field(default_factory=EventTable)
    on_entry: Optional[StateHook] = None
    on_exit: Optional[StateHook] = None

    def __str__(self) -> str:
        return self.name

    @property
    def entry_callback_name(self) -> str:
        """Name of the host method used when no ``on_entry`` closure is set."""
        return f"on_{self.name}_entry"

    @property
    def exit_callback_name(self) -> str:
        """Name of the host method used when no ``on_exit`` closure is set."""
        return f"on_{self.name}_exit"
