# flowstate/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from flowstate.interfaces.types import StateName


@runtime_checkable
class StatePersistence(Protocol):
    """
    Storage capability a host object offers to the engine.

    Methods:
        load_workflow_state(): Returns the persisted state name, or None.
        persist_workflow_state(name): Stores the new state name.

    Runtime Invariants:
    - ``load_workflow_state`` returns the last value handed to
      ``persist_workflow_state`` for the same host, or None before the
      first transition.
    - Both calls are synchronous; any blocking is the host's business.

    Error Handling:
    - Errors raised by either method propagate unchanged to the caller of
      ``process_event``.
    - A ``halt_now`` inside ``persist_workflow_state`` only leaves that call;
      the transition still completes and ``process_event`` sees None as the
      persistence result.
    """

    def load_workflow_state(self) -> Optional[StateName]:
        """Return the persisted state name; None means "use the initial state"."""
        ...

    def persist_workflow_state(self, name: StateName) -> Any:
        """
        Store the new state name.

        The return value is handed back by ``process_event`` when the
        transition's action produced no result.
        """
        ...


@runtime_checkable
class CallbackProvider(Protocol):
    """
    Named-handler capability: lets a host decide which of its attributes count
    as conventional callbacks (``<event>``, ``on_<state>_entry``,
    ``on_<state>_exit``).

    Hosts that do not implement it fall back to plain attribute lookup.
    """

    def workflow_callback(self, name: str) -> Optional[Callable[..., Any]]:
        """Return the bound handler called ``name``, or None if the host has none."""
        ...
