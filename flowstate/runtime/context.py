# flowstate/runtime/context.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Per-host runtime bookkeeping: current state resolution and halt flags.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from flowstate.core.errors import TransitionHalted
from flowstate.core.specification import Specification
from flowstate.core.states import State
from flowstate.interfaces.protocols import StatePersistence


class RuntimeContext:
    """
    Manages the runtime state of one host object.
    The state name itself lives wherever the host persists it; this object
    only remembers whether the last transition was halted, and why.
    """

    def __init__(self, host: StatePersistence) -> None:
        self._host = host
        self._halted = False
        self._halted_because: Any = None

    @property
    def host(self) -> StatePersistence:
        return self._host

    @property
    def halted(self) -> bool:
        """True if the last transition was halted by one of its callbacks."""
        return self._halted

    @property
    def halted_because(self) -> Any:
        """Reason given to the last ``halt`` / ``halt_now`` call, or None."""
        return self._halted_because

    def current_state(self, spec: Specification) -> State:
        """
        Resolve the host's persisted state name, falling back to the initial
        state when nothing (or an undeclared name) has been persisted.
        """
        loaded: Optional[str] = self._host.load_workflow_state()
        return spec.state_for(loaded) or spec.initial_state

    def reset_halt(self) -> None:
        self._halted = False
        self._halted_because = None

    def halt(self, reason: Any = None) -> None:
        """Record a soft halt; the engine aborts at its next halt check."""
        self._halted_because = reason
        self._halted = True

    def halt_now(self, reason: Any = None) -> None:
        """
        Record a halt and unwind the running callback.

        :raises TransitionHalted: Always; the engine catches it.
        """
        self.halt(reason)
        raise TransitionHalted(reason)

    @contextmanager
    def preserved_halt(self) -> Iterator[None]:
        """Restore the halt flags on exit, for side-effect free probes."""
        saved = (self._halted, self._halted_because)
        try:
            yield
        finally:
            self._halted, self._halted_because = saved
