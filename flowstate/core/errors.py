# flowstate/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Optional


class FlowStateError(Exception):
    """
    Base exception class for errors raised by the workflow engine.
    """


class NoTransitionAllowed(FlowStateError):
    """
    Raised when the current state has no applicable transition for an event,
    either because the event is not declared there or because every guard
    rejected the call.
    """

    def __init__(self, event_name: str, state_name: Optional[str]) -> None:
        self.event_name = event_name
        self.state_name = state_name
        super().__init__(f"There is no event {event_name} defined for the {state_name} state")


class WorkflowError(FlowStateError):
    """
    Raised when a specification is malformed, e.g. a transition points at a
    state that was never declared.
    """


class TransitionHalted(FlowStateError):
    """
    Raised by ``halt_now`` to unwind the running callback. The engine catches
    it at every callback boundary, so it never leaves ``process_event``.
    """

    def __init__(self, reason: Any = None) -> None:
        self.reason = reason
        super().__init__(reason)
