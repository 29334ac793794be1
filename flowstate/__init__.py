# flowstate/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""flowstate: finite state machines for plain Python objects

A host class mixes in :class:`Workflow` and attaches a :class:`Specification`;
its instances then gain a current state, guarded transitions and lifecycle
hooks, with the state value stored wherever the host chooses.

Responsibilities:
    - Specification authoring (builder and mapping loader)
    - Guard evaluation in declaration order
    - Ordered hook/action execution around each state change
    - Halt and error recovery semantics

Cross-cutting Concerns:
    Thread Safety:
        - Specifications are immutable and safe to share
        - Per-instance runtime state is not locked; callers serialize access

    Error Handling:
        - All library errors derive from FlowStateError
        - Action errors go to on_error when configured, else propagate

    Logging:
        - Standard library logging under the "flowstate" logger
        - No handlers installed by the library
"""

from flowstate.core.errors import FlowStateError, NoTransitionAllowed, TransitionHalted, WorkflowError
from flowstate.core.specification import Specification, SpecificationBuilder
from flowstate.core.states import State
from flowstate.core.transitions import EventTable, Transition
from flowstate.workflow import Workflow

__version__ = "0.1.0"

__all__ = [
    "EventTable",
    "FlowStateError",
    "NoTransitionAllowed",
    "Specification",
    "SpecificationBuilder",
    "State",
    "Transition",
    "TransitionHalted",
    "Workflow",
    "WorkflowError",
]
