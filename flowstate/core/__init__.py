# flowstate/core/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Core package: the machine model and the transition engine.

Architecture:
- transitions/states/specification describe a machine (immutable)
- guards picks the transition an event fires
- engine runs one event through the hook protocol

Design Patterns:
- Builder Pattern for specification authoring
- Strategy Pattern for guard evaluation
- Template Method for the transition protocol
"""

from .errors import FlowStateError, NoTransitionAllowed, TransitionHalted, WorkflowError
from .transitions import EventTable, Transition
from .states import State
from .specification import Specification, SpecificationBuilder
from .guards import GuardEvaluator
from .engine import TransitionEngine

__all__ = [
    # Errors
    "FlowStateError",
    "NoTransitionAllowed",
    "TransitionHalted",
    "WorkflowError",
    # Model
    "EventTable",
    "Transition",
    "State",
    "Specification",
    "SpecificationBuilder",
    # Execution
    "GuardEvaluator",
    "TransitionEngine",
]
