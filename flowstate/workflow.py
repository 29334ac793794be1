# flowstate/workflow.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Host-side mixin that gives any class a workflow.

Example::

    class Device(Workflow):
        workflow_spec = (
            SpecificationBuilder()
            .state("off")
            .event("turn_on", "on", guard="sufficient_battery_level")
            .event("turn_on", "low_battery", guard=lambda device: device.battery > 0)
            .state("on")
            .state("low_battery")
            .build()
        )

        def __init__(self, battery):
            self.battery = battery

        def sufficient_battery_level(self):
            return self.battery > 10

    device = Device(50)
    device.process_event("turn_on")
    assert device.is_state("on")
"""

from collections.abc import Mapping
from typing import Any, Callable, Optional

from flowstate.core.engine import TransitionEngine
from flowstate.core.errors import WorkflowError
from flowstate.core.specification import Specification
from flowstate.core.states import State
from flowstate.interfaces.types import EventName, StateName
from flowstate.runtime.context import RuntimeContext


class Workflow:
    """
    Mixin adding state, guarded transitions and lifecycle hooks to a class.

    Class attributes:
        workflow_spec: The :class:`Specification` in effect. A plain mapping
            is accepted too and converted with :meth:`Specification.from_dict`.
            Assigning it on an instance overrides the class-level machine for
            that object only.
        workflow_state_attribute: Instance attribute the default persistence
            stores the state name in. Inherited by subclasses.
        inherited_workflow_spec: The specification a subclass replaced, kept
            for introspection only. Set automatically.

    Hosts may override :meth:`load_workflow_state` and
    :meth:`persist_workflow_state` to keep the state somewhere else, and may
    define ``<event>``, ``on_<state>_entry`` and ``on_<state>_exit`` methods
    which the engine calls when no closure is declared for them.
    """

    workflow_spec: Optional[Specification] = None
    workflow_state_attribute: str = "workflow_state"
    inherited_workflow_spec: Optional[Specification] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.inherited_workflow_spec = getattr(super(cls, cls), "workflow_spec", None)
        declared = cls.__dict__.get("workflow_spec")
        if isinstance(declared, Mapping):
            cls.workflow_spec = Specification.from_dict(declared)
        elif declared is not None and not isinstance(declared, Specification):
            raise TypeError(f"{cls.__name__}.workflow_spec must be a Specification or a mapping")

    # -- specification -------------------------------------------------------

    @property
    def spec(self) -> Specification:
        """The specification in effect for this object."""
        spec = self.workflow_spec
        if spec is None:
            raise WorkflowError(f"{type(self).__name__} has no workflow specification")
        if isinstance(spec, Mapping):
            # an instance-level mapping is converted once and replaced in place
            spec = self.__dict__["workflow_spec"] = Specification.from_dict(spec)
        elif not isinstance(spec, Specification):
            raise TypeError(f"{type(self).__name__}.workflow_spec must be a Specification or a mapping")
        return spec

    def _workflow_context(self) -> RuntimeContext:
        try:
            return self.__dict__["_workflow_runtime"]
        except KeyError:
            context = self.__dict__["_workflow_runtime"] = RuntimeContext(self)
            return context

    def _workflow_engine(self) -> TransitionEngine:
        return TransitionEngine(self.spec)

    # -- queries ---------------------------------------------------------------

    @property
    def current_state(self) -> State:
        """The current state, or the initial state if none was persisted yet."""
        return self._workflow_context().current_state(self.spec)

    def is_state(self, name: StateName) -> bool:
        """True if the object is currently in the state called ``name``."""
        return self.current_state.name == str(name)

    def can_fire(self, event_name: EventName, *args: Any, **kwargs: Any) -> bool:
        """
        True if firing ``event_name`` with ``args`` would find a transition.
        Guards run, but the halt flags are left as they were. Keyword
        arguments are accepted so a check can mirror :meth:`process_event`;
        guards never see them.
        """
        return self._workflow_engine().can_fire(self._workflow_context(), str(event_name), args)

    @property
    def halted(self) -> bool:
        """True if the last transition was halted by one of its callbacks."""
        return self._workflow_context().halted

    @property
    def halted_because(self) -> Any:
        """The reason passed to the last ``halt`` / ``halt_now``."""
        return self._workflow_context().halted_because

    # -- transitions -----------------------------------------------------------

    def process_event(self, event_name: EventName, *args: Any, **kwargs: Any) -> Any:
        """
        Fire an event.

        :return: False if halted, else the action result or, when the action
            returned None, the result of :meth:`persist_workflow_state`.
        :raises NoTransitionAllowed: If no transition applies in the current state.
        :raises WorkflowError: If the transition targets an undeclared state.
        """
        return self._workflow_engine().process_event(self._workflow_context(), str(event_name), *args, **kwargs)

    def halt(self, reason: Any = None) -> None:
        """Stop the running transition once the current callback returns."""
        self._workflow_context().halt(reason)

    def halt_now(self, reason: Any = None) -> None:
        """Stop the running transition and leave the current callback immediately."""
        self._workflow_context().halt_now(reason)

    # -- host capabilities -----------------------------------------------------

    def load_workflow_state(self) -> Optional[StateName]:
        return getattr(self, self.workflow_state_attribute, None)

    def persist_workflow_state(self, name: StateName) -> Any:
        setattr(self, self.workflow_state_attribute, name)
        return name

    def workflow_callback(self, name: str) -> Optional[Callable[..., Any]]:
        """
        Return the handler called ``name``. The mixin's own methods never
        count, so an event named e.g. ``halt`` does not trigger :meth:`halt`.
        """
        if name in _WORKFLOW_SURFACE:
            return None
        candidate = getattr(self, name, None)
        return candidate if callable(candidate) else None


_WORKFLOW_SURFACE = frozenset(name for name in vars(Workflow) if not name.startswith("__"))
