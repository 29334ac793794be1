# flowstate/core/specification.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flowstate.core.errors import WorkflowError
from flowstate.core.states import State
from flowstate.core.transitions import EventTable, Transition
from flowstate.interfaces.types import (
    ActionFunc,
    ErrorHook,
    EventName,
    Guard,
    StateHook,
    StateName,
    TransitionHook,
)

_STATE_KEYS = frozenset({"name", "events", "on_entry", "on_exit"})
_EVENT_KEYS = frozenset({"name", "transitions_to", "target", "guard", "action"})
_HOOK_KEYS = ("before_transition", "on_transition", "after_transition", "on_error")


@dataclass(frozen=True, eq=False)
class Specification:
    """
    Immutable description of a machine: its states in declaration order and
    the process-wide transition hooks. Built once per host class and shared
    by every instance of it.

    Use :class:`SpecificationBuilder` or :meth:`from_dict` rather than
    calling the constructor directly.
    """

    states: Mapping[StateName, State]
    before_transition: Optional[TransitionHook] = None
    on_transition: Optional[TransitionHook] = None
    after_transition: Optional[TransitionHook] = None
    on_error: Optional[ErrorHook] = None

    def __post_init__(self) -> None:
        if not self.states:
            raise WorkflowError("A workflow specification needs at least one state")
        # freeze a private copy so later edits to the caller's dict are not seen
        object.__setattr__(self, "states", MappingProxyType(dict(self.states)))

    @property
    def initial_state(self) -> State:
        """The first declared state, used until the host persists another one."""
        return next(iter(self.states.values()))

    def state_for(self, name: Optional[StateName]) -> Optional[State]:
        """
        Look up a state by name.

        :param name: State name, may be None.
        :return: The State, or None if it is not declared.
        """
        if name is None:
            return None
        return self.states.get(str(name))

    def event_names(self) -> List[EventName]:
        """Every distinct event name, in first-declaration order across states."""
        names: Dict[EventName, None] = {}
        for state in self.states.values():
            for name in state.events:
                names.setdefault(name, None)
        return list(names)

    def transitions_for(self, event_name: EventName) -> List[Tuple[State, Transition]]:
        """
        Enumerate the logical event: every (source state, transition) pair
        declared under ``event_name``.
        """
        return [
            (state, transition)
            for state in self.states.values()
            for transition in state.events.get(event_name, ())
        ]

    def validate(self) -> List[str]:
        """
        Report transitions whose target is not a declared state.

        Building never runs this check; the engine raises ``WorkflowError``
        when such a transition actually fires.
        """
        problems = []
        for state in self.states.values():
            for transition in state.events.flat():
                if transition.transitions_to not in self.states:
                    problems.append(
                        f"Event[{transition.name}] of state {state.name} transitions to "
                        f"undeclared state {transition.transitions_to}"
                    )
        return problems

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> "Specification":
        """
        Build a specification from plain data.

        Example::

            Specification.from_dict({
                "states": [
                    {"name": "off", "events": [{"name": "turn_on", "transitions_to": "on"}]},
                    {"name": "on"},
                ],
                "on_error": log_failure,
            })

        :param config: Mapping with a ``states`` list and optional hooks.
        :raises WorkflowError: On unknown keys or missing names.
        """
        unknown = set(config) - {"states", *_HOOK_KEYS}
        if unknown:
            raise WorkflowError(f"Unknown workflow keys: {', '.join(sorted(unknown))}")

        builder = SpecificationBuilder()
        for state_config in config.get("states", ()):
            _check_keys(state_config, _STATE_KEYS, "state")
            builder.state(
                _require(state_config, "name", "state"),
                on_entry=state_config.get("on_entry"),
                on_exit=state_config.get("on_exit"),
            )
            for event_config in state_config.get("events", ()):
                _check_keys(event_config, _EVENT_KEYS, "event")
                target = event_config.get("transitions_to", event_config.get("target"))
                if target is None:
                    raise WorkflowError(f"Event {event_config.get('name')} has no transitions_to")
                builder.event(
                    _require(event_config, "name", "event"),
                    target,
                    guard=event_config.get("guard"),
                    action=event_config.get("action"),
                )

        for hook in _HOOK_KEYS:
            if config.get(hook) is not None:
                getattr(builder, hook)(config[hook])
        return builder.build()


def _check_keys(config: Mapping[str, Any], allowed: frozenset, kind: str) -> None:
    unknown = set(config) - allowed
    if unknown:
        raise WorkflowError(f"Unknown {kind} keys: {', '.join(sorted(unknown))}")


def _require(config: Mapping[str, Any], key: str, kind: str) -> Any:
    if config.get(key) is None:
        raise WorkflowError(f"Every {kind} needs a {key}")
    return config[key]


@dataclass
class _StateDraft:
    name: StateName
    on_entry: Optional[StateHook] = None
    on_exit: Optional[StateHook] = None
    transitions: List[Transition] = field(default_factory=list)

    def freeze(self) -> State:
        return State(
            name=self.name,
            events=EventTable(self.transitions),
            on_entry=self.on_entry,
            on_exit=self.on_exit,
        )


class SpecificationBuilder:
    """
    Fluent builder for :class:`Specification`.

    Events attach to the most recently declared state::

        spec = (
            SpecificationBuilder()
            .state("off")
            .event("turn_on", "on", guard="sufficient_battery_level")
            .event("turn_on", "low_battery")
            .state("on")
            .state("low_battery")
            .build()
        )
    """

    def __init__(self) -> None:
        self._states: Dict[StateName, _StateDraft] = {}
        self._current: Optional[_StateDraft] = None
        self._hooks: Dict[str, Any] = {}

    def state(
        self,
        name: StateName,
        on_entry: Optional[StateHook] = None,
        on_exit: Optional[StateHook] = None,
    ) -> "SpecificationBuilder":
        """
        Declare a state. The first declared state is the initial one.

        :param name: Unique state name.
        :param on_entry: Called as ``on_entry(host, from_state, event, *args)``.
        :param on_exit: Called as ``on_exit(host, to_state, event, *args)``.
        :raises WorkflowError: If the name is already declared.
        """
        name = str(name)
        if name in self._states:
            raise WorkflowError(f"State {name} is declared twice")
        self._current = _StateDraft(name=name, on_entry=on_entry, on_exit=on_exit)
        self._states[name] = self._current
        return self

    def event(
        self,
        name: EventName,
        transitions_to: StateName,
        guard: Optional[Guard] = None,
        action: Optional[ActionFunc] = None,
    ) -> "SpecificationBuilder":
        """
        Declare a transition out of the current state. The same event name
        may be declared several times; guards are tried in declaration order.

        :param name: Event name.
        :param transitions_to: Target state name, checked when the transition fires.
        :param guard: Host method name, or a predicate called as ``guard(host, *args)``.
        :param action: Called as ``action(host, *args)``.
        """
        if self._current is None:
            raise WorkflowError(f"Event {name} declared before any state")
        self._current.transitions.append(
            Transition(name=str(name), transitions_to=str(transitions_to), guard=guard, action=action)
        )
        return self

    def before_transition(self, hook: TransitionHook) -> "SpecificationBuilder":
        """``hook(host, from_state, to_state, event, *args)``; may halt the transition."""
        self._hooks["before_transition"] = hook
        return self

    def on_transition(self, hook: TransitionHook) -> "SpecificationBuilder":
        self._hooks["on_transition"] = hook
        return self

    def after_transition(self, hook: TransitionHook) -> "SpecificationBuilder":
        self._hooks["after_transition"] = hook
        return self

    def on_error(self, hook: ErrorHook) -> "SpecificationBuilder":
        """``hook(host, error, from_state, to_state, event, *args)`` for action failures."""
        self._hooks["on_error"] = hook
        return self

    def build(self) -> Specification:
        """Freeze everything declared so far into a :class:`Specification`."""
        states = {name: draft.freeze() for name, draft in self._states.items()}
        return Specification(states=states, **self._hooks)

