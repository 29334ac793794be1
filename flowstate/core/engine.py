# flowstate/core/engine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Transition execution for a single host.

One ``process_event`` call runs, in order: guard resolution, halt reset,
target validation, ``before_transition``, the action (with ``on_error``
recovery), the halt check, ``on_transition``, the from state's exit hook,
persistence, the to state's entry hook and ``after_transition``.
A halt seen at either halt check aborts the cycle before anything is
persisted.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Sequence, Tuple

from flowstate.core.callbacks import find_callback, invoke
from flowstate.core.errors import NoTransitionAllowed, TransitionHalted, WorkflowError
from flowstate.core.guards import GuardEvaluator
from flowstate.core.specification import Specification
from flowstate.core.states import State
from flowstate.core.transitions import Transition
from flowstate.interfaces.types import EventName

if TYPE_CHECKING:
    from flowstate.runtime.context import RuntimeContext

logger = logging.getLogger(__name__)


class TransitionEngine:
    """
    Runs events against a :class:`Specification` on behalf of host objects.
    The engine itself is stateless; everything mutable lives in the
    :class:`RuntimeContext` passed to each call, so one engine can serve
    every instance of a host class.
    """

    def __init__(self, spec: Specification, guard_evaluator: Optional[GuardEvaluator] = None) -> None:
        """
        :param spec: The machine definition to execute.
        :param guard_evaluator: Strategy for picking transitions; defaults to
            first-applicable in declaration order.
        """
        self._spec = spec
        self._guards = guard_evaluator or GuardEvaluator()

    @property
    def spec(self) -> Specification:
        return self._spec

    def resolve(self, context: "RuntimeContext", event_name: EventName, args: Sequence[Any]) -> Optional[Transition]:
        """Return the transition ``event_name`` would fire right now, or None."""
        state = context.current_state(self._spec)
        return self._guards.first_applicable(state, event_name, context.host, args)

    def can_fire(self, context: "RuntimeContext", event_name: EventName, args: Sequence[Any]) -> bool:
        """
        Check whether ``event_name`` has an applicable transition without
        changing the host's halt flags.
        """
        with context.preserved_halt():
            return self.resolve(context, event_name, args) is not None

    def process_event(self, context: "RuntimeContext", event_name: EventName, *args: Any, **kwargs: Any) -> Any:
        """
        Fire ``event_name`` for the context's host.

        :param context: Runtime record of the host.
        :param event_name: Event to fire.
        :param args: Passed on to guards, the action and every hook.
        :param kwargs: Passed on to the action and every hook that accepts them.
        :return: False if the transition was halted; otherwise the action's
            result, or the persistence result when the action returned None.
        :raises NoTransitionAllowed: No applicable transition in the current state.
        :raises WorkflowError: The chosen transition targets an undeclared state.
        """
        host = context.host
        from_state = context.current_state(self._spec)
        transition = self._guards.first_applicable(from_state, event_name, host, args)
        if transition is None:
            logger.debug("No transition for event %s in state %s", event_name, from_state.name)
            raise NoTransitionAllowed(event_name, from_state.name)

        context.reset_halt()

        to_state = self._spec.state_for(transition.transitions_to)
        if to_state is None:
            raise WorkflowError(
                f"Event[{transition.name}]'s transitions_to[{transition.transitions_to}] is not a declared state."
            )

        hook_args: Tuple[Any, ...] = (from_state.name, to_state.name, event_name) + tuple(args)

        self._run_hook(context, self._spec.before_transition, hook_args, kwargs)
        if context.halted:
            logger.debug("Event %s halted before transition: %r", event_name, context.halted_because)
            return False

        try:
            action_result = self._run_action(context, transition, args, kwargs)
        except Exception as error:
            if self._spec.on_error is None:
                raise
            logger.warning("Action for event %s failed, handing %r to on_error", event_name, error)
            self._call(self._spec.on_error, (host, error) + hook_args, kwargs)
            context.halt(str(error))
            action_result = None

        if context.halted:
            logger.debug("Event %s halted: %r", event_name, context.halted_because)
            return False

        self._run_hook(context, self._spec.on_transition, hook_args, kwargs)
        self._run_exit(context, from_state, to_state, event_name, args, kwargs)

        try:
            persist_result = host.persist_workflow_state(to_state.name)
        except TransitionHalted as halted:
            logger.debug("Persistence for event %s halted: %r", event_name, halted.reason)
            persist_result = None

        self._run_entry(context, to_state, from_state, event_name, args, kwargs)
        self._run_hook(context, self._spec.after_transition, hook_args, kwargs)

        logger.debug("Event %s moved %s to %s", event_name, from_state.name, to_state.name)
        return persist_result if action_result is None else action_result

    @staticmethod
    def _call(fn: Callable[..., Any], args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Any:
        # halt_now has already recorded the halt; only the unwind stops here
        try:
            return invoke(fn, *args, **kwargs)
        except TransitionHalted as halted:
            logger.debug("Callback %r halted: %r", fn, halted.reason)
            return None

    def _run_hook(
        self,
        context: "RuntimeContext",
        hook: Optional[Callable[..., Any]],
        hook_args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> None:
        if hook is not None:
            self._call(hook, (context.host,) + hook_args, kwargs)

    def _run_action(
        self, context: "RuntimeContext", transition: Transition, args: Sequence[Any], kwargs: Dict[str, Any]
    ) -> Any:
        if transition.action is not None:
            return self._call(transition.action, (context.host,) + tuple(args), kwargs)
        callback = find_callback(context.host, transition.name)
        if callback is not None:
            return self._call(callback, tuple(args), kwargs)
        return None

    def _run_exit(
        self,
        context: "RuntimeContext",
        state: Optional[State],
        new_state: State,
        event_name: EventName,
        args: Sequence[Any],
        kwargs: Dict[str, Any],
    ) -> None:
        if state is None:
            return
        self._run_state_hook(
            context, state.on_exit, state.exit_callback_name, (new_state.name, event_name) + tuple(args), kwargs
        )

    def _run_entry(
        self,
        context: "RuntimeContext",
        state: State,
        prior_state: State,
        event_name: EventName,
        args: Sequence[Any],
        kwargs: Dict[str, Any],
    ) -> None:
        self._run_state_hook(
            context, state.on_entry, state.entry_callback_name, (prior_state.name, event_name) + tuple(args), kwargs
        )

    def _run_state_hook(
        self,
        context: "RuntimeContext",
        closure: Optional[Callable[..., Any]],
        callback_name: str,
        hook_args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> None:
        # a closure declared on the state replaces the host's conventional method
        if closure is not None:
            self._call(closure, (context.host,) + hook_args, kwargs)
            return
        callback = find_callback(context.host, callback_name)
        if callback is not None:
            self._call(callback, hook_args, kwargs)
