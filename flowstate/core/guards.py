# flowstate/core/guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import Any, Optional, Sequence

from flowstate.core.callbacks import invoke
from flowstate.core.errors import TransitionHalted, WorkflowError
from flowstate.core.states import State
from flowstate.core.transitions import Transition
from flowstate.interfaces.types import EventName

logger = logging.getLogger(__name__)


class GuardEvaluator:
    """
    Decides which of a state's transitions applies to a given call. Guards
    are tried in declaration order and the first one that passes wins, even
    if later ones would pass too.
    """

    def is_applicable(self, transition: Transition, host: Any, args: Sequence[Any]) -> bool:
        """
        Evaluate one transition's guard.

        A ``str`` guard names a host method, looked up afresh on every call
        and called with the trailing ``args`` it declares. A callable guard is
        called as ``guard(host, *args)`` under the same policy. Any truthy
        result counts as a pass.

        :param transition: Candidate transition.
        :param host: The object driving the workflow.
        :param args: Positional arguments of the triggering call.
        :raises WorkflowError: If a named guard does not resolve to a method.
        """
        guard = transition.guard
        if guard is None:
            return True

        try:
            if isinstance(guard, str):
                method = getattr(host, guard, None)
                if not callable(method):
                    raise WorkflowError(
                        f"Guard {guard} of event {transition.name} is not a method of {type(host).__name__}"
                    )
                result = invoke(method, *args)
            else:
                result = invoke(guard, host, *args)
        except TransitionHalted:
            logger.debug("Guard of event %s halted; treating transition as not applicable", transition.name)
            return False
        return bool(result)

    def first_applicable(
        self, state: State, event_name: EventName, host: Any, args: Sequence[Any]
    ) -> Optional[Transition]:
        """
        Return the first transition of ``state`` for ``event_name`` whose guard
        passes, or None if there is none (including when the state does not
        declare the event at all).
        """
        for transition in state.events.get(event_name, ()):
            if self.is_applicable(transition, host, args):
                return transition
        return None
