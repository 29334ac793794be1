# flowstate/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from flowstate.interfaces.types import ActionFunc, EventName, Guard, StateName


@dataclass(frozen=True)
class Transition:
    """
    One outgoing edge of a state: fired by the event ``name``, it moves the
    host to ``transitions_to`` if its guard accepts the call.

    ``transitions_to`` is only checked against the declared states when the
    transition fires, so specifications may be written in any order.
    """

    name: EventName
    transitions_to: StateName
    guard: Optional[Guard] = None
    action: Optional[ActionFunc] = None

    def __post_init__(self) -> None:
        if self.guard is not None and not (isinstance(self.guard, str) or callable(self.guard)):
            raise TypeError(f"Guard for event {self.name} must be a method name or a callable")
        if self.action is not None and not callable(self.action):
            raise TypeError(f"Action for event {self.name} must be callable")

    def __str__(self) -> str:
        return self.name


class EventTable(Mapping[EventName, Tuple[Transition, ...]]):
    """
    Read-only, ordered mapping of event name to the transitions a single state
    declares for it. Transitions sharing a name keep their declaration order,
    which is the order guards are tried in.
    """

    def __init__(self, transitions: Iterable[Transition] = ()) -> None:
        """
        :param transitions: Transitions in declaration order.
        """
        grouped: Dict[EventName, List[Transition]] = {}
        for transition in transitions:
            grouped.setdefault(transition.name, []).append(transition)
        self._table = MappingProxyType({name: tuple(group) for name, group in grouped.items()})

    def __getitem__(self, name: EventName) -> Tuple[Transition, ...]:
        return self._table[name]

    def __iter__(self) -> Iterator[EventName]:
        return iter(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __repr__(self) -> str:
        return f"EventTable({list(self._table)!r})"

    def flat(self) -> Iterator[Transition]:
        """Yield every transition of the state, grouped by event name."""
        for group in self._table.values():
            yield from group
