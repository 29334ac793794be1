# tests/unit/test_guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest
from hypothesis import given
from hypothesis import strategies as st

from flowstate.core.errors import TransitionHalted, WorkflowError
from flowstate.core.guards import GuardEvaluator
from flowstate.core.states import State
from flowstate.core.transitions import EventTable, Transition


class Device:
    def __init__(self, battery):
        self.battery = battery
        self.seen = []

    def charged(self):
        return self.battery > 10

    def adapter_or_charged(self, power_adapter):
        self.seen.append(power_adapter)
        return power_adapter or self.battery > 10


def fixed(result):
    return lambda host: result


@pytest.fixture
def evaluator():
    return GuardEvaluator()


def test_unguarded_transition_is_applicable(evaluator):
    assert evaluator.is_applicable(Transition("go", "b"), Device(0), ()) is True


def test_named_guard_ignores_extra_arguments(evaluator):
    transition = Transition("go", "b", guard="charged")
    assert evaluator.is_applicable(transition, Device(50), ("extra", 1)) is True
    assert evaluator.is_applicable(transition, Device(5), ("extra", 1)) is False


def test_named_guard_receives_call_arguments(evaluator):
    device = Device(0)
    transition = Transition("go", "b", guard="adapter_or_charged")
    assert evaluator.is_applicable(transition, device, (True, "ignored")) is True
    assert device.seen == [True]


def test_named_guard_is_looked_up_on_every_call(evaluator):
    device = Device(50)
    transition = Transition("go", "b", guard="charged")
    assert evaluator.is_applicable(transition, device, ()) is True
    device.charged = lambda: False
    assert evaluator.is_applicable(transition, device, ()) is False


def test_unknown_named_guard_is_a_workflow_error(evaluator):
    with pytest.raises(WorkflowError, match="Guard missing of event go is not a method of Device"):
        evaluator.is_applicable(Transition("go", "b", guard="missing"), Device(0), ())


def test_predicate_guard_receives_host_first(evaluator):
    received = []

    def guard(host, power_adapter=None):
        received.append((host, power_adapter))
        return True

    device = Device(0)
    assert evaluator.is_applicable(Transition("go", "b", guard=guard), device, ("adapter", "extra")) is True
    assert received == [(device, "adapter")]


@pytest.mark.parametrize("result, expected", [(1, True), ("yes", True), ([0], True), (0, False), ("", False), (None, False)])
def test_guard_truthiness(evaluator, result, expected):
    assert evaluator.is_applicable(Transition("go", "b", guard=fixed(result)), Device(0), ()) is expected


def test_halting_guard_is_not_applicable(evaluator):
    def guard(host):
        raise TransitionHalted("not now")

    assert evaluator.is_applicable(Transition("go", "b", guard=guard), Device(0), ()) is False


def test_first_applicable_skips_failing_guards(evaluator):
    state = State(
        "off",
        events=EventTable(
            [
                Transition("turn_on", "on", guard="charged"),
                Transition("turn_on", "low_battery", guard=lambda device: device.battery > 0),
            ]
        ),
    )
    assert evaluator.first_applicable(state, "turn_on", Device(50), ()).transitions_to == "on"
    assert evaluator.first_applicable(state, "turn_on", Device(5), ()).transitions_to == "low_battery"
    assert evaluator.first_applicable(state, "turn_on", Device(0), ()) is None


def test_first_applicable_unknown_event(evaluator):
    assert evaluator.first_applicable(State("off"), "turn_on", Device(0), ()) is None


def test_first_applicable_stops_at_first_match(evaluator):
    evaluated = []

    def guard(label):
        def check(host):
            evaluated.append(label)
            return True

        return check

    state = State("a", events=EventTable([Transition("go", "b", guard=guard(1)), Transition("go", "c", guard=guard(2))]))
    assert evaluator.first_applicable(state, "go", Device(0), ()).transitions_to == "b"
    assert evaluated == [1]


@pytest.mark.property
@given(st.lists(st.booleans(), min_size=1, max_size=8))
def test_first_passing_guard_wins(outcomes):
    transitions = [Transition("go", f"s{index}", guard=fixed(ok)) for index, ok in enumerate(outcomes)]
    state = State("start", events=EventTable(transitions))

    expected = next((t for t, ok in zip(transitions, outcomes) if ok), None)
    assert GuardEvaluator().first_applicable(state, "go", Device(0), ()) is expected
