# tests/integration/test_conditionals.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Guarded transitions sharing an event name, driven through the Workflow mixin.
"""

import pytest

from flowstate import NoTransitionAllowed, SpecificationBuilder, Workflow


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


class AdapterDevice(Workflow):
    """Named guards that take event arguments, or ignore them."""

    workflow_spec = (
        SpecificationBuilder()
        .state("off")
        .event("turn_on", "on", guard="sufficient_battery_level")
        .event("turn_on", "low_battery")
        .state("on")
        .event("check", "low_battery", guard="check_low_battery")
        .event("check", "on")
        .state("low_battery")
        .build()
    )

    def __init__(self, battery):
        self.battery = battery

    def sufficient_battery_level(self, power_adapter):
        return power_adapter or self.battery > 10

    def check_low_battery(self):
        return None


class PredicateDevice(Workflow):
    """The same machine with inline predicates instead of named guards."""

    workflow_spec = (
        SpecificationBuilder()
        .state("off")
        .event("turn_on", "on", guard=lambda device, power_adapter: power_adapter or device.battery > 10)
        .event("turn_on", "low_battery")
        .state("on")
        .event("check", "low_battery", guard=lambda device: False)
        .event("check", "on")
        .state("low_battery")
        .build()
    )

    def __init__(self, battery):
        self.battery = battery


def test_empty_battery_cannot_turn_on():
    device = Device(0)
    assert device.can_fire("turn_on") is False
    with pytest.raises(NoTransitionAllowed):
        device.process_event("turn_on")
    assert device.is_state("off")


def test_weak_battery_falls_back_to_low_battery():
    device = Device(5)
    assert device.can_fire("turn_on") is True
    device.process_event("turn_on")
    assert device.is_state("low_battery")
    assert device.is_state("on") is False


def test_charged_battery_turns_on():
    device = Device(50)
    assert device.can_fire("turn_on") is True
    device.process_event("turn_on")
    assert device.is_state("on")


@pytest.mark.parametrize("device_class", [AdapterDevice, PredicateDevice])
def test_guards_see_event_arguments(device_class):
    device = device_class(5)
    device.process_event("turn_on", True)
    assert device.is_state("on")


@pytest.mark.parametrize("device_class", [AdapterDevice, PredicateDevice])
def test_guards_without_parameters_ignore_event_arguments(device_class):
    device = device_class(5)
    device.process_event("turn_on", True)
    device.process_event("check", "foo")
    assert device.is_state("on")


@pytest.mark.parametrize("device_class", [AdapterDevice, PredicateDevice])
def test_guard_argument_false_uses_fallback(device_class):
    device = device_class(5)
    assert device.can_fire("turn_on", False) is True
    device.process_event("turn_on", False)
    assert device.is_state("low_battery")
