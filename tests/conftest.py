# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Callable, List

import pytest

from flowstate import Specification, SpecificationBuilder, Workflow


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def make_host() -> Callable[..., type]:
    """Returns a factory building a Workflow host class around a specification."""

    def _factory(spec: Specification, **members: Any) -> type:
        return type("Host", (Workflow,), {"workflow_spec": spec, **members})

    return _factory


@pytest.fixture
def calls() -> List[Any]:
    """A shared list hooks append to, for checking call order."""
    return []


@pytest.fixture
def review_spec(calls) -> Specification:
    """draft -> review -> published, with every hook recording into ``calls``."""
    return (
        SpecificationBuilder()
        .state("draft", on_exit=lambda host, to, event, *args: calls.append(("exit", to, event, args)))
        .event("submit", "review", action=lambda host, *args: calls.append(("action", args)))
        .state("review", on_entry=lambda host, prior, event, *args: calls.append(("entry", prior, event, args)))
        .event("publish", "published")
        .event("reject", "draft")
        .state("published")
        .before_transition(lambda host, f, t, e, *args: calls.append(("before", f, t, e, args)))
        .on_transition(lambda host, f, t, e, *args: calls.append(("on", f, t, e, args)))
        .after_transition(lambda host, f, t, e, *args: calls.append(("after", f, t, e, args)))
        .build()
    )


@pytest.fixture
def review_host(make_host, review_spec, calls):
    """An instance of a host that also records persistence calls."""

    def persist_workflow_state(self, name):
        calls.append(("persist", name))
        return Workflow.persist_workflow_state(self, name)

    return make_host(review_spec, persist_workflow_state=persist_workflow_state)()
