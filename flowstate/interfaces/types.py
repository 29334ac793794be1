# flowstate/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Union

StateName = str
EventName = str

# Callback Types
GuardPredicate = Callable[..., Any]
Guard = Union[str, GuardPredicate]
ActionFunc = Callable[..., Any]
TransitionHook = Callable[..., None]
ErrorHook = Callable[..., None]
StateHook = Callable[..., None]
