# flowstate/core/callbacks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Invocation helpers shared by guards, actions and hooks.

Every user callable is called through :func:`invoke`, which trims the
supplied arguments to what the callable declares. Extra trailing positional
arguments are dropped; keyword arguments are forwarded only when the
callable can take them.
"""

import inspect
from typing import Any, Callable, Dict, Optional, Tuple

from flowstate.interfaces.protocols import CallbackProvider

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


class _ArityAdapter:
    """
    Internal helper describing which arguments a callable accepts.
    """

    def __init__(self, fn: Callable[..., Any]) -> None:
        try:
            signature = inspect.signature(fn)
        except (TypeError, ValueError):
            # builtins without introspectable signatures get everything
            signature = None

        self.unrestricted = signature is None
        self.var_positional = False
        self.var_keyword = False
        self.positional_names: Tuple[str, ...] = ()
        self.positional_only = 0
        self.keyword_names: Tuple[str, ...] = ()

        if signature is None:
            return

        positional = []
        keyword = []
        for param in signature.parameters.values():
            if param.kind in _POSITIONAL:
                positional.append(param.name)
                if param.kind is inspect.Parameter.POSITIONAL_ONLY:
                    self.positional_only = len(positional)
            elif param.kind is inspect.Parameter.VAR_POSITIONAL:
                self.var_positional = True
            elif param.kind is inspect.Parameter.KEYWORD_ONLY:
                keyword.append(param.name)
            elif param.kind is inspect.Parameter.VAR_KEYWORD:
                self.var_keyword = True
        self.positional_names = tuple(positional)
        self.keyword_names = tuple(keyword)

    def adapt(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> Tuple[Tuple[Any, ...], Dict[str, Any]]:
        """
        Trim ``args`` and ``kwargs`` to the callable's declared parameters.

        :param args: Positional arguments offered by the caller.
        :param kwargs: Keyword arguments offered by the caller.
        :return: The (args, kwargs) pair to actually pass.
        """
        if self.unrestricted:
            return args, kwargs

        if not self.var_positional:
            args = args[: len(self.positional_names)]

        # names already bound positionally must not be passed twice
        bound = set(self.positional_names[self.positional_only : len(args)])
        if self.var_keyword:
            return args, {key: value for key, value in kwargs.items() if key not in bound}

        # positional-only names cannot be passed by keyword at all
        open_names = set(self.positional_names[max(len(args), self.positional_only) :]) | set(self.keyword_names)
        return args, {key: value for key, value in kwargs.items() if key in open_names}


def invoke(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Call ``fn`` with as many of the supplied arguments as it declares.

    A callable declaring more required parameters than supplied is not
    compensated for; Python raises ``TypeError`` as usual.

    :param fn: Guard, action or hook callable.
    :return: Whatever ``fn`` returns.
    """
    call_args, call_kwargs = _ArityAdapter(fn).adapt(args, kwargs)
    return fn(*call_args, **call_kwargs)


def find_callback(host: Any, name: str) -> Optional[Callable[..., Any]]:
    """
    Look up a conventional handler on the host.

    Hosts implementing :class:`CallbackProvider` decide for themselves;
    anything else is searched by attribute name.

    :param host: The object driving the workflow.
    :param name: Handler name, e.g. ``"submit"`` or ``"on_review_entry"``.
    :return: A bound callable, or None.
    """
    if isinstance(host, CallbackProvider):
        return host.workflow_callback(name)
    candidate = getattr(host, name, None)
    return candidate if callable(candidate) else None
