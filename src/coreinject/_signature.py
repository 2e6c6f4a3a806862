from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence


_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def injectable_parameters(fn: Callable[..., Any]) -> list[inspect.Parameter]:
    """Return the parameters of `fn` that are filled by the injector, in declaration order.

    For a class this is its constructor signature without `self`.
    `*args` and `**kwargs` are never injected.
    """
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as e:
        msg = f"Cannot read the parameters of {describe(fn)}: {e}"
        raise TypeError(msg) from e

    return [p for p in sig.parameters.values() if p.kind not in _VARIADIC]


def positional_parameters(params: Sequence[inspect.Parameter]) -> list[inspect.Parameter]:
    return [p for p in params if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)]


def materialize_call(
    params: Sequence[inspect.Parameter], values: Mapping[str, Any]
) -> tuple[list[Any], dict[str, Any]]:
    """Split resolved values into call arguments, keeping declaration order.

    Every parameter in `params` must have a value.
    """
    args: list[Any] = []
    kwargs: dict[str, Any] = {}

    for p in params:
        if p.kind is p.KEYWORD_ONLY:
            kwargs[p.name] = values[p.name]
        else:
            args.append(values[p.name])

    return args, kwargs


def describe(fn: object) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)
