from __future__ import annotations

import inspect
import types
from typing import TYPE_CHECKING, Any

from ._injector import resolve_parameters
from ._signature import describe, injectable_parameters, materialize_call, positional_parameters


if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from ._injector import Injector


async def injector_call(injector: Injector, fn: Callable[..., Any], *params: Any, **overrides: Any) -> Any:
    """Call `fn`, filling its parameters with beans from the injector.

    `params` are passed as the first positional arguments and `overrides` by
    parameter name; the injector is not asked for those. Example:

      await injector_call(injector, handle_request, request)
    """
    return await _call(injector, fn, params, overrides)


async def injector_invoke(
    injector: Injector,
    receiver: object,
    fn: Callable[..., Any],
    *params: Any,
    **overrides: Any,
) -> Any:
    """Like `injector_call`, with `fn` bound to `receiver` as its first argument."""
    return await _call(injector, types.MethodType(fn, receiver), params, overrides)


async def _call(
    injector: Injector,
    fn: Callable[..., Any],
    params: Sequence[Any],
    overrides: Mapping[str, Any],
) -> Any:
    injectable = injectable_parameters(fn)
    supplied = _bind_supplied(fn, injectable, params, overrides)

    values = await resolve_parameters(injector, injectable, supplied)

    args, kwargs = materialize_call(injectable, values)
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result

    return result


def _bind_supplied(
    fn: Callable[..., Any],
    injectable: Sequence[inspect.Parameter],
    params: Sequence[Any],
    overrides: Mapping[str, Any],
) -> dict[str, Any]:
    positional = positional_parameters(injectable)
    if len(params) > len(positional):
        msg = f"{describe(fn)} takes {len(positional)} positional parameter(s) but {len(params)} were given"
        raise TypeError(msg)

    supplied = {p.name: value for p, value in zip(positional, params)}

    known = {p.name for p in injectable}
    for name, value in overrides.items():
        if name not in known:
            msg = f"{describe(fn)} has no parameter named '{name}'"
            raise TypeError(msg)
        if name in supplied:
            msg = f"{describe(fn)} got multiple values for parameter '{name}'"
            raise TypeError(msg)
        supplied[name] = value

    return supplied
