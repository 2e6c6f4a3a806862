from __future__ import annotations

import asyncio
import inspect
import logging
from contextvars import ContextVar, copy_context
from typing import TYPE_CHECKING, Any, TypeVar

from ._definitions import Scope, ScopeName, scope_key
from ._errors import CyclicDependencyError, ResolutionError, UnknownBeanError, UnknownScopeError
from ._module_reader import ModuleReader
from ._scopes import PrototypeScope, SingletonScope
from ._signature import injectable_parameters, materialize_call


logger = logging.getLogger(__name__)

T = TypeVar("T")

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from ._definitions import Module, ModuleConfiguration, ModuleEntry, ModuleObject


# Beans currently being built along the running resolution chain, as (injector id, bean name).
# Every task started by a fan-out inherits a copy of its caller's chain.
_resolution_chain: ContextVar[tuple[tuple[int, str], ...]] = ContextVar("coreinject_resolution_chain", default=())

# Bean being built -> beans its build is currently awaiting, across every chain.
_waits_for: dict[tuple[int, str], list[tuple[int, str]]] = {}


def _find_blocking_path(start: tuple[int, str], chain: tuple[tuple[int, str], ...]) -> list[tuple[int, str]] | None:
    """Follow the waits-for edges from `start` and return the path to the first bean on `chain`, if any."""
    on_chain = set(chain)
    seen = {start}
    pending = [[start]]
    while pending:
        path = pending.pop()
        for awaited in _waits_for.get(path[-1], ()):
            if awaited in on_chain:
                return [*path, awaited]
            if awaited not in seen:
                seen.add(awaited)
                pending.append([*path, awaited])

    return None


def _stop_waiting(waiter: tuple[int, str], key: tuple[int, str]) -> None:
    awaited = _waits_for[waiter]
    awaited.remove(key)
    if not awaited:
        del _waits_for[waiter]


async def resolve_parameters(
    injector: Injector,
    params: Sequence[inspect.Parameter],
    supplied: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Resolve a value for every parameter concurrently.

    Resolution precedence:
    1. value in `supplied`
    2. bean with the parameter's name
    3. default, when no bean of that name is known
    4. error.
    """
    supplied = supplied or {}
    values = await asyncio.gather(*(_resolve_parameter(injector, p, supplied) for p in params))
    return {p.name: value for p, value in zip(params, values)}


async def _resolve_parameter(injector: Injector, p: inspect.Parameter, supplied: Mapping[str, Any]) -> Any:
    if p.name in supplied:
        return supplied[p.name]

    if p.default is not inspect.Parameter.empty and not injector.has_bean(p.name):
        return p.default

    return await injector.get_bean(p.name)


class BeanBuilder:
    """Creates the bean described by a definition, resolving its dependencies from an injector."""

    def __init__(self, injector: Injector, definition: ModuleEntry) -> None:
        self.injector = injector
        self.definition = definition

    async def build(self) -> Any:
        if self.definition.clazz is not None:
            return await self._build_from_class(self.definition.clazz)

        if self.definition.builder is not None:
            return await self._build_from_builder(self.definition.builder)

        msg = f"Bean '{self.definition.name}' has no class, builder or instance bound to it."
        raise ResolutionError(msg)

    async def _build_from_class(self, clazz: type[T]) -> T:
        params = injectable_parameters(clazz)
        values = await resolve_parameters(self.injector, params)

        args, kwargs = materialize_call(params, values)
        logger.debug("Constructing bean '%s' from %s", self.definition.name, clazz.__qualname__)
        return clazz(*args, **kwargs)

    async def _build_from_builder(self, builder: Callable[..., Any]) -> Any:
        params = injectable_parameters(builder)
        values = await resolve_parameters(self.injector, params)

        args, kwargs = materialize_call(params, values)
        logger.debug("Building bean '%s' with builder", self.definition.name)
        result = builder(*args, **kwargs)
        if inspect.isawaitable(result):
            result = await result

        return result


class Injector:
    """Creates object hierarchies with all their dependencies.

    - configured by one or more modules, each registering bean definitions
    - knows the "singleton" and "prototype" scopes; more can be registered
    - optionally chained to a parent injector: beans and scopes not found
      locally are looked up in the parent.
    """

    def __init__(
        self,
        *modules: Module | ModuleObject | list | tuple | Injector,
        parent: Injector | None = None,
    ) -> None:
        if modules and isinstance(modules[0], Injector):
            if parent is not None:
                msg = "The parent injector was given both positionally and as `parent`."
                raise TypeError(msg)
            parent, modules = modules[0], modules[1:]

        self._scopes: dict[str, Scope] = {}
        self._known_beans: dict[str, ModuleEntry] = {}
        self._parent = parent

        self.register_scope(ScopeName.SINGLETON, SingletonScope())
        self.register_scope(ScopeName.PROTOTYPE, PrototypeScope())

        reader = ModuleReader()
        reader.read_configuration(self._self_module, self._known_beans)
        reader.read_modules(modules, self._known_beans)  # type: ignore[arg-type]

    def _self_module(self, config: ModuleConfiguration) -> None:
        config.register("injector").to_instance(self)

    @property
    def parent(self) -> Injector | None:
        return self._parent

    async def get_bean(self, name: str) -> Any:
        """Get the bean instance, creating it through its scope if needed."""
        definition = self._known_beans.get(name)

        if definition is None:
            if self._parent is None:
                raise UnknownBeanError(name, self._known_bean_names())
            return await self._parent.get_bean(name)

        if definition.has_instance:
            return definition.instance

        chain = _resolution_chain.get()
        key = (id(self), name)
        if key in chain:
            raise CyclicDependencyError([bean for _, bean in chain] + [name])

        scope = self.find_scope(definition.scope)

        # waits-for edge: the bean being built on this chain now awaits `key`
        waiter = chain[-1] if chain else None
        if waiter is not None:
            _waits_for.setdefault(waiter, []).append(key)

        try:
            if waiter is not None:
                blocking = _find_blocking_path(key, chain)
                if blocking is not None:
                    raise CyclicDependencyError([bean for _, bean in chain] + [bean for _, bean in blocking])

            # the extended chain only exists in a copied context
            context = copy_context()
            context.run(_resolution_chain.set, (*chain, key))
            build = context.run(
                asyncio.ensure_future,
                scope.get(name, BeanBuilder(self, definition), definition.scope_destroy),
            )
            return await build
        finally:
            if waiter is not None:
                _stop_waiting(waiter, key)

    def has_bean(self, name: str) -> bool:
        """Report whether this injector or one of its parents knows a bean with the given name."""
        if name in self._known_beans:
            return True

        if self._parent is None:
            return False

        return self._parent.has_bean(name)

    async def get_beans(self, *names: str) -> dict[str, Any]:
        """Resolve all the given bean names concurrently, returning them by name."""
        values = await asyncio.gather(*(self.get_bean(name) for name in names))
        return dict(zip(names, values))

    def find_scope(self, name: str | ScopeName) -> Scope:
        key = scope_key(name)
        scope = self._scopes.get(key)
        if scope is not None:
            return scope

        if self._parent is not None:
            return self._parent.find_scope(key)

        raise UnknownScopeError(key)

    def _known_bean_names(self) -> set[str]:
        names = self._parent._known_bean_names() if self._parent is not None else set()  # noqa: SLF001
        names.update(self._known_beans)
        return names

    async def get_by_type(self, cls: type[T]) -> T | None:
        """Find the first bean bound to an instance of `cls`.

        Only beans bound with `to_instance` in this injector are considered.
        Beans built by a class or builder are not, even if a scope already
        holds them.
        """
        return next(
            (d.instance for d in self._known_beans.values() if d.has_instance and isinstance(d.instance, cls)),
            None,
        )

    async def get_all_by_type(self, cls: type[T]) -> list[T]:
        """Find all the beans bound to an instance of `cls`.

        Same limitation as `get_by_type`: the instances must already exist
        as `to_instance` bindings of this injector.
        """
        return [d.instance for d in self._known_beans.values() if d.has_instance and isinstance(d.instance, cls)]

    def register_scope(self, name: str | ScopeName, scope: Scope) -> None:
        if not isinstance(scope, Scope):
            msg = f"{type(scope).__name__} does not implement the Scope protocol (get, destroy)"
            raise TypeError(msg)

        key = scope_key(name)
        logger.debug("Registering scope '%s' (%s)", key, type(scope).__name__)
        self._scopes[key] = scope

    def unregister_scope(self, name: str | ScopeName) -> None:
        key = scope_key(name)
        if self._scopes.pop(key, None) is not None:
            logger.debug("Unregistered scope '%s'", key)

    def destroy(self, scope_name: str | ScopeName) -> None:
        """Destroy the scope with the given name here and in every parent that has one."""
        key = scope_key(scope_name)
        scope = self._scopes.get(key)
        try:
            if scope is not None:
                logger.debug("Destroying scope '%s'", key)
                scope.destroy()
        finally:
            if self._parent is not None:
                self._parent.destroy(key)
