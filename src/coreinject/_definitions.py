from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

from ._errors import AbstractMethodError


if TYPE_CHECKING:
    from collections.abc import Callable

    # A module is any callable receiving a ModuleConfiguration
    Module = Callable[["ModuleConfiguration"], None]


class ScopeName(str, Enum):
    SINGLETON = "singleton"
    PROTOTYPE = "prototype"


def scope_key(name: str | ScopeName) -> str:
    if isinstance(name, ScopeName):
        return name.value
    return name


_UNSET: Final = object()


@dataclass
class ModuleEntry:
    """Configuration of a single bean.

    A bean is built from exactly one of:
    - a class (`to`), whose constructor parameters name its dependencies
    - a builder callable (`to_builder`), whose parameters name its dependencies
    - a pre-built instance (`to_instance`), returned as is.

    When both a class and a builder are set, the class wins.
    """

    name: str
    clazz: type | None = None
    builder: Callable[..., Any] | None = None
    instance: Any = _UNSET
    scope: str = ScopeName.SINGLETON.value
    scope_destroy: Callable[[Any], object] | None = None

    @property
    def has_instance(self) -> bool:
        return self.instance is not _UNSET

    def to(self, clazz: type) -> ModuleEntry:
        if not inspect.isclass(clazz):
            msg = f"Bean '{self.name}' must be bound to a class, got {clazz!r}. Use to_builder() for callables."
            raise TypeError(msg)
        self.clazz = clazz
        return self

    def to_builder(self, builder: Callable[..., Any]) -> ModuleEntry:
        if not callable(builder):
            msg = f"Builder for bean '{self.name}' must be callable, got {builder!r}"
            raise TypeError(msg)
        self.builder = builder
        return self

    def to_instance(self, instance: object) -> ModuleEntry:
        self.instance = instance
        return self

    def in_scope(self, scope: str | ScopeName) -> ModuleEntry:
        self.scope = scope_key(scope)
        return self

    def on_scope_destroy(self, callback: Callable[[Any], object]) -> ModuleEntry:
        self.scope_destroy = callback
        return self


class ModuleConfiguration(Protocol):
    def register(self, name: str) -> ModuleEntry: ...


class ModuleObject:
    """A module written as a class.

    Subclasses override `configure`. The object can be passed to an Injector
    directly, or turned into a plain module with `get_module`.
    """

    def configure(self, config: ModuleConfiguration) -> None:
        msg = f"{type(self).__name__}.configure() must be overridden"
        raise AbstractMethodError(msg)

    def get_module(self) -> Module:
        return self.configure


@runtime_checkable
class ObjectFactory(Protocol):
    """Passed to a Scope that doesn't hold the requested bean and needs to create it."""

    async def build(self) -> Any: ...


@runtime_checkable
class Scope(Protocol):
    """Lifecycle policy deciding whether a built bean is reused."""

    async def get(
        self,
        name: str,
        factory: ObjectFactory,
        on_destroy: Callable[[Any], object] | None = None,
    ) -> Any: ...

    def destroy(self) -> None: ...
