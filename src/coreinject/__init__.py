"""Asynchronous dependency injection runtime.

Beans are declared by name in modules and built on demand by an Injector.
A bean's dependencies are the beans named like the parameters of its class
constructor or builder function; they are resolved concurrently.

Exports:
- `Injector`: registry and resolution engine, optionally chained to a parent injector.
- `ModuleEntry`, `ModuleObject`, `ModuleReader`: declaring and reading bean definitions.
- `Scope`, `SingletonScope`, `PrototypeScope`, `ScopeName`: instance lifecycle policies.
- `injector_call`, `injector_invoke`: call any function with its parameters taken from an injector.
"""

from ._definitions import ModuleConfiguration, ModuleEntry, ModuleObject, ObjectFactory, Scope, ScopeName
from ._errors import AbstractMethodError, CyclicDependencyError, ResolutionError, UnknownBeanError, UnknownScopeError
from ._injector import BeanBuilder, Injector
from ._invoke import injector_call, injector_invoke
from ._module_reader import ModuleReader
from ._scopes import PrototypeScope, SingletonScope


__all__ = [
    "AbstractMethodError",
    "BeanBuilder",
    "CyclicDependencyError",
    "Injector",
    "ModuleConfiguration",
    "ModuleEntry",
    "ModuleObject",
    "ModuleReader",
    "ObjectFactory",
    "PrototypeScope",
    "ResolutionError",
    "Scope",
    "ScopeName",
    "SingletonScope",
    "UnknownBeanError",
    "UnknownScopeError",
    "injector_call",
    "injector_invoke",
]
