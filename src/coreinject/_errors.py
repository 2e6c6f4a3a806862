from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from collections.abc import Iterable


class ResolutionError(RuntimeError):
    pass


class UnknownBeanError(ResolutionError, LookupError):
    """Raised when a bean name is not known to an injector nor to any of its parents."""

    def __init__(self, name: str, known_beans: Iterable[str]) -> None:
        self.name = name
        self.known_beans = sorted(known_beans)
        msg = f"Unknown bean '{name}' defined in injector. Known beans are: {', '.join(self.known_beans)}"
        super().__init__(msg)


class UnknownScopeError(ResolutionError, LookupError):
    def __init__(self, scope_name: str) -> None:
        self.scope_name = scope_name
        msg = f"Invalid scope name '{scope_name}'. Scope doesn't exist in injector."
        super().__init__(msg)


class CyclicDependencyError(ResolutionError):
    """Raised when a bean (transitively) depends on itself."""

    def __init__(self, path: list[str]) -> None:
        self.path = path
        msg = f"Cyclic dependency detected: {' -> '.join(path)}"
        super().__init__(msg)


class AbstractMethodError(NotImplementedError):
    pass
