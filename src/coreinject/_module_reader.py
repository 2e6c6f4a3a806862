from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._definitions import ModuleEntry, ModuleObject


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Iterable, MutableMapping

    from ._definitions import Module


class _RegistryConfiguration:
    def __init__(self, definitions: MutableMapping[str, ModuleEntry]) -> None:
        self._definitions = definitions

    def register(self, name: str) -> ModuleEntry:
        if name in self._definitions:
            logger.debug("Bean '%s' is registered again, replacing the previous definition", name)

        entry = ModuleEntry(name)
        self._definitions[name] = entry
        return entry


class ModuleReader:
    """Runs modules and stores the bean definitions they register."""

    def read_configuration(
        self,
        module: Module | ModuleObject,
        definitions: MutableMapping[str, ModuleEntry],
    ) -> None:
        if isinstance(module, ModuleObject):
            module = module.get_module()

        if not callable(module):
            msg = f"A module must be callable or a ModuleObject, got {module!r}"
            raise TypeError(msg)

        logger.debug("Reading module %r", module)
        module(_RegistryConfiguration(definitions))

    def read_modules(
        self,
        modules: Iterable[Module | ModuleObject | list | tuple],
        definitions: MutableMapping[str, ModuleEntry],
    ) -> None:
        """Read modules in order. Lists and tuples are flattened one level deep."""
        for module in modules:
            if isinstance(module, (list, tuple)):
                for inner in module:
                    if isinstance(inner, (list, tuple)):
                        msg = "Module lists can only be nested one level deep"
                        raise TypeError(msg)
                    self.read_configuration(inner, definitions)
            else:
                self.read_configuration(module, definitions)
