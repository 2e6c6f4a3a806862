from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable

    from ._definitions import ObjectFactory


class PrototypeScope:
    """Creates a new instance every time a bean is requested."""

    async def get(
        self,
        name: str,
        factory: ObjectFactory,
        on_destroy: Callable[[Any], object] | None = None,
    ) -> Any:
        return await factory.build()

    def destroy(self) -> None:
        # instances are not tracked
        pass


class SingletonScope:
    """Holds exactly one instance per bean name.

    Concurrent first requests for the same name share a single build.
    A build that fails is not cached, the next request builds again.
    """

    def __init__(self) -> None:
        self._storage: dict[str, Any] = {}
        self._destroy_callbacks: dict[str, Callable[[Any], object]] = {}
        self._in_flight: dict[str, asyncio.Future[Any]] = {}

    async def get(
        self,
        name: str,
        factory: ObjectFactory,
        on_destroy: Callable[[Any], object] | None = None,
    ) -> Any:
        if name in self._storage:
            return self._storage[name]

        in_flight = self._in_flight.get(name)
        if in_flight is None:
            in_flight = asyncio.ensure_future(self._build(name, factory, on_destroy))
            self._in_flight[name] = in_flight

        # a cancelled waiter must not cancel the build the other waiters share
        return await asyncio.shield(in_flight)

    async def _build(
        self,
        name: str,
        factory: ObjectFactory,
        on_destroy: Callable[[Any], object] | None,
    ) -> Any:
        try:
            instance = await factory.build()
        finally:
            del self._in_flight[name]

        self._storage[name] = instance
        if on_destroy is not None:
            self._destroy_callbacks[name] = on_destroy

        return instance

    def destroy(self) -> None:
        """Run the destroy callbacks, in build order, and forget every cached instance.

        Every callback runs even when an earlier one fails. The first failure
        is raised once they have all run.
        """
        storage, self._storage = self._storage, {}
        callbacks, self._destroy_callbacks = self._destroy_callbacks, {}

        logger.debug("Destroying singleton scope with %d instance(s)", len(storage))
        errors: list[Exception] = []
        for name, callback in callbacks.items():
            try:
                callback(storage[name])
            except Exception as e:  # noqa: BLE001
                logger.warning("Destroy callback for bean '%s' failed: %s", name, e, exc_info=True)
                errors.append(e)

        if errors:
            raise errors[0]
