"""
Callback handler registry.

Batch callbacks are stored as string targets ("Key" or "Key#method") so
they can live in the registry like any other batch property. A target is
resolved through this explicit mapping of stable keys to handler
factories, never through runtime name lookup.
"""

import logging
import threading
from typing import Callable, Optional, Union

from .errors import CallbackNotRegisteredError, ConfigurationError

logger = logging.getLogger(__name__)

HandlerFactory = Callable[[], object]


def split_target(target: str) -> tuple[str, Optional[str]]:
    """Split "Key#method" into ("Key", "method"); the method part is optional."""
    key, _, method = target.partition("#")
    if not key:
        raise ConfigurationError(f"Invalid callback target: {target!r}")
    return key, (method or None)


class CallbackRegistry:
    """Stable key -> handler factory mapping."""

    def __init__(self):
        self._lock = threading.Lock()
        self._factories: dict[str, HandlerFactory] = {}

    def register(self, key: str, factory: HandlerFactory) -> HandlerFactory:
        """
        Register a handler factory (usually a class) under `key`.

        Re-registering the same factory is allowed; a different factory
        under an existing key is a configuration error.
        """
        if "#" in key:
            raise ConfigurationError(f"Callback key must not contain '#': {key!r}")
        with self._lock:
            existing = self._factories.get(key)
            if existing is not None and existing is not factory:
                raise ConfigurationError(f"Callback key already registered: {key!r}")
            self._factories[key] = factory
        logger.debug(f"Registered callback handler {key}")
        return factory

    def unregister(self, key: str) -> None:
        with self._lock:
            self._factories.pop(key, None)

    def key_for(self, factory: HandlerFactory) -> Optional[str]:
        with self._lock:
            for key, registered in self._factories.items():
                if registered is factory:
                    return key
        return None

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._factories

    def resolve(self, key: str) -> HandlerFactory:
        """
        Raises:
            CallbackNotRegisteredError: If nothing is registered under `key`
        """
        with self._lock:
            factory = self._factories.get(key)
        if factory is None:
            raise CallbackNotRegisteredError(key)
        return factory

    def target_for(self, handler: Union[str, type], method: Optional[str] = None) -> str:
        """
        Build a storable target string.

        Classes are registered under their own name when not registered yet.
        """
        if isinstance(handler, str):
            key, target_method = split_target(handler)
            if method and target_method:
                raise ConfigurationError(
                    f"Callback method given twice: {handler!r} and {method!r}"
                )
            method = method or target_method
        else:
            key = self.key_for(handler) or self.register(handler.__name__, handler).__name__
        return f"{key}#{method}" if method else key

    def clear(self) -> None:
        with self._lock:
            self._factories.clear()


callbacks = CallbackRegistry()


def callback_handler(key: Optional[str] = None):
    """
    Class decorator registering a batch callback handler.

        @callback_handler("Notifier")
        class Notifier:
            def on_success(self, status, options): ...
    """

    def decorator(cls):
        callbacks.register(key or cls.__name__, cls)
        return cls

    return decorator
