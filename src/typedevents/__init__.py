"""
Typedevents
-----------

Small, strongly-typed synchronous publish/subscribe registry for Python.

Features:

- `EventRegistry[Schema]` keyed by a `TypedDict` of event name -> payload type.
- `subscribe()` returns an integer id; `unsubscribe(event, id)` removes it and
  raises `MissingListenerError` for unknown ids.
- `once()` listeners remove themselves after firing.
- `emit(event, payload)` calls handlers synchronously in registration order;
  removal during dispatch is safe.
- Module-level API and `@receiver(event)` decorator on a default registry.
- MIT licensed. No dependencies.
"""

from .core import (
    clear,
    emit,
    list_receivers,
    once,
    receiver,
    subscribe,
    unsubscribe,
)
from .exceptions import MissingListenerError
from .registry import EventRegistry, Listener, create_event_registry

__all__ = [
    "receiver",
    "subscribe",
    "unsubscribe",
    "once",
    "emit",
    "clear",
    "list_receivers",
    "EventRegistry",
    "Listener",
    "MissingListenerError",
    "create_event_registry",
]
