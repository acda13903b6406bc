"""
Event registry implementation.
"""

from __future__ import annotations

import functools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from .exceptions import MissingListenerError

logger = logging.getLogger(__name__)

HandlerFunc = Callable[..., Any]

# Event schema, usually a TypedDict of event name -> payload type (None for no payload)
SchemaT = TypeVar("SchemaT")

_NO_PAYLOAD: Any = object()


@dataclass(frozen=True, order=True)
class Listener:
    """
    A handler registered under a subscription id. Listeners sort by id only.

    `receiver` is the function the caller registered when `handler` wraps it
    (one-shot listeners); it is None when the two are the same.
    """

    id: int
    handler: HandlerFunc = field(compare=False)
    receiver: Optional[HandlerFunc] = field(default=None, compare=False)

    def call(self, payload: Any = _NO_PAYLOAD) -> Any:
        """
        Call the handler, passing the payload only when one was emitted.
        """
        if payload is _NO_PAYLOAD:
            return self.handler()
        return self.handler(payload)


class EventRegistry(Generic[SchemaT]):
    """
    An isolated, synchronous event registry.

    Listeners are identified by integer subscription ids that increase
    monotonically per registry and are never reused. Dispatch runs in
    ascending id order, which is registration order.
    """

    def __init__(self) -> None:
        """
        Initialize a new EventRegistry instance.
        """
        self._lock = threading.RLock()
        self._listeners: Dict[str, Dict[int, Listener]] = {}
        self._counter = 0  # next subscription id

    # -------------------- registration API --------------------
    def subscribe(self, event_name: str, handler: HandlerFunc) -> int:
        """
        Register a handler for an event.

        Args:
            event_name (str): The event to register the handler for.
            handler (HandlerFunc): Called with the event payload, or with no
                                   arguments for events without one.

        Returns:
            int: The subscription id, needed to unsubscribe later.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")

        listener_id = self._next_id()
        self._insert(event_name, Listener(id=listener_id, handler=handler))
        return listener_id

    def _next_id(self) -> int:
        with self._lock:
            listener_id = self._counter
            self._counter += 1
        return listener_id

    def _insert(self, event_name: str, listener: Listener) -> None:
        with self._lock:
            self._listeners.setdefault(event_name, {})[listener.id] = listener
        logger.debug("Subscribed listener %d to %r", listener.id, event_name)

    def unsubscribe(self, event_name: str, listener_id: int) -> None:
        """
        Remove the listener registered under `listener_id` for `event_name`.

        Args:
            event_name (str): The event the listener was registered for.
            listener_id (int): The id returned by `subscribe` or `once`.

        Raises:
            MissingListenerError: If no such listener is active. Nothing is
                                  removed in that case.
        """
        with self._lock:
            bucket = self._listeners.get(event_name)
            if not bucket or listener_id not in bucket:
                raise MissingListenerError(event_name, listener_id)
            del bucket[listener_id]
            if not bucket:
                del self._listeners[event_name]

        logger.debug("Unsubscribed listener %d from %r", listener_id, event_name)

    def once(self, event_name: str, handler: HandlerFunc) -> int:
        """
        Register a handler that runs for the next emit of `event_name` only.

        The listener removes itself right after the handler returns (or
        raises). The handler never runs twice, even if it emits the same
        event again from inside itself.

        Args:
            event_name (str): The event to register the handler for.
            handler (HandlerFunc): The handler to call once.

        Returns:
            int: The subscription id, usable to cancel before it fires.
        """
        if not callable(handler):
            raise TypeError("handler must be callable")

        # the id must be known before the wrapper becomes reachable by emit
        listener_id = self._next_id()
        fired = False

        @functools.wraps(handler)
        def wrapper(*payload: Any) -> None:
            nonlocal fired
            if fired:
                return
            fired = True
            try:
                handler(*payload)
            finally:
                self._remove_fired(event_name, listener_id)

        self._insert(
            event_name, Listener(id=listener_id, handler=wrapper, receiver=handler)
        )
        return listener_id

    def _remove_fired(self, event_name: str, listener_id: int) -> None:
        # the handler may already have unsubscribed itself
        with self._lock:
            if listener_id not in self._listeners.get(event_name, {}):
                return
            self.unsubscribe(event_name, listener_id)
        logger.debug("Removed one-shot listener %d from %r", listener_id, event_name)

    def clear(self) -> None:
        """Remove all listeners from the registry. Ids are not reused afterwards."""
        with self._lock:
            self._listeners.clear()

    def list_receivers(self, event_name: str) -> List[HandlerFunc]:
        """Return the handlers registered for `event_name`, in dispatch order."""
        with self._lock:
            listeners = sorted(self._listeners.get(event_name, {}).values())
        return [
            listener.handler if listener.receiver is None else listener.receiver
            for listener in listeners
        ]

    # -------------------- decorator --------------------
    def receiver(self, event_name: str, *, once: bool = False):
        """
        Decorator to register a function as a handler for `event_name`.

        Args:
            event_name (str): The event to register the handler for.
            once (bool, optional): Whether the handler should be called only once.
                                   Defaults to False.

        Returns:
            Callable[[HandlerFunc], HandlerFunc]: The decorator function.
        """

        def wrapper(func: HandlerFunc) -> HandlerFunc:
            if once:
                self.once(event_name, func)
            else:
                self.subscribe(event_name, func)
            return func

        return wrapper

    # -------------------- dispatch --------------------
    def emit(self, event_name: str, payload: Any = _NO_PAYLOAD) -> None:
        """
        Dispatch `event_name` to its listeners in registration order.

        Handlers are called synchronously, with `payload` if given and with
        no arguments otherwise. Emitting an event nobody listens to is a
        no-op. Exceptions raised by handlers propagate and stop the
        remaining dispatch.

        Args:
            event_name (str): The event to dispatch.
            payload (Any, optional): The payload passed to every handler.

        Returns:
            None
        """
        # snapshot listeners to avoid holding the lock during callbacks
        with self._lock:
            bucket = self._listeners.get(event_name)
            listeners = sorted(bucket.values()) if bucket else []

        if not listeners:
            logger.debug("No listeners for %r", event_name)
            return

        for listener in listeners:
            # skip listeners removed by an earlier handler of this emit
            with self._lock:
                current = self._listeners.get(event_name, {}).get(listener.id)
            if current is not listener:
                continue
            listener.call(payload)


def create_event_registry() -> EventRegistry[Any]:
    """
    Create a new, empty registry.

    Annotate the result to bind the event schema:

        events: EventRegistry[MyEvents] = create_event_registry()
    """
    return EventRegistry()
