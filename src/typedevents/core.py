"""
typedevents.core
----------------

Module-level API backed by a default registry.
"""

from typing import Any, Callable, List, Optional

from .registry import _NO_PAYLOAD, EventRegistry, HandlerFunc

# -------------------- module-level default registry --------------------

_default_registry: EventRegistry[Any] = EventRegistry()


# Registration
def subscribe(event_name: str, handler: HandlerFunc) -> int:
    """
    Register a handler for an event on the default registry.

    Args:
        event_name (str): The event to register the handler for.
        handler (HandlerFunc): The handler to register.

    Returns:
        int: The subscription id.
    """
    return _default_registry.subscribe(event_name, handler)


def unsubscribe(event_name: str, listener_id: int) -> None:
    """
    Remove a listener from the default registry.

    Args:
        event_name (str): The event the listener was registered for.
        listener_id (int): The id returned by `subscribe` or `once`.

    Raises:
        MissingListenerError: If no such listener is active.
    """
    _default_registry.unsubscribe(event_name, listener_id)


def once(event_name: str, handler: HandlerFunc) -> int:
    """
    Register a handler on the default registry that fires at most once.

    Returns:
        int: The subscription id.
    """
    return _default_registry.once(event_name, handler)


def clear() -> None:
    """
    Remove all listeners from the default registry.
    """
    _default_registry.clear()


def list_receivers(event_name: str) -> List[HandlerFunc]:
    """
    Return the handlers registered for `event_name` on the default registry,
    in dispatch order.
    """
    return _default_registry.list_receivers(event_name)


def _get_registry(registry: Optional[EventRegistry[Any]] = None) -> EventRegistry[Any]:
    return registry if registry is not None else _default_registry


# Decorator
def receiver(
    event_name: str,
    *,
    once: bool = False,  # pylint: disable=redefined-outer-name
    registry: Optional[EventRegistry[Any]] = None,
) -> Callable[[HandlerFunc], HandlerFunc]:
    """
    Decorator to register a function as a handler for `event_name`.

    Args:
        event_name (str): The event to register the handler for.
        once (bool, optional): Whether the handler should be called only once. Defaults to False.
        registry (EventRegistry, optional): The registry to register the handler on.
                                            Defaults to None. If None, the default registry is used.

    Returns:
        Callable[[HandlerFunc], HandlerFunc]: The decorator function.

    Example:
    @receiver("user_created", once=True)
    def greet(user):
        print("welcome", user["name"])
    """
    return _get_registry(registry).receiver(event_name, once=once)


# Dispatch
def emit(event_name: str, payload: Any = _NO_PAYLOAD) -> None:
    """
    Dispatch `event_name` on the default registry, in registration order.
    Exceptions raised by handlers will propagate.

    Args:
        event_name (str): The event to dispatch.
        payload (Any, optional): The payload passed to every handler. Omit it
                                 for events that carry none.

    Example:
    emit("user_created", {"name": "ada"})
    """
    _default_registry.emit(event_name, payload)
