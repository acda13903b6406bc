"""
Errors raised by the event registry.
"""


class MissingListenerError(LookupError):
    """
    Raised by `unsubscribe` when no active listener matches the
    (event name, id) pair.

    Attributes:
        event_name (str): The event the removal targeted.
        listener_id (int): The subscription id that was not found.
    """

    def __init__(self, event_name: str, listener_id: int) -> None:
        self.event_name = event_name
        self.listener_id = listener_id
        super().__init__(
            f'No listener with id {listener_id} for event type "{event_name}"'
        )
