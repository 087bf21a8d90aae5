import collections
from typing import Any, Callable

EventListener = Callable[..., Any]


class EventEmitter:
    """Call listeners synchronously in the order they were added"""

    listeners: dict[str, list[EventListener]]

    def __init__(self):
        self.listeners = collections.defaultdict(list)

    def add_listener(
        self,
        name: str,
        fn: EventListener,
        prepend: bool = False,
    ) -> None:
        listeners = self.listeners[name]

        if prepend:
            listeners.insert(0, fn)
        else:
            listeners.append(fn)

    def remove_listener(self, name: str, fn: EventListener) -> bool:
        listeners = self.listeners.get(name)
        if not listeners or fn not in listeners:
            return False

        listeners.remove(fn)
        return True

    def emit(self, /, name: str, *args: Any, **kwargs: Any) -> int:
        """Return the number of listeners called"""
        listeners = self.listeners.get(name)
        if not listeners:
            return 0

        # listeners may remove themselves
        snapshot = tuple(listeners)
        for fn in snapshot:
            fn(*args, **kwargs)

        return len(snapshot)
