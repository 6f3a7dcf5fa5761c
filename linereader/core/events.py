"""Listener-list event emitter shared by the reader and the byte source.

WHY: The reader reports progress as named events (open, error, line,
end) that any number of consumers may observe. The byte source talks to
the reader the same way. A small emitter with one listener list per
event name covers both without tying either to a framework.

HOW: Listeners are kept in a dict of lists keyed by event name. emit()
snapshots the list before calling, so listeners may subscribe or
unsubscribe while an event is being delivered. A listener that raises
is logged with its traceback and the remaining listeners still run.

RULES:
- Listeners run synchronously, in registration order
- once() listeners are removed before they are called
- emit() returns the number of listeners invoked
- A raising listener never aborts delivery or the caller's control flow
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


def _describe_listener(listener: Listener) -> str:
    module_name = getattr(listener, "__module__", None)
    qualname = getattr(listener, "__qualname__", None)
    if isinstance(qualname, str):
        prefix = "{}.".format(module_name) if isinstance(module_name, str) else ""
        return "{}{}".format(prefix, qualname)
    return repr(listener)


class _OnceWrapper:
    """Calls the wrapped listener a single time, then detaches itself."""

    def __init__(self, emitter: EventEmitter, event: str, listener: Listener) -> None:
        self.emitter = emitter
        self.event = event
        self.listener = listener
        self.__qualname__ = getattr(listener, "__qualname__", repr(listener))
        self.__module__ = getattr(listener, "__module__", __name__)

    def __call__(self, *args: Any) -> Any:
        self.emitter.off(self.event, self)
        return self.listener(*args)


class EventEmitter:
    """Fan events out to the listeners registered for each event name."""

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event: str, listener: Optional[Listener] = None) -> Listener:
        """Register ``listener`` for ``event`` and return it.

        Called without a listener, returns a decorator that registers the
        decorated function: ``@reader.on("line")``.
        """
        if listener is None:
            return lambda func: self.on(event, func)
        self._listeners.setdefault(event, []).append(listener)
        return listener

    def once(self, event: str, listener: Optional[Listener] = None) -> Listener:
        """Register ``listener`` for the next ``event`` only.

        Like on(), works as a decorator when called without a listener.
        """
        if listener is None:
            return lambda func: self.once(event, func)
        self.on(event, _OnceWrapper(self, event, listener))
        return listener

    def off(self, event: str, listener: Listener) -> bool:
        """Remove a listener.

        Also matches the original callable of a once() registration.
        Returns True if a listener was removed.
        """
        listeners = self._listeners.get(event)
        if not listeners:
            return False
        for index, registered in enumerate(listeners):
            if registered is listener or (
                isinstance(registered, _OnceWrapper) and registered.listener is listener
            ):
                del listeners[index]
                return True
        return False

    def remove_all_listeners(self, event: Optional[str] = None) -> None:
        if event is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event, None)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, ()))

    def emit(self, event: str, *args: Any) -> int:
        """Deliver ``event`` to every listener registered for it.

        WHY: Consumer code runs inside the reader's scheduling ticks. If
        a consumer raised straight through emit(), the tick would abort
        and the reader would stall with lines still queued.

        HOW: Iterates a snapshot of the listener list. Exceptions are
        logged with logger.exception and delivery continues.

        RULES:
        - Returns how many listeners were invoked (raising ones included)
        - Emitting an event nobody listens to is a no-op returning 0
        """
        listeners = tuple(self._listeners.get(event, ()))
        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                logger.exception(
                    "Listener %s failed while handling %r event",
                    _describe_listener(listener),
                    event,
                )
        return len(listeners)
