"""
Bosun signals: a synchronous, named-event hook bus.

What this module provides
- Signal: registry of (subscriber, name, callback) handlers.
  • handler(subscriber, name, callback): append a registration; no uniqueness rules.
  • send(sender, name, *args, **kwargs): call every callback registered for name, in
    registration order, on the caller's thread; returns the results in call order.
- Handler / Result: the registration and the per-callback outcome records.
- STOP: a callback returning STOP halts the remaining callbacks of that send.

Semantics
- Dispatch is by name only. The subscriber identity is kept on the registration
  for introspection (see Signal.handlers) and reported back in each Result.
- A callback that raises propagates out of send unmodified; later callbacks of that
  send do not run.
- Registrations are never removed; instances sharing a bus accumulate handlers.

Example
    >>> signal = Signal()
    >>> signal.handler(None, "pre_action", lambda: "ready")
    >>> [result.value for result in signal.send(None, "pre_action")]
    ['ready']
"""
import logging
from collections import defaultdict
from typing import NamedTuple, final

from .utils import *

logger = logging.getLogger(__name__)


@final
class _StopType:
    def __repr__(self):
        return "STOP"

    def __init_subclass__(cls, **options):
        raise TypeError("type '_StopType' is not an acceptable base type")


STOP = _StopType()


class Handler(NamedTuple):
    subscriber: object
    name: str
    callback: object


class Result(NamedTuple):
    sender: object
    name: str
    subscriber: object
    callback: object
    value: object


class Signal:
    """
    Named-event dispatcher with ordered, synchronous multicast.

    The registration table maps each event name to the list of its handlers in
    insertion order; registration appends and dispatch scans that list.
    """

    def __init__(self):
        self._handlers = defaultdict(list)

    def handler(self, subscriber, name, callback, /):
        """
        Register `callback` to run whenever `name` is sent.

        Parameters
        - subscriber: any
          Identity of the registrant (kept for introspection only).
        - name: str
          Event name, e.g. "pre_action".
        - callback: Callable
          Invoked with the arguments given to send().

        Raises
        - TypeError: when name is not a string or callback is not callable.
        """
        if not isinstance(name, str):
            raise TypeError("handler() second argument must be a string")
        if not callable(callback):
            raise TypeError("handler() third argument must be callable")
        self._handlers[name].append(Handler(subscriber, name, callback))
        logger.debug("registered %r for %r (%d handlers)", callback, name, len(self._handlers[name]))

    def send(self, sender, name, /, *args, **kwargs):
        """
        Invoke every callback registered for `name`, in registration order.

        Returns
        - tuple[Result, ...]: one record per callback that ran, in call order.
        """
        if not isinstance(name, str):
            raise TypeError("send() second argument must be a string")

        results = []
        # Snapshot so callbacks that register new handlers do not extend this send
        for handler in tuple(self._handlers.get(name, ())):
            value = handler.callback(*args, **kwargs)
            results.append(Result(sender, name, handler.subscriber, handler.callback, value))
            if value is STOP:
                logger.debug("%r stopped %r after %d handlers", handler.callback, name, len(results))
                break
        return tuple(results)

    def handlers(self, name=Unset, /):
        """
        Return the registrations (all of them, or those of one event name).
        """
        if name is Unset:
            return tuple(handler for handlers in self._handlers.values() for handler in handlers)
        return tuple(self._handlers.get(name, ()))


__all__ = (
    "Signal",
    "Handler",
    "Result",
    "STOP",
)
