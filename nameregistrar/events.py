"""
Registration notifications.

Each successful finalize emits one NameRegistered event, content-addressed
by the SHA-256 of its canonical form.

Usage:
    log = EventLog()
    unsubscribe = log.subscribe(lambda event: print(event['alias']))
    registrar = Registrar(events=log)
"""

import hashlib
from collections import deque
import logging
from .canonical import canonical

logger = logging.getLogger(__name__)

NAME_REGISTERED = 'NameRegistered'


def name_registered(identity: str, alias: str, alias_hash: str, at: int) -> dict:
    """Build a NameRegistered event. Returns { hash, type, identity, alias, alias_hash, at }."""
    body = {
        'type': NAME_REGISTERED,
        'identity': identity,
        'alias': alias,
        'alias_hash': alias_hash,
        'at': at,
    }
    h = hashlib.sha256(canonical(body).encode('utf-8')).hexdigest()
    return {'hash': h, **body}


class EventLog:
    """Ordered event sink with subscriber fan-out.

    Unbounded by default; pass maxlen to keep only the most recent events.
    """

    def __init__(self, maxlen=None):
        self._events = deque(maxlen=maxlen)
        self._subscribers = []

    def emit(self, event):
        """Append an event and notify subscribers.

        A subscriber that raises is logged and skipped; the event stays recorded.
        """
        self._events.append(event)
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("event subscriber %r failed on %s", callback, event.get('hash'))
        return event

    def subscribe(self, callback):
        """Register callback(event). Returns a callable that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def for_identity(self, identity):
        return [e for e in self._events if e.get('identity') == identity]

    @property
    def events(self):
        """All emitted events (copy)."""
        return list(self._events)

    @property
    def length(self):
        return len(self._events)

    def clear(self):
        self._events.clear()
