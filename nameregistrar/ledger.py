"""
Commitment ledger: maps a fingerprint to the time it was first observed.

Usage:
    ledger = CommitmentLedger()
    ledger.record(fp, now=1000)
    ledger.consume(fp, now=1121)   # deletes the entry
"""

import logging
from .errors import AlreadyCommitted, NotReadyOrAbsent, CommitmentExpired

logger = logging.getLogger(__name__)

MIN_DELAY = 120
EXPIRY_WINDOW = 86400


class CommitmentLedger:
    """Fingerprint -> observed_at store with the commit/reveal timing rules.

    Any MutableMapping can back the ledger; a dict is used by default.
    Callers serialize access (see Registrar).
    """

    def __init__(self, store=None):
        self._store = {} if store is None else store

    def record(self, fingerprint, now):
        """Store observed_at = now, unless an unexpired entry exists.

        The expiry boundary is inclusive: at exactly observed_at + EXPIRY_WINDOW
        the old entry still blocks a new record.
        """
        observed_at = self._store.get(fingerprint)
        if observed_at is not None and now <= observed_at + EXPIRY_WINDOW:
            raise AlreadyCommitted()
        self._store[fingerprint] = now
        if observed_at is not None:
            logger.debug("replaced expired commitment %s (observed at %s)", fingerprint, observed_at)
        return self

    def check(self, fingerprint, now):
        """Raise unless fingerprint could be consumed at now. Does not mutate."""
        observed_at = self._store.get(fingerprint)
        if observed_at is None or now < observed_at + MIN_DELAY:
            raise NotReadyOrAbsent()
        if now >= observed_at + EXPIRY_WINDOW:
            raise CommitmentExpired()
        return observed_at

    def consume(self, fingerprint, now):
        """Check then delete the entry. Returns its observed_at."""
        observed_at = self.check(fingerprint, now)
        del self._store[fingerprint]
        return observed_at

    def committed_at(self, fingerprint):
        """Observed time for fingerprint, or 0 if absent."""
        return self._store.get(fingerprint, 0)

    def has(self, fingerprint):
        return fingerprint in self._store

    @property
    def entries(self):
        """Copy of all fingerprint -> observed_at entries."""
        return dict(self._store)

    @property
    def size(self):
        return len(self._store)
