"""
Name Registrar: commit/reveal alias claims bound to the claimant's identity.

A claimant derives a fingerprint locally, commits it, waits at least
MIN_DELAY, then finalizes with the alias and salt before EXPIRY_WINDOW
elapses. Finalize re-derives the fingerprint from the caller's identity,
so an observer who copies a pending fingerprint cannot claim the alias.

Usage:
    registrar = Registrar(clock=ManualClock(1000))
    fp = registrar.derive_fingerprint(alice, 'alice', 9122018)
    registrar.commit(alice, fp)
    registrar.clock.increase(121)
    registrar.finalize(alice, 'alice', 9122018)
    registrar.owner_alias(alice)  # 'alice'
"""

import copy
import logging
import threading

from .clock import SystemClock
from .errors import AlreadyNamed, RegistrarError
from .events import EventLog, name_registered
from .fingerprint import (
    alias_hash as compute_alias_hash,
    fingerprint_from_hash,
    normalize_alias,
    normalize_fingerprint,
    normalize_identity,
)
from .ledger import CommitmentLedger
from .registry import IdentityRegistry

logger = logging.getLogger(__name__)


class Registrar:
    """Transition engine over a CommitmentLedger and an IdentityRegistry.

    All operations run under one lock, so each call is atomic with respect
    to every other call on the same registrar.
    """

    def __init__(self, clock=None, events=None, ledger=None, registry=None):
        self.clock = clock or SystemClock()
        self.events = events if events is not None else EventLog()
        self.ledger = ledger if ledger is not None else CommitmentLedger()
        self.registry = registry if registry is not None else IdentityRegistry()
        self._lock = threading.RLock()

    def derive_fingerprint(self, identity, alias, salt):
        """Fingerprint that identity must commit to later finalize (alias, salt)."""
        return fingerprint_from_hash(compute_alias_hash(alias), identity, salt)

    def commit(self, identity, fingerprint, now=None):
        """
        Record a fingerprint commitment on behalf of identity.

        Any identity may commit any fingerprint; only the identity that
        derived it can finalize it.

        Args:
            identity: Caller identity (hex)
            fingerprint: 64-char hex fingerprint
            now: Current time; read from the clock when omitted

        Returns:
            The recorded observation time

        Raises:
            AlreadyNamed: identity already owns an alias
            AlreadyCommitted: an unexpired commitment exists for fingerprint
        """
        identity = normalize_identity(identity)
        fingerprint = normalize_fingerprint(fingerprint)

        with self._lock:
            now = self._now(now)
            try:
                if self.registry.is_named(identity):
                    raise AlreadyNamed()
                self.ledger.record(fingerprint, now)
            except RegistrarError as e:
                logger.debug("commit rejected for %s: %s", identity, e)
                raise
            logger.info("commitment %s recorded at %s by %s", fingerprint, now, identity)
            return now

    def finalize(self, identity, alias, salt, now=None):
        """
        Reveal (alias, salt) and claim alias for identity.

        Args:
            identity: Caller identity (hex)
            alias: The alias to claim
            salt: Integer salt used when deriving the fingerprint
            now: Current time; read from the clock when omitted

        Returns:
            The emitted NameRegistered event

        Raises:
            AlreadyNamed: identity already owns an alias
            NotReadyOrAbsent: no commitment for the re-derived fingerprint,
                or MIN_DELAY has not elapsed
            CommitmentExpired: EXPIRY_WINDOW has elapsed
            AliasTaken: another identity already owns alias
        """
        identity = normalize_identity(identity)
        alias = normalize_alias(alias)
        alias_hash = compute_alias_hash(alias)
        fingerprint = fingerprint_from_hash(alias_hash, identity, salt)

        with self._lock:
            now = self._now(now)
            try:
                if self.registry.is_named(identity):
                    raise AlreadyNamed()
                self.ledger.check(fingerprint, now)
                self.registry.check(identity, alias_hash)
            except RegistrarError as e:
                logger.debug("finalize rejected for %s: %s", identity, e)
                raise

            event = name_registered(identity, alias, alias_hash, now)
            self.ledger.consume(fingerprint, now)
            self.registry.finalize(identity, alias, alias_hash)
            logger.info("alias %r registered to %s at %s", alias, identity, now)
            return self.events.emit(event)

    def commitment_time(self, fingerprint):
        """Time fingerprint was committed, or 0."""
        fingerprint = normalize_fingerprint(fingerprint)
        with self._lock:
            return self.ledger.committed_at(fingerprint)

    def owner_alias(self, identity):
        """Alias owned by identity, or ''."""
        identity = normalize_identity(identity)
        with self._lock:
            return self.registry.owner_alias(identity)

    def owner_alias_hash(self, identity):
        """Hash of the alias owned by identity, or ''."""
        identity = normalize_identity(identity)
        with self._lock:
            return self.registry.owner_alias_hash(identity)

    def alias_taken(self, alias_hash):
        with self._lock:
            return self.registry.is_claimed(alias_hash.lower())

    def snapshot(self):
        """Consistent copy of both stores: { commitments, owners, taken }."""
        with self._lock:
            return {
                'commitments': self.ledger.entries,
                'owners': copy.deepcopy(self.registry.owners),
                'taken': self.registry.taken,
            }

    def _now(self, now):
        now = self.clock() if now is None else now
        if isinstance(now, bool) or not isinstance(now, int) or now < 0:
            raise ValueError("NameRegistrar: time must be a non-negative integer")
        return now
