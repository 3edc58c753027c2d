"""Test clocks, the event log and state export/load."""

import json
import logging
import pytest
from nameregistrar.state import _digest
from nameregistrar import (
    Registrar, ManualClock, SystemClock, EventLog, name_registered, generate_keypair,
    export_state, load_state, alias_hash, AlreadyNamed, AliasTaken,
)


T0 = 1_700_000_000


class TestClocks:
    def test_manual_clock(self):
        clock = ManualClock(10)
        assert clock() == 10
        assert clock.increase(121) == 131
        assert clock.set(200) == 200
        assert clock() == 200

    def test_manual_clock_never_goes_back(self):
        clock = ManualClock(10)
        with pytest.raises(ValueError):
            clock.set(5)
        with pytest.raises(ValueError):
            clock.increase(-1)
        with pytest.raises(ValueError):
            ManualClock(-1)

    def test_system_clock_monotonic(self):
        clock = SystemClock()
        first = clock()
        assert isinstance(first, int)
        assert clock() >= first


class TestEventLog:
    def test_event_hash_is_content_addressed(self):
        a = name_registered('aa', 'Alice', alias_hash('Alice'), T0)
        b = name_registered('aa', 'Alice', alias_hash('Alice'), T0)
        c = name_registered('bb', 'Alice', alias_hash('Alice'), T0)
        assert a['hash'] == b['hash']
        assert a['hash'] != c['hash']
        assert len(a['hash']) == 64

    def test_subscribe_and_unsubscribe(self):
        log = EventLog()
        seen = []
        unsubscribe = log.subscribe(seen.append)
        log.emit(name_registered('aa', 'A', alias_hash('A'), 1))
        unsubscribe()
        log.emit(name_registered('bb', 'B', alias_hash('B'), 2))
        assert [e['alias'] for e in seen] == ['A']
        assert log.length == 2
        assert [e['alias'] for e in log.for_identity('bb')] == ['B']

    def test_failing_subscriber_is_logged(self, caplog):
        log = EventLog()
        seen = []

        def broken(event):
            raise RuntimeError('boom')

        log.subscribe(broken)
        log.subscribe(seen.append)
        with caplog.at_level(logging.ERROR, logger='nameregistrar'):
            log.emit(name_registered('aa', 'A', alias_hash('A'), 1))

        assert len(seen) == 1
        assert log.length == 1
        assert any('subscriber' in r.getMessage() for r in caplog.records)

    def test_clear(self):
        log = EventLog()
        log.emit(name_registered('aa', 'A', alias_hash('A'), 1))
        log.clear()
        assert log.events == []

    def test_maxlen_keeps_most_recent(self):
        log = EventLog(maxlen=2)
        seen = []
        log.subscribe(seen.append)
        for i, name in enumerate(['A', 'B', 'C']):
            log.emit(name_registered('aa', name, alias_hash(name), i))
        assert [e['alias'] for e in log.events] == ['B', 'C']
        assert log.length == 2
        assert len(seen) == 3


def _populated():
    clock = ManualClock(T0)
    registrar = Registrar(clock=clock)
    alice = generate_keypair()['public_key']
    bob = generate_keypair()['public_key']
    registrar.commit(alice, registrar.derive_fingerprint(alice, 'Alice222', 1))
    clock.increase(200)
    registrar.finalize(alice, 'Alice222', 1)
    pending = registrar.derive_fingerprint(bob, 'Bob31', 31)
    registrar.commit(bob, pending)
    return registrar, clock, alice, bob, pending


class TestStateExport:
    def test_export_and_load(self):
        registrar, clock, alice, bob, pending = _populated()
        data = json.loads(json.dumps(export_state(registrar)))

        restored = load_state(data, clock=clock)
        assert restored.owner_alias(alice) == 'Alice222'
        assert restored.alias_taken(alias_hash('Alice222'))
        assert restored.commitment_time(pending) == T0 + 200

        clock.increase(200)
        restored.finalize(bob, 'Bob31', 31)
        assert restored.owner_alias(bob) == 'Bob31'

    def test_restored_invariants_hold(self):
        registrar, clock, alice, bob, pending = _populated()
        restored = load_state(export_state(registrar), clock=clock)
        with pytest.raises(AlreadyNamed):
            restored.commit(alice, pending)

        carol = generate_keypair()['public_key']
        restored.commit(carol, restored.derive_fingerprint(carol, 'Alice222', 5))
        clock.increase(200)
        with pytest.raises(AliasTaken):
            restored.finalize(carol, 'Alice222', 5)

    def test_rejects_tampering(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['commitments'][pending] = 0
        with pytest.raises(ValueError, match='digest mismatch'):
            load_state(data)

    def test_rejects_unknown_version(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['version'] = 99
        with pytest.raises(ValueError, match='unsupported state version'):
            load_state(data)

    def _resigned(self, data):
        body = {k: data[k] for k in ('version', 'commitments', 'owners', 'taken')}
        return {**body, 'digest': _digest(body)}

    def test_rejects_inconsistent_stores(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['taken'] = {}
        with pytest.raises(ValueError, match='missing from taken'):
            load_state(self._resigned(data))

    def test_rejects_alias_hash_mismatch(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        forged = alias_hash('Mallory')
        data['owners'][alice]['alias_hash'] = forged
        data['taken'] = {forged: alice}
        with pytest.raises(ValueError, match='alias hash does not match'):
            load_state(self._resigned(data))

    def test_rejects_orphan_taken_entry(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['taken'][alias_hash('Ghost')] = bob
        with pytest.raises(ValueError, match='no matching owner'):
            load_state(self._resigned(data))

    def test_rejects_non_integer_commitment_time(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['commitments'][pending] = str(data['commitments'][pending])
        with pytest.raises(ValueError, match='non-integer time'):
            load_state(self._resigned(data))

    def test_rejects_malformed_fingerprint(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['commitments']['not-a-fingerprint'] = T0
        with pytest.raises(ValueError, match='fingerprint'):
            load_state(self._resigned(data))

    def test_rejects_empty_alias(self):
        registrar, clock, alice, bob, pending = _populated()
        data = export_state(registrar)
        data['owners'][alice]['alias'] = ''
        with pytest.raises(ValueError, match='alias is required'):
            load_state(self._resigned(data))
