"""
Registrar state export and restore.

An export carries the two stores plus a SHA-256 digest over their canonical
form, so a tampered or truncated export is rejected on load.

Usage:
    data = export_state(registrar)
    json.dump(data, f)
    ...
    registrar = load_state(json.load(f))
"""

import hashlib

from .canonical import canonical
from .fingerprint import alias_hash, normalize_alias, normalize_fingerprint, normalize_identity
from .ledger import CommitmentLedger
from .registry import IdentityRegistry
from .registrar import Registrar

STATE_VERSION = 1


def export_state(registrar):
    """
    Export a registrar's persisted state.

    Returns:
        {
            'version': int,
            'commitments': {fingerprint: observed_at},
            'owners': {identity: {'alias', 'alias_hash'}},
            'taken': {alias_hash: identity},
            'digest': sha256 hex over the fields above,
        }
    """
    snap = registrar.snapshot()
    body = {
        'version': STATE_VERSION,
        'commitments': snap['commitments'],
        'owners': snap['owners'],
        'taken': snap['taken'],
    }
    return {**body, 'digest': _digest(body)}


def load_state(data, clock=None, events=None):
    """Rebuild a Registrar from export_state() output. Raises ValueError on a bad export."""
    if not isinstance(data, dict):
        raise ValueError('NameRegistrar: state must be a dict')
    if data.get('version') != STATE_VERSION:
        raise ValueError(f'NameRegistrar: unsupported state version {data.get("version")!r}')

    body = {k: data.get(k) for k in ('version', 'commitments', 'owners', 'taken')}
    if _digest(body) != data.get('digest'):
        raise ValueError('NameRegistrar: state digest mismatch')

    commitments = {}
    for fingerprint, observed_at in (body['commitments'] or {}).items():
        if isinstance(observed_at, bool) or not isinstance(observed_at, int) or observed_at < 0:
            raise ValueError(f'NameRegistrar: commitment {fingerprint} has a non-integer time')
        commitments[normalize_fingerprint(fingerprint)] = observed_at

    owners = {}
    for identity, record in (body['owners'] or {}).items():
        if not isinstance(record, dict):
            raise ValueError(f'NameRegistrar: owner {identity} record must be a dict')
        alias = normalize_alias(record.get('alias'))
        if record.get('alias_hash') != alias_hash(alias):
            raise ValueError(f'NameRegistrar: owner {identity} alias hash does not match alias')
        owners[normalize_identity(identity)] = {'alias': alias, 'alias_hash': record['alias_hash']}

    taken = {}
    for hash_val, identity in (body['taken'] or {}).items():
        taken[hash_val] = normalize_identity(identity)
    for identity, record in owners.items():
        if taken.get(record['alias_hash']) != identity:
            raise ValueError(f'NameRegistrar: owner {identity} missing from taken aliases')
    for hash_val, identity in taken.items():
        if owners.get(identity, {}).get('alias_hash') != hash_val:
            raise ValueError(f'NameRegistrar: taken alias {hash_val} has no matching owner')

    return Registrar(
        clock=clock,
        events=events,
        ledger=CommitmentLedger(commitments),
        registry=IdentityRegistry(owners, taken),
    )


def _digest(body):
    return hashlib.sha256(canonical(body).encode('utf-8')).hexdigest()
