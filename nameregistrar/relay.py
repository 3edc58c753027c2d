"""
Relaying signed calls on behalf of a claimant.

The relayer never supplies an identity of its own: the registrar sees the
identity that signed the envelope.

Usage:
    envelope = sign_call('commit', {'fingerprint': fp}, keys['private_key'])
    relay(registrar, envelope)          # anyone may submit this
"""

from .identity import authenticate


def relay(registrar, envelope, now=None):
    """
    Authenticate a signed call and dispatch it to the registrar.

    Args:
        registrar: Registrar instance
        envelope: dict returned by sign_call()
        now: Optional explicit time

    Returns:
        commit -> recorded time; finalize -> NameRegistered event

    Raises:
        InvalidSignature if the envelope does not verify
        ValueError for unknown operations or missing params
    """
    identity = authenticate(envelope)
    call = envelope['call']
    if not isinstance(call, dict):
        raise ValueError('NameRegistrar: call must be a dict')
    operation = call.get('operation')
    params = call.get('params') or {}
    if not isinstance(params, dict):
        raise ValueError('NameRegistrar: params must be a dict')

    if operation == 'commit':
        if 'fingerprint' not in params:
            raise ValueError('NameRegistrar: commit requires params.fingerprint')
        return registrar.commit(identity, params['fingerprint'], now=now)

    if operation == 'finalize':
        if 'alias' not in params or 'salt' not in params:
            raise ValueError('NameRegistrar: finalize requires params.alias and params.salt')
        return registrar.finalize(identity, params['alias'], params['salt'], now=now)

    raise ValueError(f'NameRegistrar: unknown operation "{operation}"')
