import logging

from .identity import PROTOCOL_VERSION, generate_keypair, identity_of, sign_call, verify_call, authenticate
from .canonical import canonical
from .fingerprint import alias_hash, derive_fingerprint
from .errors import (
    RegistrarError, AlreadyNamed, AlreadyCommitted, NotReadyOrAbsent,
    CommitmentExpired, Expired, AliasTaken, InvalidSignature,
)
from .ledger import CommitmentLedger, MIN_DELAY, EXPIRY_WINDOW
from .registry import IdentityRegistry
from .events import EventLog, name_registered, NAME_REGISTERED
from .clock import SystemClock, ManualClock
from .registrar import Registrar
from .relay import relay
from .state import export_state, load_state

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'generate_keypair', 'identity_of', 'sign_call', 'verify_call', 'authenticate',
    'canonical',
    'alias_hash', 'derive_fingerprint',
    'RegistrarError', 'AlreadyNamed', 'AlreadyCommitted', 'NotReadyOrAbsent',
    'CommitmentExpired', 'Expired', 'AliasTaken', 'InvalidSignature',
    'CommitmentLedger', 'MIN_DELAY', 'EXPIRY_WINDOW',
    'IdentityRegistry',
    'EventLog', 'name_registered', 'NAME_REGISTERED',
    'SystemClock', 'ManualClock',
    'Registrar',
    'relay',
    'export_state', 'load_state',
    'PROTOCOL_VERSION',
]
