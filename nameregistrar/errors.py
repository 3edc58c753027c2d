"""Registrar failures.

Every failure leaves registrar state unchanged. They subclass ValueError so
callers treating bad input uniformly keep working.
"""


class RegistrarError(ValueError):
    """Base class for precondition violations raised by the registrar."""

    message = "registrar error"

    def __init__(self, message=None):
        super().__init__(f"NameRegistrar: {message or self.message}")


class AlreadyNamed(RegistrarError):
    message = "caller already owns an alias"


class AlreadyCommitted(RegistrarError):
    message = "an unexpired commitment already exists for this fingerprint"


class NotReadyOrAbsent(RegistrarError):
    message = "no commitment recorded or minimum delay not yet elapsed"


class CommitmentExpired(RegistrarError):
    message = "commitment expired"


class AliasTaken(RegistrarError):
    message = "alias already claimed"


class InvalidSignature(RegistrarError):
    message = "call signature does not verify"


Expired = CommitmentExpired
