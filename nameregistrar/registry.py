"""
Identity registry: maps a claimant identity to its finalized alias and
tracks which alias hashes are taken.

Both mappings are write-once: an identity is named at most once and a
taken alias hash is never released.
"""

from .errors import AlreadyNamed, AliasTaken


class IdentityRegistry:
    def __init__(self, owners=None, taken=None):
        # identity -> {'alias': str, 'alias_hash': str}
        self._owners = {} if owners is None else owners
        # alias_hash -> identity
        self._taken = {} if taken is None else taken

    def is_claimed(self, alias_hash):
        return alias_hash in self._taken

    def owner_alias(self, identity):
        """The alias owned by identity, or '' if unclaimed."""
        record = self._owners.get(identity)
        return record['alias'] if record else ''

    def owner_alias_hash(self, identity):
        """Hash of the alias owned by identity, or '' if unclaimed."""
        record = self._owners.get(identity)
        return record['alias_hash'] if record else ''

    def is_named(self, identity):
        return identity in self._owners

    def check(self, identity, alias_hash):
        """Raise if identity cannot take alias_hash. Does not mutate."""
        if self.is_named(identity):
            raise AlreadyNamed()
        if self.is_claimed(alias_hash):
            raise AliasTaken()

    def finalize(self, identity, alias, alias_hash):
        """Bind alias to identity and mark alias_hash taken.

        Call only after the matching commitment was consumed.
        """
        self.check(identity, alias_hash)
        self._owners[identity] = {'alias': alias, 'alias_hash': alias_hash}
        self._taken[alias_hash] = identity
        return self

    @property
    def owners(self):
        """Copy of identity -> alias record mappings."""
        return {k: dict(v) for k, v in self._owners.items()}

    @property
    def taken(self):
        """Copy of alias_hash -> owning identity mappings."""
        return dict(self._taken)

    @property
    def size(self):
        return len(self._owners)
