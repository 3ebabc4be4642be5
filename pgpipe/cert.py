""" cert.py

certificates, and the keys they hold, as seen by a policy
"""
import copy

from datetime import timezone

from pgpy import PGPKey
from pgpy.constants import KeyFlags

from .errors import PipelineError
from .policy import Policy

__all__ = ['Cert',
           'ValidKey',
           'as_cert']


def _aware(dt):
    # some versions of pgpy return tz-naive objects, even though all timestamps are in UTC
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class ValidKey(object):
    """
    One key of a :py:obj:`Cert` (the primary key or a subkey), evaluated under a :py:obj:`~pgpipe.policy.Policy` at a
    single point in time.
    """
    def __init__(self, cert, key, policy, now):
        self._cert = cert
        self._key = key
        self._policy = policy
        self._now = now

    def __repr__(self):
        return "<ValidKey {keyid} of {cert}>".format(keyid=self.keyid, cert=self._cert)

    @property
    def cert(self):
        return self._cert

    @property
    def key(self):
        """The public :py:obj:`~pgpy.PGPKey` for this key."""
        return self._key

    @property
    def keyid(self):
        return self._key.fingerprint.keyid

    @property
    def fingerprint(self):
        return self._key.fingerprint

    @property
    def key_algorithm(self):
        return self._key.key_algorithm

    @property
    def is_primary(self):
        return self._key.is_primary

    @property
    def binding_signature(self):
        """The signature that carries this key's flags and expiration: a self-signature, or the subkey binding."""
        if self._key.is_primary:
            return self._cert.primary_selfsig

        return next(iter(self._key.self_signatures), None)

    @property
    def key_flags(self):
        sig = self.binding_signature
        flags = set(sig.key_flags) if sig is not None else set()

        # RFC 4880 says that primary keys *must* be capable of certification
        if self._key.is_primary:
            flags.add(KeyFlags.Certify)

        return flags

    @property
    def features(self):
        return self._cert.features

    @property
    def created(self):
        return _aware(self._key.created)

    @property
    def expires_at(self):
        if self._key.is_primary:
            return _aware(self._key.expires_at)

        sig = self.binding_signature
        if sig is None or sig.key_expiration is None:
            return None

        return self.created + sig.key_expiration

    @property
    def is_alive(self):
        """``True`` if both this key and its certificate are live at the time this key was enumerated."""
        if not self._policy.is_alive(self._cert.created, self._cert.expires_at, self._now):
            return False

        return self._policy.is_alive(self.created, self.expires_at, self._now)

    @property
    def is_revoked(self):
        if self._cert.is_revoked:
            return True

        return any(True for _ in self._key.revocation_signatures)

    @property
    def is_supported(self):
        return self._policy.is_supported(self.key_algorithm)


class Cert(object):
    """
    An OpenPGP certificate with the :py:obj:`~pgpipe.policy.Policy` its keys are enumerated under.

    :param key: The certificate. If a secret key is given, only its public half is kept.
    :type key: :py:obj:`~pgpy.PGPKey`
    :param policy: The policy to attach. Defaults to a new :py:obj:`~pgpipe.policy.Policy`.
    """
    def __init__(self, key, policy=None):
        if not isinstance(key, PGPKey):
            raise TypeError("Expected: PGPKey. Got: {:s}".format(key.__class__.__name__))

        if not key.is_primary:
            raise PipelineError("Key {:s} is a subkey, not a certificate".format(key.fingerprint.keyid))

        if not key.is_public:
            key = key.pubkey

        self._key = key
        self.policy = policy

    @classmethod
    def from_blob(cls, blob, policy=None):
        key, _ = PGPKey.from_blob(blob)
        return cls(key, policy=policy)

    @classmethod
    def from_file(cls, filename, policy=None):
        key, _ = PGPKey.from_file(filename)
        return cls(key, policy=policy)

    def __str__(self):
        uid = self.primary_uid
        if uid is None:
            return str(self.fingerprint)
        return "{} ({})".format(self.fingerprint, uid.userid)

    def __repr__(self):
        return "<Cert {}>".format(self.fingerprint)

    @property
    def policy(self):
        return self._policy

    @policy.setter
    def policy(self, policy):
        if policy is None:
            policy = Policy()
        self._policy = policy

    @property
    def key(self):
        return self._key

    @property
    def fingerprint(self):
        return self._key.fingerprint

    @property
    def created(self):
        return _aware(self._key.created)

    @property
    def expires_at(self):
        return _aware(self._key.expires_at)

    @property
    def userids(self):
        return self._key.userids

    @property
    def primary_uid(self):
        uids = [uid for uid in self._key.userids if uid.selfsig is not None]
        return next((uid for uid in uids if uid.is_primary), next(iter(uids), None))

    @property
    def primary_selfsig(self):
        uid = self.primary_uid
        if uid is None:
            return None
        return uid.selfsig

    @property
    def features(self):
        """A copy of the features advertised by the primary User ID, or ``None`` if there is no self-signature."""
        sig = self.primary_selfsig
        if sig is None:
            return None
        return set(copy.copy(sig.features))

    @property
    def is_revoked(self):
        return any(True for _ in self._key.revocation_signatures)

    def keys(self, policy=None):
        """
        Iterate over the primary key and then every subkey, in the order they are bound, as
        :py:obj:`ValidKey` objects.

        :param policy: Enumerate under this policy instead of the attached one.
        """
        if policy is None:
            policy = self._policy

        now = policy.now()
        yield ValidKey(self, self._key, policy, now)

        for subkey in self._key.subkeys.values():
            yield ValidKey(self, subkey, policy, now)


def as_cert(cert):
    """Wrap a bare :py:obj:`~pgpy.PGPKey` in a :py:obj:`Cert` with the default policy."""
    if isinstance(cert, PGPKey):
        return Cert(cert)
    return cert
