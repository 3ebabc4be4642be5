""" signer.py
"""
from pgpy import PGPKey
from pgpy.errors import PGPDecryptionError

from .errors import PipelineError

__all__ = ['Signer',
           'as_signer']


class Signer(object):
    """
    The capability to sign: a secret key, the passphrase needed to use it (if any), and the preferences every signature
    it makes is created with.

    Any object with a ``sign(subject)`` method returning a :py:obj:`~pgpy.PGPSignature` and a ``fingerprint`` can be
    used wherever a :py:obj:`Signer` is expected.

    :param key: A secret key that is able to sign, or has a subkey that is.
    :type key: :py:obj:`~pgpy.PGPKey`
    :param passphrase: The passphrase to unlock ``key`` with, if it is protected.
    :type passphrase: ``str``, ``bytes``

    Any other keyword arguments are passed on to :py:meth:`pgpy.PGPKey.sign` for every signature made, for example
    ``hash``, ``expires``, ``notation`` or ``created``.
    """
    def __init__(self, key, passphrase=None, **prefs):
        if not isinstance(key, PGPKey):
            raise TypeError("Expected: PGPKey. Got: {:s}".format(key.__class__.__name__))

        if key.is_public:
            raise PipelineError("Key {:s} is not an OpenPGP secret key (maybe certificate?)".format(key.fingerprint.keyid))

        self._key = key
        self._passphrase = passphrase
        self._prefs = prefs

    @classmethod
    def from_blob(cls, blob, passphrase=None, **prefs):
        key, _ = PGPKey.from_blob(blob)
        return cls(key, passphrase, **prefs)

    @classmethod
    def from_file(cls, filename, passphrase=None, **prefs):
        key, _ = PGPKey.from_file(filename)
        return cls(key, passphrase, **prefs)

    def __repr__(self):
        return "<Signer {}>".format(self.fingerprint)

    @property
    def key(self):
        return self._key

    @property
    def fingerprint(self):
        return self._key.fingerprint

    @property
    def keyid(self):
        return self._key.fingerprint.keyid

    def sign(self, subject):
        """
        Sign ``subject`` with the key held by this signer, unlocking it for the duration of the operation if needed.

        :raises: :py:exc:`~pgpipe.errors.PipelineError` if the key is protected and cannot be unlocked
        :returns: :py:obj:`~pgpy.PGPSignature`
        """
        if not self._key.is_protected:
            return self._key.sign(subject, **self._prefs)

        if self._passphrase is None:
            raise PipelineError("Key {:s} is protected and no passphrase was provided".format(self.keyid))

        try:
            with self._key.unlock(self._passphrase):
                return self._key.sign(subject, **self._prefs)

        except PGPDecryptionError as ex:
            raise PipelineError("Key {:s} could not be unlocked by the provided passphrase".format(self.keyid)) from ex


def as_signer(signer):
    """Wrap a bare secret :py:obj:`~pgpy.PGPKey` in a :py:obj:`Signer`; anything else is taken to be a signer already."""
    if isinstance(signer, PGPKey):
        return Signer(signer)

    if not callable(getattr(signer, 'sign', None)):
        raise TypeError("Expected a signer, got: {:s}".format(signer.__class__.__name__))

    return signer
