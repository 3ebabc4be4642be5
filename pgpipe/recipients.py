""" recipients.py

turn recipient certificates into the keys a message is encrypted to
"""
import logging
import warnings

from typing import Iterable, Iterator, List, NamedTuple, Optional, Set

from pgpy import PGPKey

from .cert import as_cert
from .constants import ENCRYPTION_FLAGS
from .errors import NoSuitableEncryptionKey

__all__ = ['RecipientKey',
           'select_keys']


class RecipientKey(NamedTuple):
    """
    An encryption target: a public key, and the features its certificate advertises.

    PGPy only holds a weak reference from a subkey to its primary key, so the certificate the key was selected from is
    kept alongside it.
    """
    features: Optional[Set]
    key: PGPKey
    cert: Optional[object] = None

    @property
    def keyid(self) -> str:
        return self.key.fingerprint.keyid


def _encryption_keys(cert, policy, alive) -> Iterator:
    for key in cert.keys(policy):
        if not key.is_supported:
            continue

        if alive and not key.is_alive:
            continue

        if key.is_revoked:
            continue

        if ENCRYPTION_FLAGS & set(key.key_flags):
            yield key


def _recipient(cert, key) -> RecipientKey:
    features = key.features
    if features is not None:
        features = set(features)
    return RecipientKey(features, key.key, cert)


def select_keys(certificates: Iterable) -> List[RecipientKey]:
    """
    Select every key a message should be encrypted to for each of ``certificates``.

    Each certificate contributes all of its supported, live, unrevoked keys that are flagged for storage or transport
    encryption. A certificate with no live key of that kind contributes its expired ones instead. Keys are returned in
    certificate order, then in the order the certificate lists them.

    :param certificates: :py:obj:`~pgpipe.cert.Cert` objects, or public :py:obj:`~pgpy.PGPKey` objects
    :raises: :py:exc:`~pgpipe.errors.NoSuitableEncryptionKey` for the first certificate that has no usable key at all
    :returns: a ``list`` of :py:obj:`RecipientKey`
    """
    recipient_keys = []

    for cert in certificates:
        cert = as_cert(cert)
        policy = cert.policy

        found = [_recipient(cert, key) for key in _encryption_keys(cert, policy, alive=True)]

        if not found:
            logging.debug("{cert!s} has no live encryption key; retrying without the liveness check".format(cert=cert))

            found = [_recipient(cert, key) for key in _encryption_keys(cert, policy, alive=False)]
            for recipient in found:
                warnings.warn("Encrypting to expired key {keyid:s} of {cert!s}".format(keyid=recipient.keyid, cert=cert),
                              stacklevel=2)

        if not found:
            raise NoSuitableEncryptionKey(str(cert))

        logging.debug("{cert!s}: encrypting to {keyids:s}".format(cert=cert, keyids=', '.join(r.keyid for r in found)))
        recipient_keys += found

    return recipient_keys
