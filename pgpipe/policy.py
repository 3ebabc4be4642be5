""" policy.py

the parameters that decide which keys of a certificate may be used
"""
from datetime import datetime, timezone

from pgpy.constants import PubKeyAlgorithm

from .constants import ENCRYPTION_ALGORITHMS

__all__ = ['Policy']


class Policy(object):
    """
    A policy is attached to every :py:obj:`~pgpipe.cert.Cert` and is consulted each time the keys of that certificate
    are enumerated. Nothing it computes is cached between enumerations, so a policy without a ``reference_time``
    always judges liveness against the current clock.

    :param reference_time: Evaluate key liveness at this time instead of now. Naive datetimes are taken to be UTC.
    :type reference_time: :py:obj:`~datetime.datetime` or ``None``
    :param algorithms: The public key algorithms that are considered supported.
    :type algorithms: an iterable of :py:obj:`~pgpy.constants.PubKeyAlgorithm`
    """
    def __init__(self, reference_time=None, algorithms=ENCRYPTION_ALGORITHMS):
        if reference_time is not None and reference_time.tzinfo is None:
            reference_time = reference_time.replace(tzinfo=timezone.utc)

        self._reference_time = reference_time
        self._algorithms = frozenset(PubKeyAlgorithm(alg) for alg in algorithms)

    @property
    def reference_time(self):
        return self._reference_time

    @property
    def algorithms(self):
        return self._algorithms

    def __repr__(self):
        return "<Policy at {}, algorithms={}>".format(self._reference_time or 'now',
                                                      sorted(alg.name for alg in self._algorithms))

    def now(self):
        """The time liveness is judged at."""
        if self._reference_time is not None:
            return self._reference_time

        return datetime.now(timezone.utc)

    def is_supported(self, key_algorithm):
        return key_algorithm in self._algorithms

    def is_alive(self, created, expires_at, now=None):
        """``True`` if something created at ``created`` and expiring at ``expires_at`` (if ever) is live at ``now``."""
        if now is None:
            now = self.now()

        if created is not None and created > now:
            return False

        return expires_at is None or expires_at > now
