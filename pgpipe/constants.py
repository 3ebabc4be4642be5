""" constants.py
"""
from __future__ import annotations

from enum import Enum

from typing import Optional

from pgpy.constants import CompressionAlgorithm
from pgpy.constants import KeyFlags
from pgpy.constants import PubKeyAlgorithm
from pgpy.constants import SymmetricKeyAlgorithm

__all__ = [
    'ArmorKind',
    'SignatureMode',
]


#: key usage flags that make a key a candidate encryption target
ENCRYPTION_FLAGS = frozenset({KeyFlags.EncryptStorage, KeyFlags.EncryptCommunications})

#: public key algorithms PGPy is able to encrypt a session key to
ENCRYPTION_ALGORITHMS = frozenset({PubKeyAlgorithm.RSAEncryptOrSign, PubKeyAlgorithm.ECDH})

#: implemented ciphers that we are willing to use to encrypt, in the order we prefer them
CIPHER_PREFERENCES = (SymmetricKeyAlgorithm.AES256,
                      SymmetricKeyAlgorithm.AES192,
                      SymmetricKeyAlgorithm.AES128,
                      SymmetricKeyAlgorithm.Camellia256,
                      SymmetricKeyAlgorithm.Camellia192,
                      SymmetricKeyAlgorithm.Camellia128)

#: AES128 is MTI in RFC 4880
MANDATORY_CIPHER = SymmetricKeyAlgorithm.AES128

DEFAULT_COMPRESSION = CompressionAlgorithm.Uncompressed

#: read size used when streaming a file into a writer chain
COPY_BUFSIZE = 64 * 1024


class ArmorKind(Enum):
    """The block type named in the header and footer lines of an ASCII-armored block."""
    Message = 'MESSAGE'
    Signature = 'SIGNATURE'

    def __str__(self) -> str:
        return self.value


class SignatureMode(Enum):
    """
    How a signature is attached to the data it covers.

    Each member carries the shape of the writer chain that produces it: the armor kind the output is framed with
    (``None`` if the output is never wrapped in generic armor), and whether the signature covers a literal data packet.
    """
    #: A one-pass signed message that wraps a literal data packet.
    Inline = ('INLINE', ArmorKind.Message, True)
    #: Only the signature is emitted; the signed data travels separately.
    Detached = ('DETACHED', ArmorKind.Signature, False)
    #: Dash-escaped text followed by an armored signature block.
    Clear = ('CLEAR', None, False)

    def __new__(cls, label: str, armor_kind: Optional[ArmorKind], literal: bool) -> SignatureMode:
        obj = object.__new__(cls)
        obj._value_ = label
        obj.armor_kind = armor_kind
        obj.literal = literal
        return obj

    @classmethod
    def _missing_(cls, val: object) -> Optional[SignatureMode]:
        if isinstance(val, str) and val.upper() != val:
            return cls(val.upper())
        return None

    def armor_for(self, armor: bool) -> Optional[ArmorKind]:
        """The armor kind to wrap the output in when armoring was requested, or ``None``."""
        if not armor:
            return None
        return self.armor_kind
