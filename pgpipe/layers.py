""" layers.py

the layers a writer chain is built from, listed from the sink inwards
"""
import logging

from pgpy import PGPMessage
from pgpy.constants import CompressionAlgorithm
from pgpy.constants import Features
from pgpy.constants import SymmetricKeyAlgorithm
from pgpy.errors import PGPInsecureCipherError
from pgpy.types import Armorable

from .constants import ArmorKind
from .constants import CIPHER_PREFERENCES
from .constants import DEFAULT_COMPRESSION
from .constants import MANDATORY_CIPHER
from .errors import PipelineError
from .signer import as_signer
from .types import ArmoredBlock
from .types import Layer

__all__ = ['MessageWriter',
           'ArmorWriter',
           'EncryptionWriter',
           'SignatureWriter',
           'DetachedSignatureWriter',
           'CleartextSignatureWriter',
           'LiteralWriter']


class MessageWriter(Layer):
    """
    The outermost layer: writes everything it is given straight through to the sink.

    :param sink: A writable binary file object, or a ``bytearray`` to extend.

    The sink is never flushed or closed; it belongs to whoever created it.
    """
    name = 'sink'

    def __init__(self, sink):
        super(MessageWriter, self).__init__(None)

        if not isinstance(sink, bytearray) and not callable(getattr(sink, 'write', None)):
            raise TypeError("Expected a writable binary sink. Got: {:s}".format(sink.__class__.__name__))

        self._sink = sink

    @property
    def sink(self):
        return self._sink

    def accept(self, payload):
        if not isinstance(payload, (bytes, bytearray, memoryview)):
            payload = bytes(payload)

        if isinstance(self._sink, bytearray):
            self._sink += payload

        else:
            self._sink.write(payload)

    def _finalize(self):
        return None


class ArmorWriter(Layer):
    """
    Frames everything it receives as a single ASCII-armored block.

    :param kind: The block type to announce in the armor header and footer lines.
    :type kind: :py:obj:`~pgpipe.constants.ArmorKind`
    """
    name = 'armor'

    def __init__(self, target, kind=ArmorKind.Message):
        super(ArmorWriter, self).__init__(target)
        self.kind = ArmorKind(kind)
        self._buffer = bytearray()
        self._magic = set()

    def __repr__(self):
        return "<ArmorWriter [{:s}]>".format(str(self.kind))

    def accept(self, payload):
        if isinstance(payload, Armorable):
            self._magic.add(payload.magic)

        self._buffer += bytes(payload)

    def _finalize(self):
        mismatched = self._magic - {str(self.kind)}
        if mismatched:
            raise PipelineError("Cannot armor a {:s} block as {:s}".format(', '.join(sorted(mismatched)), str(self.kind)))

        block = ArmoredBlock.frame(self.kind, self._buffer)
        return str(block).encode('ascii')


class EncryptionWriter(Layer):
    """
    Encrypts the message it receives once, under a single session key that is then encrypted to every recipient.

    :param recipients: The keys to encrypt to.
    :type recipients: ``list`` of :py:obj:`~pgpipe.recipients.RecipientKey`
    :param cipher: The symmetric cipher to use. If ``None``, the most preferred cipher every recipient accepts is used.
    :type cipher: :py:obj:`~pgpy.constants.SymmetricKeyAlgorithm`
    """
    name = 'encryptor'

    @staticmethod
    def recipient_ciphers(key):
        owner = key if key.is_primary else key.parent
        ciphers = set()
        for uid in owner.userids:
            if uid.selfsig and uid.selfsig.cipherprefs:
                ciphers.update(uid.selfsig.cipherprefs)
        return ciphers

    @classmethod
    def negotiate_cipher(cls, recipients):
        ciphers = set(CIPHER_PREFERENCES)
        for recipient in recipients:
            ciphers &= cls.recipient_ciphers(recipient.key)

        return next((c for c in CIPHER_PREFERENCES if c in ciphers), MANDATORY_CIPHER)

    def __init__(self, target, recipients, cipher=None):
        super(EncryptionWriter, self).__init__(target)
        self._recipients = list(recipients)
        self._message = None

        if len(self._recipients) == 0:
            raise PipelineError("No recipients to encrypt to")

        for recipient in self._recipients:
            if not recipient.key.is_public:
                raise PipelineError("Recipient {:s} is a secret key, not a certificate".format(recipient.keyid))

        if cipher is None:
            cipher = self.negotiate_cipher(self._recipients)

        cipher = SymmetricKeyAlgorithm(cipher)
        if cipher.is_insecure:
            raise PGPInsecureCipherError("{:s} is insecure and may not be used to encrypt".format(cipher.name))

        if not cipher.is_supported:
            raise NotImplementedError(cipher.name)

        self.cipher = cipher

    @property
    def recipients(self):
        return list(self._recipients)

    def accept(self, payload):
        if not isinstance(payload, PGPMessage):
            raise PipelineError("Expected: PGPMessage. Got: {:s}".format(payload.__class__.__name__))

        if self._message is not None:
            raise PipelineError("Only one message can be encrypted per chain")

        self._message = payload

    def _finalize(self):
        if self._message is None:
            raise PipelineError("Nothing to encrypt")

        sessionkey = self.cipher.gen_key()
        msg = self._message

        for recipient in self._recipients:
            if recipient.features is not None and Features.ModificationDetection not in recipient.features:
                logging.debug("{keyid:s} does not advertise modification detection; "
                              "using it regardless".format(keyid=recipient.keyid))

            msg = recipient.key.encrypt(msg, cipher=self.cipher, sessionkey=sessionkey)

        del sessionkey
        logging.debug("encrypted with {cipher:s} to {n:d} key(s)".format(cipher=self.cipher.name, n=len(self._recipients)))
        return msg


class SignatureWriter(Layer):
    """
    Signs the message it receives and attaches the signature to it, producing a one-pass signed message.

    :param signer: A :py:obj:`~pgpipe.signer.Signer`, or a secret :py:obj:`~pgpy.PGPKey`.
    """
    name = 'signer'

    def __init__(self, target, signer):
        super(SignatureWriter, self).__init__(target)
        self._signer = as_signer(signer)
        self._message = None

    def accept(self, payload):
        if not isinstance(payload, PGPMessage):
            raise PipelineError("Expected: PGPMessage. Got: {:s}".format(payload.__class__.__name__))

        if self._message is not None:
            raise PipelineError("Only one message can be signed per chain")

        self._message = payload

    def _finalize(self):
        if self._message is None:
            raise PipelineError("Nothing to sign")

        msg = self._message
        msg |= self._signer.sign(msg)
        return msg


class _BufferedSignatureWriter(Layer):
    writable = True

    def __init__(self, target, signer):
        super(_BufferedSignatureWriter, self).__init__(target)
        self._signer = as_signer(signer)
        self._buffer = bytearray()

    def accept(self, payload):
        self._buffer += payload


class DetachedSignatureWriter(_BufferedSignatureWriter):
    """
    Signs the plaintext written into it, and passes on only the signature.

    :param signer: A :py:obj:`~pgpipe.signer.Signer`, or a secret :py:obj:`~pgpy.PGPKey`.
    """
    name = 'detached signer'

    def _finalize(self):
        subject = PGPMessage.new(bytes(self._buffer), format='b', compression=CompressionAlgorithm.Uncompressed)
        return self._signer.sign(subject)


class CleartextSignatureWriter(_BufferedSignatureWriter):
    """
    Signs the UTF-8 text written into it, and passes on the text dash-escaped and followed by an armored signature
    block. This framing is complete on its own and is never wrapped in generic armor.

    :param signer: A :py:obj:`~pgpipe.signer.Signer`, or a secret :py:obj:`~pgpy.PGPKey`.
    """
    name = 'cleartext signer'

    def _finalize(self):
        try:
            text = bytes(self._buffer).decode('utf-8')

        except UnicodeDecodeError as ex:
            raise PipelineError("Cleartext signing requires UTF-8 text") from ex

        msg = PGPMessage.new(text, cleartext=True)
        msg |= self._signer.sign(msg)
        return str(msg).encode('utf-8')


class LiteralWriter(Layer):
    """
    The layer plaintext is written into: packs everything written into a literal data packet.

    :param format: The literal data format octet: ``'b'`` (binary), ``'t'`` (text), ``'u'`` (UTF-8) or ``'m'`` (MIME).
    :type format: ``str``
    :param compression: Compress the message with this algorithm.
    :type compression: :py:obj:`~pgpy.constants.CompressionAlgorithm`
    :param sensitive: If ``True``, mark the message as being for the recipient's eyes only.
    :type sensitive: ``bool``
    """
    name = 'literal'
    writable = True

    def __init__(self, target, format='b', compression=DEFAULT_COMPRESSION, sensitive=False):
        super(LiteralWriter, self).__init__(target)

        if format not in ('b', 't', 'u', 'm'):
            raise ValueError("Unknown literal data format: {!r}".format(format))

        self.format = format
        self.compression = CompressionAlgorithm(compression)
        self.sensitive = sensitive
        self._buffer = bytearray()

    def accept(self, payload):
        self._buffer += payload

    def _finalize(self):
        return PGPMessage.new(bytes(self._buffer),
                              format=self.format,
                              compression=self.compression,
                              sensitive=self.sensitive)
