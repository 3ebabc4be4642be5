""" stream.py

assemble writer chains, push data through them, and unwind them
"""
import logging
import warnings

from .constants import COPY_BUFSIZE
from .constants import DEFAULT_COMPRESSION
from .constants import SignatureMode
from .decorators import LayerAction
from .errors import FinalizeFailed
from .errors import LayerBuildFailed
from .errors import PipelineError
from .errors import WriteFailed
from .layers import ArmorWriter
from .layers import CleartextSignatureWriter
from .layers import DetachedSignatureWriter
from .layers import EncryptionWriter
from .layers import LiteralWriter
from .layers import MessageWriter
from .layers import SignatureWriter

__all__ = ['WriterChain',
           'build_encryptor',
           'build_signer',
           'write',
           'finalize',
           'copy_and_finalize']


class WriterChain(object):
    """
    A stack of layers, listed outermost first: the first layer owns the sink, the last one takes the plaintext.

    Data written to the chain goes to the innermost layer. :py:meth:`finalize` then unwinds the stack from the inside
    out, each layer handing its final product to the layer it is wrapped in, until the outermost layer has written
    everything to the sink. The sink itself is left open.
    """
    def __init__(self, layers):
        self._layers = list(layers)
        self._finalized = False

        if len(self._layers) == 0:
            raise PipelineError("A writer chain needs at least one layer")

        if not self._layers[-1].writable:
            raise PipelineError("{!r} cannot be written into".format(self._layers[-1]))

    def __repr__(self):
        return "<WriterChain [{:s}]>".format(' -> '.join(layer.name for layer in self._layers))

    @property
    def layers(self):
        return list(self._layers)

    @property
    def sink(self):
        return self._layers[0].sink

    @property
    def innermost(self):
        return self._layers[-1]

    @property
    def is_finalized(self):
        return self._finalized

    @LayerAction(is_finalized=False)
    def write(self, data):
        if isinstance(data, str):
            data = data.encode('utf-8')

        try:
            self.innermost.write(data)

        except Exception as ex:
            raise WriteFailed(ex) from ex

        return len(data)

    @LayerAction(is_finalized=False)
    def finalize(self):
        self._finalized = True

        for layer in reversed(self._layers):
            try:
                layer.finalize()

            except Exception as ex:
                logging.debug("{layer!r} failed to finalize: {ex!s}".format(layer=layer, ex=ex))
                raise FinalizeFailed(layer.name, ex) from ex

            logging.debug("finalized {layer!r}".format(layer=layer))

    def copy_and_finalize(self, source, bufsize=COPY_BUFSIZE):
        while True:
            chunk = source.read(bufsize)
            if not chunk:
                break

            if isinstance(chunk, str):
                cause = TypeError("Expected a binary source. Got: {:s}".format(source.__class__.__name__))
                raise WriteFailed(cause) from cause

            self.write(chunk)

        self.finalize()


def write(chain, data):
    return chain.write(data)


def finalize(chain):
    chain.finalize()


def copy_and_finalize(chain, source, bufsize=COPY_BUFSIZE):
    chain.copy_and_finalize(source, bufsize)


def _build(layer_cls, *args, **kwargs):
    try:
        return layer_cls(*args, **kwargs)

    except Exception as ex:
        raise LayerBuildFailed(layer_cls.name, ex) from ex


def _unused(prefs):
    if prefs:
        warnings.warn("Ignoring unused preferences: {:s}".format(', '.join(sorted(prefs))), stacklevel=3)


def build_encryptor(recipients, sink, signer=None, armor=True, **prefs):
    """
    Build a chain that encrypts everything written into it to ``recipients``, and optionally signs it first.

    :param recipients: The keys to encrypt to, as returned by :py:func:`~pgpipe.recipients.select_keys`.
    :param sink: A writable binary file object, or a ``bytearray``.
    :param signer: If given, a :py:obj:`~pgpipe.signer.Signer` or secret key to sign the message with.
    :param armor: If ``True``, the output is ASCII-armored.
    :raises: :py:exc:`~pgpipe.errors.LayerBuildFailed` if any layer could not be created.
    :returns: :py:obj:`WriterChain`

    The following optional keyword arguments are recognized:

    :keyword cipher: The symmetric cipher to encrypt with.
    :type cipher: :py:obj:`~pgpy.constants.SymmetricKeyAlgorithm`
    :keyword compression: The compression algorithm to use. Default is ``Uncompressed``.
    :type compression: :py:obj:`~pgpy.constants.CompressionAlgorithm`
    :keyword format: The literal data format. Default is ``'b'``.
    :type format: ``str``
    :keyword sensitive: Mark the message as being for the recipient's eyes only. Default is ``False``.
    :type sensitive: ``bool``
    """
    cipher = prefs.pop('cipher', None)
    compression = prefs.pop('compression', DEFAULT_COMPRESSION)
    format = prefs.pop('format', 'b')
    sensitive = prefs.pop('sensitive', False)
    _unused(prefs)

    layers = [_build(MessageWriter, sink)]

    if armor:
        layers.append(_build(ArmorWriter, layers[-1], SignatureMode.Inline.armor_kind))

    layers.append(_build(EncryptionWriter, layers[-1], recipients, cipher=cipher))

    if signer is not None:
        layers.append(_build(SignatureWriter, layers[-1], signer))

    layers.append(_build(LiteralWriter, layers[-1], format=format, compression=compression, sensitive=sensitive))

    chain = WriterChain(layers)
    logging.debug("built {chain!r}".format(chain=chain))
    return chain


def build_signer(signer, sink, mode=SignatureMode.Inline, armor=True, **prefs):
    """
    Build a chain that signs everything written into it.

    :param signer: A :py:obj:`~pgpipe.signer.Signer` or secret key to sign with.
    :param sink: A writable binary file object, or a ``bytearray``.
    :param mode: How the signature is attached to the data.
    :type mode: :py:obj:`~pgpipe.constants.SignatureMode`
    :param armor: If ``True``, the output is ASCII-armored. Cleartext signatures are never wrapped in armor.
    :raises: :py:exc:`~pgpipe.errors.LayerBuildFailed` if any layer could not be created.
    :returns: :py:obj:`WriterChain`

    ``compression``, ``format`` and ``sensitive`` are recognized as with :py:func:`build_encryptor`, and only apply to
    inline signatures; with any other mode they are ignored with a warning.

    Cleartext signing (:py:obj:`~pgpipe.constants.SignatureMode.Clear`) requires the data written into the chain to be
    UTF-8 text. Anything else fails at finalize with :py:exc:`~pgpipe.errors.FinalizeFailed`.
    """
    mode = SignatureMode(mode)
    if mode.literal:
        compression = prefs.pop('compression', DEFAULT_COMPRESSION)
        format = prefs.pop('format', 'b')
        sensitive = prefs.pop('sensitive', False)
    _unused(prefs)

    layers = [_build(MessageWriter, sink)]

    kind = mode.armor_for(armor)
    if kind is not None:
        layers.append(_build(ArmorWriter, layers[-1], kind))

    if mode is SignatureMode.Inline:
        layers.append(_build(SignatureWriter, layers[-1], signer))

    elif mode is SignatureMode.Detached:
        layers.append(_build(DetachedSignatureWriter, layers[-1], signer))

    else:
        layers.append(_build(CleartextSignatureWriter, layers[-1], signer))

    if mode.literal:
        layers.append(_build(LiteralWriter, layers[-1], format=format, compression=compression, sensitive=sensitive))

    chain = WriterChain(layers)
    logging.debug("built {chain!r}".format(chain=chain))
    return chain
