""" pipeline.py

one-call encryption and signing of byte strings and files
"""
import io

from .constants import SignatureMode
from .errors import SinkCreationFailed
from .errors import SourceOpenFailed
from .recipients import select_keys
from .stream import build_encryptor
from .stream import build_signer

__all__ = ['encrypt',
           'encrypt_file',
           'sign',
           'sign_file']


def _run(chain, data):
    if isinstance(data, memoryview):
        data = data.tobytes()

    chain.write(data)
    chain.finalize()


def _stream_file(chain, input):
    try:
        source = open(input, 'rb')

    except OSError as ex:
        raise SourceOpenFailed("Unable to open {}: {}".format(input, ex)) from ex

    with source:
        chain.copy_and_finalize(source)


def _open_output(output):
    try:
        return open(output, 'wb')

    except OSError as ex:
        raise SinkCreationFailed("Unable to create {}: {}".format(output, ex)) from ex


def encrypt(recipients, data, signer=None, *, armor=True, **prefs):
    """
    Encrypt ``data`` to every usable key of each of ``recipients``.

    :param recipients: :py:obj:`~pgpipe.cert.Cert` objects, or public :py:obj:`~pgpy.PGPKey` objects.
    :param data: The plaintext. ``str`` is encoded as UTF-8.
    :param signer: If given, the message is signed with it before it is encrypted.
    :param armor: If ``True``, return an ASCII-armored message.
    :raises: :py:exc:`~pgpipe.errors.NoSuitableEncryptionKey` if a recipient has no key to encrypt to.
    :returns: ``bytes``

    Preferences (``cipher``, ``compression``, ``format``, ``sensitive``) are passed on to
    :py:func:`~pgpipe.stream.build_encryptor`.
    """
    keys = select_keys(recipients)
    sink = io.BytesIO()
    _run(build_encryptor(keys, sink, signer=signer, armor=armor, **prefs), data)
    return sink.getvalue()


def encrypt_file(recipients, input, output, signer=None, *, armor=True, **prefs):
    """
    Encrypt the file at ``input`` to ``recipients``, writing the message to ``output``.

    Recipient keys are resolved before either file is touched. ``output`` is created, or truncated if it exists.
    """
    keys = select_keys(recipients)

    with _open_output(output) as sink:
        chain = build_encryptor(keys, sink, signer=signer, armor=armor, **prefs)
        _stream_file(chain, input)


def sign(signer, data, *, mode=SignatureMode.Inline, armor=True, **prefs):
    """
    Sign ``data``.

    :param signer: A :py:obj:`~pgpipe.signer.Signer` or secret :py:obj:`~pgpy.PGPKey`.
    :param data: The data to sign. ``str`` is encoded as UTF-8.
    :param mode: :py:obj:`~pgpipe.constants.SignatureMode`. Default is ``Inline``.
    :param armor: If ``True``, return ASCII-armored output. Ignored for cleartext signatures.
    :returns: ``bytes``: the signed message, or the signature alone for detached signatures.

    Cleartext signatures require ``data`` to be UTF-8 text; anything else raises
    :py:exc:`~pgpipe.errors.FinalizeFailed`.
    """
    sink = io.BytesIO()
    _run(build_signer(signer, sink, mode=mode, armor=armor, **prefs), data)
    return sink.getvalue()


def sign_file(signer, input, output, *, mode=SignatureMode.Inline, armor=True, **prefs):
    """Sign the file at ``input``, writing the result to ``output``."""
    with _open_output(output) as sink:
        chain = build_signer(signer, sink, mode=mode, armor=armor, **prefs)
        _stream_file(chain, input)
