""" pgpipe :: OpenPGP encryption and signing pipelines
"""

from .cert import Cert
from .constants import ArmorKind
from .constants import SignatureMode
from .pipeline import encrypt
from .pipeline import encrypt_file
from .pipeline import sign
from .pipeline import sign_file
from .policy import Policy
from .recipients import RecipientKey
from .recipients import select_keys
from .signer import Signer
from .stream import WriterChain
from .stream import build_encryptor
from .stream import build_signer

__all__ = ['constants',
           'errors',
           'ArmorKind',
           'Cert',
           'Policy',
           'RecipientKey',
           'SignatureMode',
           'Signer',
           'WriterChain',
           'build_encryptor',
           'build_signer',
           'encrypt',
           'encrypt_file',
           'select_keys',
           'sign',
           'sign_file', ]
