"""pgpipe conftest"""
import pytest

import os
import sys

from datetime import datetime, timedelta, timezone

from cryptography.hazmat.backends import openssl

from pgpy import PGPKey
from pgpy import PGPUID
from pgpy.constants import CompressionAlgorithm
from pgpy.constants import EllipticCurveOID
from pgpy.constants import HashAlgorithm
from pgpy.constants import KeyFlags
from pgpy.constants import PubKeyAlgorithm
from pgpy.constants import SymmetricKeyAlgorithm

openssl_ver = openssl.backend.openssl_version_text().split(' ')[1]

# set the CWD and add to sys.path if we need to
os.chdir(os.path.join(os.path.abspath(os.path.dirname(__file__)), os.pardir))

if os.getcwd() not in sys.path:
    sys.path.insert(0, os.getcwd())
else:
    sys.path.insert(0, sys.path.pop(sys.path.index(os.getcwd())))

if os.path.join(os.getcwd(), 'tests') not in sys.path:
    sys.path.insert(1, os.path.join(os.getcwd(), 'tests'))


# pytest hooks

# pytest_configure
# called after command line options have been parsed and all plugins and initial conftest files been loaded.
def pytest_configure(config):
    print("== pgpipe Test Suite ==")

    # display the working directory and the OpenSSL version
    print("Working Directory: " + os.getcwd())
    print("Using OpenSSL " + str(openssl_ver))
    print("")


# key utilities

def new_key(name, key_expiration=None, ciphers=None, passphrase=None, subkeys=1, created=None):
    """An Ed25519 signing key with ``subkeys`` Curve25519 encryption subkeys."""
    if ciphers is None:
        ciphers = [SymmetricKeyAlgorithm.AES256,
                   SymmetricKeyAlgorithm.AES192,
                   SymmetricKeyAlgorithm.AES128]

    primary = PGPKey.new(PubKeyAlgorithm.EdDSA, EllipticCurveOID.Ed25519, created=created)
    uidoptions = {
        'usage': {KeyFlags.Certify, KeyFlags.Sign},
        'primary': True,
        'hashes': [HashAlgorithm.SHA512, HashAlgorithm.SHA256],
        'ciphers': ciphers,
        'compression': [CompressionAlgorithm.Uncompressed],
    }
    if key_expiration is not None:
        uidoptions['key_expiration'] = key_expiration

    primary.add_uid(PGPUID.new(name, email='{}@example.org'.format(name.lower())), **uidoptions)

    for _ in range(subkeys):
        subkey = PGPKey.new(PubKeyAlgorithm.ECDH, EllipticCurveOID.Curve25519, created=created)
        primary.add_subkey(subkey, usage={KeyFlags.EncryptCommunications, KeyFlags.EncryptStorage})

    if passphrase is not None:
        primary.protect(passphrase, SymmetricKeyAlgorithm.AES256, HashAlgorithm.SHA256)

    return primary


def day_after_tomorrow():
    return datetime.now(timezone.utc) + timedelta(days=2)


@pytest.fixture(scope='session')
def alice():
    return new_key('Alice')


@pytest.fixture(scope='session')
def bob():
    return new_key('Bob', subkeys=2)


@pytest.fixture(scope='session')
def carol():
    # expires tomorrow
    return new_key('Carol', key_expiration=timedelta(days=1))


@pytest.fixture(scope='session')
def dave():
    return new_key('Dave', passphrase='QwertyUiop')
