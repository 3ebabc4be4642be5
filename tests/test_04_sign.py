""" test signing in each mode, end to end
"""
import pytest

from pgpy import PGPMessage
from pgpy import PGPSignature
from pgpy.constants import HashAlgorithm
from pgpy.constants import SignatureType

from pgpipe import SignatureMode
from pgpipe import Signer
from pgpipe import build_signer
from pgpipe import sign
from pgpipe.errors import FinalizeFailed
from pgpipe.errors import PipelineError


class TestSignatureMode(object):
    @pytest.mark.parametrize('name,mode', [('inline', SignatureMode.Inline),
                                           ('Detached', SignatureMode.Detached),
                                           ('CLEAR', SignatureMode.Clear)])
    def test_by_name(self, name, mode):
        assert SignatureMode(name) is mode

    def test_unknown(self):
        with pytest.raises(ValueError):
            SignatureMode('sideways')

    def test_armor_for(self):
        assert str(SignatureMode.Inline.armor_for(True)) == 'MESSAGE'
        assert str(SignatureMode.Detached.armor_for(True)) == 'SIGNATURE'
        assert SignatureMode.Clear.armor_for(True) is None
        assert all(mode.armor_for(False) is None for mode in SignatureMode)


class TestSign(object):
    @pytest.mark.parametrize('armor', [True, False])
    def test_inline(self, alice, armor):
        out = sign(alice, b'hi', armor=armor)

        assert out.startswith(b'-----BEGIN PGP MESSAGE-----') is armor
        msg = PGPMessage.from_blob(out)
        assert msg.type == 'literal'
        assert bytes(msg.message) == b'hi'
        assert len(msg.signatures) == 1
        assert alice.pubkey.verify(msg)

    @pytest.mark.parametrize('armor', [True, False])
    def test_detached(self, alice, armor):
        out = sign(alice, b'hi', mode=SignatureMode.Detached, armor=armor)

        assert out.startswith(b'-----BEGIN PGP SIGNATURE-----') is armor
        assert out.rstrip().endswith(b'-----END PGP SIGNATURE-----') is armor
        sig = PGPSignature.from_blob(out)
        assert sig.type == SignatureType.BinaryDocument
        assert sig.signer == alice.fingerprint.keyid
        assert alice.pubkey.verify(b'hi', sig)
        assert not alice.pubkey.verify(b'bye', sig)

    @pytest.mark.parametrize('armor', [True, False])
    def test_clear(self, alice, armor):
        text = u"Hello,\n- dashes are escaped\nthe end"
        out = sign(alice, text, mode=SignatureMode.Clear, armor=armor)

        assert out.startswith(b'-----BEGIN PGP SIGNED MESSAGE-----')
        assert b'\n- - dashes are escaped\n' in out
        assert b'-----BEGIN PGP SIGNATURE-----' in out

        msg = PGPMessage.from_blob(out)
        assert msg.type == 'cleartext'
        assert msg.message == text
        assert alice.pubkey.verify(msg)

    def test_clear_not_utf8(self, alice):
        with pytest.raises(FinalizeFailed) as excinfo:
            sign(alice, b'\xff\xfe\x00', mode=SignatureMode.Clear)

        assert isinstance(excinfo.value.cause, PipelineError)
        assert isinstance(excinfo.value.cause.__cause__, UnicodeDecodeError)

    def test_empty(self, alice):
        msg = PGPMessage.from_blob(sign(alice, b''))

        assert bytes(msg.message) == b''
        assert alice.pubkey.verify(msg)

    def test_preferences(self, alice):
        signer = Signer(alice, hash=HashAlgorithm.SHA256)
        sig = PGPSignature.from_blob(sign(signer, b'hi', mode=SignatureMode.Detached))

        assert sig.hash_algorithm == HashAlgorithm.SHA256

    def test_protected(self, dave):
        out = sign(Signer(dave, 'QwertyUiop'), b'hi', mode=SignatureMode.Detached)

        assert dave.pubkey.verify(b'hi', PGPSignature.from_blob(out))
        assert not dave.is_unlocked

    def test_protected_no_passphrase(self, dave):
        with pytest.raises(FinalizeFailed) as excinfo:
            sign(dave, b'hi')

        assert excinfo.value.layer == 'signer'
        assert 'no passphrase' in str(excinfo.value.cause)

    def test_protected_wrong_passphrase(self, dave):
        with pytest.raises(FinalizeFailed) as excinfo:
            sign(Signer(dave, 'wrong'), b'hi', mode=SignatureMode.Detached)

        assert excinfo.value.layer == 'detached signer'
        assert isinstance(excinfo.value.cause, PipelineError)

    def test_chunks(self, alice):
        sink = bytearray()
        chain = build_signer(alice, sink, mode='detached')

        chain.write(b'h')
        chain.write(u'i')
        chain.finalize()

        assert alice.pubkey.verify(b'hi', PGPSignature.from_blob(bytes(sink)))
