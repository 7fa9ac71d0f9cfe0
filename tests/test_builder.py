"""Tests for decoding and signing quote transactions."""

import base64

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.message import Message, MessageV0, to_bytes_versioned

from solswap.errors import DecodeError, SigningError
from solswap.node.base import LatestBlockhash
from solswap.signing.local import LocalSigner
from solswap.swap.builder import decode_transaction, sign_transaction, with_blockhash

from conftest import make_payload


class TestDecodeTransaction:
    """Tests for decode_transaction."""

    def test_decode_v0(self, keypair):
        tx = decode_transaction(make_payload(keypair.pubkey()))

        assert isinstance(tx.message, MessageV0)
        assert tx.message.account_keys[0] == keypair.pubkey()

    def test_decode_legacy(self, keypair):
        tx = decode_transaction(make_payload(keypair.pubkey(), legacy=True))

        assert isinstance(tx.message, Message)

    @pytest.mark.parametrize(
        "payload",
        [
            "not base64 at all!",
            "",
            base64.b64encode(b"\x01\x02garbage").decode(),
        ],
    )
    def test_malformed_payload(self, payload):
        """Test bad base64 or bad binary raises DecodeError."""
        with pytest.raises(DecodeError):
            decode_transaction(payload)


class TestSignTransaction:
    """Tests for with_blockhash and sign_transaction."""

    @pytest.mark.parametrize("legacy", [False, True])
    def test_with_blockhash_keeps_instructions(self, keypair, legacy):
        tx = decode_transaction(make_payload(keypair.pubkey(), legacy=legacy))
        blockhash = Hash.new_unique()

        message = with_blockhash(tx.message, blockhash)

        assert type(message) is type(tx.message)
        assert message.recent_blockhash == blockhash
        assert message.account_keys == tx.message.account_keys
        assert message.instructions == tx.message.instructions
        assert message.header == tx.message.header

    @pytest.mark.parametrize("legacy", [False, True])
    def test_sign(self, keypair, signer, legacy):
        """Test the signed transaction carries the new blockhash and a valid signature."""
        tx = decode_transaction(make_payload(keypair.pubkey(), legacy=legacy))
        latest = LatestBlockhash(Hash.new_unique(), last_valid_block_height=1234)

        signed = sign_transaction(tx, latest, signer)

        message = signed.transaction.message
        assert message.recent_blockhash == latest.blockhash
        assert signed.last_valid_block_height == 1234
        assert signed.is_legacy is legacy
        assert signed.transaction.signatures[0].verify(keypair.pubkey(), to_bytes_versioned(message))
        assert signed.signature == str(signed.transaction.signatures[0])

    def test_foreign_payer_rejected(self, keypair):
        """Test SigningError when the local key is not a required signer."""
        tx = decode_transaction(make_payload(Keypair().pubkey()))
        latest = LatestBlockhash(Hash.new_unique(), last_valid_block_height=1)

        with pytest.raises(SigningError):
            sign_transaction(tx, latest, LocalSigner(keypair))

    @pytest.mark.parametrize("legacy", [False, True])
    def test_second_required_signer_rejected(self, keypair, signer, legacy):
        """Test SigningError when another account must also sign."""
        co_signer = Keypair().pubkey()
        tx = decode_transaction(make_payload(keypair.pubkey(), legacy=legacy, co_signer=co_signer))
        assert tx.message.header.num_required_signatures == 2
        latest = LatestBlockhash(Hash.new_unique(), last_valid_block_height=1)

        with pytest.raises(SigningError, match=str(co_signer)):
            sign_transaction(tx, latest, signer)
