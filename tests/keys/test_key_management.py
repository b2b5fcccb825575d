"""
Tests for key generation, storage and signer construction.
"""

from unittest.mock import patch

import pytest

from accumulate_wallet.keys.key_management import KeyManagementService, KeyPairData
from accumulate_wallet.runtime.errors import KeyGenerationError, ValidationError
from accumulate_wallet.signers.ed25519 import LiteIdentitySigner
from accumulate_wallet.signers.keypage import KeyPageSigner

PAGE = "acc://alice.acme/book/1"


class TestGeneration:
    """Test key pair generation and lite derivation."""

    def test_generate_key_pair(self, key_service):
        data = key_service.generate_key_pair()
        assert len(data.public_key) == 64
        assert len(data.private_key) == 64
        assert data.to_keypair().public_key_hex() == data.public_key

    def test_repr_hides_private_key(self, key_service):
        data = key_service.generate_key_pair()
        assert data.private_key not in repr(data)

    def test_generation_failure(self, key_service):
        with patch("accumulate_wallet.keys.key_management.Ed25519KeyPair.generate",
                   side_effect=KeyGenerationError("no entropy")):
            with pytest.raises(KeyGenerationError):
                key_service.generate_key_pair()

    def test_generate_lite_account_stores_under_base(self, key_service, secure_keys):
        account = key_service.generate_lite_account()
        assert account.token_account == account.lite_identity + "/ACME"
        assert secure_keys.get_private_key(account.lite_identity) == account.keys.private_key
        assert secure_keys.get_private_key(account.token_account) is None
        assert secure_keys.get_public_key(account.lite_identity) == account.keys.public_key

    def test_generate_without_store(self, key_service, secure_keys):
        account = key_service.generate_lite_account(store=False)
        assert not secure_keys.has_private_key(account.lite_identity)

    def test_derive_lite_address_is_pure(self, keypair):
        derived = KeyManagementService.derive_lite_address(keypair.public_key_hash_hex())
        assert derived == keypair.derive_lite_identity_url()

    def test_import_private_key(self, key_service, keypair):
        account = key_service.import_private_key(keypair.private_key_hex())
        assert account.lite_identity == keypair.derive_lite_identity_url()
        assert key_service.has_key(account.token_account)

    def test_import_invalid_key(self, key_service):
        with pytest.raises(ValidationError):
            key_service.import_private_key("1234")


class TestStorage:
    """Test canonical key storage."""

    def test_lite_token_form_stored_under_base(self, key_service, secure_keys, keypair):
        lite = keypair.derive_lite_identity_url()
        key_service.store_key(lite + "/ACME", keypair.private_key_hex())
        assert secure_keys.get_private_key(lite) == keypair.private_key_hex()
        assert key_service.retrieve_key(lite + "/ACME") is None

    def test_key_page_stored_exactly(self, key_service, keypair):
        key_service.store_key(PAGE, keypair.private_key_hex())
        assert key_service.retrieve_key(PAGE) == keypair.private_key_hex()

    def test_store_invalid_key(self, key_service):
        with pytest.raises(ValidationError):
            key_service.store_key(PAGE, "not-hex")

    def test_delete_key(self, key_service, keypair):
        lite = keypair.derive_lite_identity_url()
        key_service.store_key(lite, keypair.private_key_hex())
        key_service.delete_key(lite + "/ACME")
        assert not key_service.has_key(lite)

    def test_storage_address(self):
        lite = "acc://" + "ab" * 24
        assert KeyManagementService.storage_address(lite + "/ACME") == lite
        assert KeyManagementService.storage_address(PAGE) == PAGE
        assert KeyManagementService.storage_address("garbage") == "garbage"


class TestSigners:
    """Test signer construction from stored keys."""

    def test_lite_signer_base_form(self, key_service, keypair):
        lite = keypair.derive_lite_identity_url()
        key_service.store_key(lite, keypair.private_key_hex())

        lookup = key_service.lookup_lite_signer(lite + "/ACME")
        assert lookup.resolved_form == "base"
        assert lookup.storage_address == lite
        assert isinstance(lookup.signer, LiteIdentitySigner)
        assert lookup.signer.get_signer_url() == lite
        assert lookup.signer.get_signer_version() == 1

    def test_lite_signer_raw_fallback(self, key_service, secure_keys, keypair):
        """A key stored only under the token form resolves through the fallback."""
        lite = keypair.derive_lite_identity_url()
        secure_keys.store_private_key(lite + "/ACME", keypair.private_key_hex())

        lookup = key_service.lookup_lite_signer(lite + "/ACME")
        assert lookup.resolved_form == "raw"
        assert lookup.storage_address == lite + "/ACME"
        assert lookup.signer.get_signer_url() == lite

    def test_lite_signer_missing(self, key_service, keypair):
        assert key_service.create_lite_signer(keypair.derive_lite_identity_url()) is None

    def test_lite_signer_non_lite_address(self, key_service):
        assert key_service.lookup_lite_signer("acc://alice.acme/tokens") is None

    def test_identity_signer(self, key_service, keypair):
        key_service.store_key(PAGE, keypair.private_key_hex())
        signer = key_service.create_identity_signer(PAGE, 4)
        assert isinstance(signer, KeyPageSigner)
        assert signer.get_signer_version() == 4
        assert key_service.create_identity_signer("acc://bob.acme/book/1", 1) is None

    def test_key_pair_data_from_keypair(self, keypair):
        data = KeyPairData.from_keypair(keypair)
        assert data.public_key_hash == keypair.public_key_hash_hex()
