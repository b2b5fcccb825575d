"""
Tests for AccountUrl and the address-form helpers.
"""

import pytest
from pydantic import BaseModel

from accumulate_wallet.runtime.url import (
    AccountUrl,
    normalize_signer_url,
    identity_url,
    name_from_identity_url,
    is_valid_accumulate_url,
    is_lite_url,
)

LITE = "acc://" + "ab" * 24


class TestAccountUrl:
    """Test AccountUrl parsing and navigation."""

    def test_valid_url(self):
        url = AccountUrl("acc://alice.acme/tokens/")
        assert str(url) == "acc://alice.acme/tokens"
        assert url.authority == "alice.acme"
        assert url.path == "tokens"
        assert url.last_segment == "tokens"

    @pytest.mark.parametrize("bad", ["", "acc://", "http://alice.acme", "acc://a b.acme"])
    def test_invalid_url(self, bad):
        with pytest.raises(ValueError):
            AccountUrl(bad)

    def test_equality_with_string(self):
        assert AccountUrl("acc://alice.acme") == "acc://alice.acme"
        assert len({AccountUrl("acc://alice.acme"), AccountUrl("acc://alice.acme/")}) == 1

    def test_identity_and_lite(self):
        assert AccountUrl("acc://alice.acme/book").is_identity
        assert not AccountUrl("acc://alice.acme").is_lite
        assert AccountUrl(LITE).is_lite

    def test_token_suffix(self):
        assert AccountUrl(LITE + "/ACME").token_suffix == "ACME"
        assert AccountUrl(LITE).token_suffix is None
        assert AccountUrl("acc://alice.acme/ACME").token_suffix is None

    def test_lite_base(self):
        assert AccountUrl(LITE + "/ACME").lite_base() == LITE
        with pytest.raises(ValueError):
            AccountUrl("acc://alice.acme").lite_base()

    def test_join_and_parent(self):
        book = AccountUrl("acc://alice.acme").join("book", "/1/")
        assert book == "acc://alice.acme/book/1"
        assert book.parent() == "acc://alice.acme/book"
        assert book.root() == "acc://alice.acme"
        assert book.root().is_root()
        with pytest.raises(ValueError):
            book.root().parent()

    def test_parse_adds_scheme(self):
        assert AccountUrl.parse("alice.acme") == "acc://alice.acme"
        assert AccountUrl.parse("//alice.acme") == "acc://alice.acme"
        with pytest.raises(ValueError):
            AccountUrl.parse("https://alice.acme")

    def test_pydantic_field(self):
        """AccountUrl validates and serializes inside a model."""

        class Model(BaseModel):
            url: AccountUrl

        model = Model(url="acc://alice.acme")
        assert isinstance(model.url, AccountUrl)
        assert model.model_dump(mode="json") == {"url": "acc://alice.acme"}


class TestHelpers:
    """Test module-level URL helpers."""

    def test_normalize_signer_url(self):
        assert normalize_signer_url(LITE + "/ACME") == LITE
        assert normalize_signer_url("acc://alice.acme/ACME") == "acc://alice.acme"
        assert normalize_signer_url("acc://alice.acme/book/1") == "acc://alice.acme/book/1"
        assert normalize_signer_url("garbage") == "garbage"

    def test_identity_url(self):
        assert identity_url("alice") == "acc://alice.acme"
        assert identity_url("alice.acme") == "acc://alice.acme"
        assert identity_url("acc://alice.acme") == "acc://alice.acme"

    def test_name_from_identity_url(self):
        assert name_from_identity_url("acc://alice.acme/book") == "alice"

    def test_predicates(self):
        assert is_valid_accumulate_url("acc://alice.acme")
        assert not is_valid_accumulate_url("acc://alice")
        assert is_lite_url(LITE + "/ACME")
        assert not is_lite_url("not a url")
