"""Unit tests for identity normalization."""

import pytest

from storefront.domain.exceptions import IdentityError
from storefront.domain.model.identity import Identity, owner_key_for, resolve_identity


class TestResolveIdentity:

    def test_password_source(self):
        identity = resolve_identity(
            {"source": "password", "id": " u1 ", "email": "a@b.in", "name": "Asha Das"}
        )
        assert identity == Identity(id="u1", email="a@b.in", name="Asha Das")

    def test_oauth_source_falls_back_to_sub(self):
        identity = resolve_identity({"source": "oauth", "sub": "g-42", "email": "a@b.in"})
        assert identity.id == "g-42"

    def test_signed_out(self):
        assert resolve_identity(None) is None

    def test_unknown_source_rejected(self):
        with pytest.raises(IdentityError, match="Unknown identity source"):
            resolve_identity({"source": "saml", "id": "u1"})


class TestIdentity:

    def test_name_split(self):
        identity = Identity(id="u1", email="a@b.in", name="Asha Rani Das")
        assert identity.first_name == "Asha"
        assert identity.last_name == "Rani Das"

    def test_blank_id_is_incomplete(self):
        with pytest.raises(IdentityError, match="sign in again"):
            Identity(id="   ", email="a@b.in").require_complete()

    def test_blank_email_is_incomplete(self):
        with pytest.raises(IdentityError, match="sign in again"):
            Identity(id="u1", email="").require_complete()

    def test_owner_keys(self):
        assert owner_key_for(Identity(id="u1", email="a@b.in")) == "user:u1"
        assert owner_key_for(None) == "guest"
