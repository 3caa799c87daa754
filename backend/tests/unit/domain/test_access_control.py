"""
Unit tests for password and delete credential checks
"""

import pytest

from linkvault.domain.content.access_control import (
    hash_password,
    verify_delete_credential,
    verify_password,
)
from tests.fixtures.domain_fixtures import create_text_record


@pytest.fixture
def protected_record():
    return create_text_record(password_hash=hash_password("s3cret", rounds=4))


class TestPasswords:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("s3cret", rounds=4)
        assert "s3cret" not in hashed
        assert hashed.startswith("$2")

    def test_no_password_set_always_passes(self):
        record = create_text_record()
        assert verify_password(record, None) is True
        assert verify_password(record, "anything") is True

    def test_correct_password(self, protected_record):
        assert verify_password(protected_record, "s3cret") is True

    @pytest.mark.parametrize("supplied", [None, "", "wrong"])
    def test_missing_or_wrong_password(self, protected_record, supplied):
        assert verify_password(protected_record, supplied) is False

    def test_long_passwords_compare_on_first_72_bytes(self):
        base = "x" * 72
        record = create_text_record(password_hash=hash_password(base + "tail-a", rounds=4))
        assert verify_password(record, base + "tail-b") is True

    def test_malformed_hash_never_matches(self):
        record = create_text_record(password_hash="not-a-bcrypt-hash")
        assert verify_password(record, "whatever") is False


class TestDeleteCredential:
    def test_matching_token(self):
        record = create_text_record()
        assert verify_delete_credential(record, token=record.delete_token) is True

    def test_wrong_token(self):
        record = create_text_record()
        assert verify_delete_credential(record, token="x" * 64) is False

    def test_owner_match(self):
        record = create_text_record(owner_id="user-1")
        assert verify_delete_credential(record, owner_id="user-1") is True
        assert verify_delete_credential(record, owner_id="user-2") is False

    def test_owner_ignored_when_record_has_none(self):
        record = create_text_record()
        assert verify_delete_credential(record, owner_id="user-1") is False

    def test_no_credentials(self):
        assert verify_delete_credential(create_text_record()) is False
