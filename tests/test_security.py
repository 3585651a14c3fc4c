from datetime import timedelta

from todo_api.core.security import (
    create_access_token,
    create_state_token,
    make_unusable_password,
    ph,
    verify_token,
)


def test_state_token_verifies():
    payload = verify_token(create_state_token())

    assert payload is not None
    assert payload["nonce"]


def test_expired_or_garbage_token_is_rejected():
    expired = create_access_token({"nonce": "n"}, expires_delta=timedelta(seconds=-30))

    assert verify_token(expired) is None
    assert verify_token("not-a-token") is None


def test_unusable_password_is_an_argon2_hash():
    hashed = make_unusable_password()

    assert hashed.startswith("$argon2")
    assert not ph.check_needs_rehash(hashed)
    assert make_unusable_password() != hashed
