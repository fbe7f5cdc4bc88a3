from datetime import UTC, datetime, timedelta

from src.adapters.auth.crypto import TokenSigner, hash_password, verify_password
from src.adapters.clock import SystemClock


def test_hash_verify_success():
    hashed = hash_password("my-secret-password")

    assert hashed != "my-secret-password"
    assert verify_password("my-secret-password", hashed) is True


def test_verify_wrong_password():
    hashed = hash_password("password1")

    assert verify_password("wrong", hashed) is False


def test_verify_garbage_hash_returns_false():
    assert verify_password("password1", "not-a-hash") is False


def test_token_round_trip_keeps_claims():
    signer = TokenSigner("secret")

    token, expires_at = signer.create({"sub": "acct-1"}, timedelta(minutes=5))
    payload = signer.decode(token)

    assert payload is not None
    assert payload["sub"] == "acct-1"
    assert expires_at > datetime.now(UTC)


def test_token_from_other_key_rejected():
    token, _ = TokenSigner("one").create({"sub": "acct-1"}, timedelta(minutes=5))

    assert TokenSigner("two").decode(token) is None


def test_expired_token_rejected():
    signer = TokenSigner("secret")
    issued = datetime.now(UTC) - timedelta(hours=2)

    token, _ = signer.create({"sub": "acct-1"}, timedelta(minutes=5), now_utc=issued)

    assert signer.decode(token) is None


def test_system_clock_is_utc():
    now = SystemClock().now_utc()

    assert now.tzinfo is not None
    assert abs((datetime.now(UTC) - now).total_seconds()) < 1.0
