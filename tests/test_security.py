from datetime import datetime, timedelta, timezone

import jwt
import pytest

from auth import security


def test_password_hash_round_trip():
    hashed = security.hash_password("correct horse")
    assert hashed != "correct horse"
    assert security.verify_password("correct horse", hashed)
    assert not security.verify_password("wrong horse", hashed)


def test_verify_password_rejects_garbage_hash():
    assert not security.verify_password("anything", "not-a-bcrypt-hash")
    assert not security.verify_password("", "")


def test_access_token_claims():
    token = security.build_access_token(user_id=42, role="ADMIN")
    payload = security.decode_access_token(token)
    assert payload["sub"] == "42"
    assert payload["role"] == "ADMIN"
    assert payload["type"] == "access"
    assert payload["exp"] > payload["iat"]


def test_expired_access_token_is_rejected():
    payload = {"sub": "1", "role": "EDITOR", "type": "access", "iat": 0, "exp": 1}
    token = jwt.encode(payload, security.jwt_secret(), algorithm=security.jwt_algorithm())
    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


def test_token_signed_with_other_secret_is_rejected():
    token = jwt.encode({"sub": "1", "type": "access"}, "some-other-secret", algorithm="HS256")
    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


def test_non_access_token_is_rejected():
    token = jwt.encode({"sub": "1", "type": "refresh"}, security.jwt_secret(), algorithm=security.jwt_algorithm())
    with pytest.raises(security.AuthSecurityError):
        security.decode_access_token(token)


def test_verification_code_is_six_digits():
    for _ in range(50):
        code = security.build_verification_code()
        assert len(code) == 6
        assert code.isdigit()
        assert 100000 <= int(code) <= 999999
        assert security.is_verification_code(code)


def test_is_verification_code_accepts_only_six_ascii_digits():
    assert security.is_verification_code("012345")
    assert not security.is_verification_code("12345")
    assert not security.is_verification_code("12345\u00e9")
    assert not security.is_verification_code("\u0661\u0662\u0663\u0664\u0665\u0666")


def test_reset_token_is_hex_and_only_hash_is_comparable():
    raw = security.build_reset_token()
    assert len(raw) == 64
    int(raw, 16)
    hashed = security.hash_reset_token(raw)
    assert hashed != raw
    assert hashed == security.hash_reset_token(raw)


def test_is_unexpired():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert security.is_unexpired(now + timedelta(seconds=1), now=now)
    assert not security.is_unexpired(now, now=now)
    assert not security.is_unexpired(now - timedelta(minutes=1), now=now)
    assert not security.is_unexpired(None, now=now)
    # naive timestamps are read as UTC
    assert security.is_unexpired(datetime(2026, 1, 2), now=now)


def test_expiry_windows():
    before = security.utc_now()
    assert security.verification_code_expiry() - before >= timedelta(hours=24) - timedelta(seconds=5)
    assert security.reset_token_expiry() - before <= timedelta(minutes=10) + timedelta(seconds=5)
