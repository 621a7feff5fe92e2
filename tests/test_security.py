"""Unit tests for password hashing and signed session cookies."""

import unittest

import jwt

from prowler_dashboard.core.security import (
    decode_session_cookie,
    encode_session_cookie,
    hash_password,
    new_session_id,
    verify_password,
)


class TestPasswordHashing(unittest.TestCase):
    """hash_password produces bcrypt hashes that verify_password accepts."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret1")
        self.assertNotEqual(hashed, "secret1")
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("secret1", hashed))

    def test_wrong_password_does_not_verify(self) -> None:
        hashed = hash_password("secret1")
        self.assertFalse(verify_password("secret2", hashed))

    def test_missing_or_malformed_hash_never_matches(self) -> None:
        self.assertFalse(verify_password("secret1", None))
        self.assertFalse(verify_password("secret1", ""))
        self.assertFalse(verify_password("secret1", "not-a-bcrypt-hash"))


class TestSessionCookie(unittest.TestCase):
    """Session cookies carry the session id signed with the session secret."""

    def test_round_trip_returns_sid(self) -> None:
        sid = new_session_id()
        token = encode_session_cookie(sid, "s3cret")
        self.assertEqual(decode_session_cookie(token, "s3cret"), sid)

    def test_wrong_secret_is_rejected(self) -> None:
        token = encode_session_cookie(new_session_id(), "s3cret")
        with self.assertRaises(jwt.PyJWTError):
            decode_session_cookie(token, "other-secret")

    def test_token_without_sid_is_rejected(self) -> None:
        token = jwt.encode({"sub": "x"}, "s3cret", algorithm="HS256")
        with self.assertRaises(jwt.PyJWTError):
            decode_session_cookie(token, "s3cret")

    def test_session_ids_are_unique(self) -> None:
        self.assertNotEqual(new_session_id(), new_session_id())


if __name__ == "__main__":
    unittest.main()
