"""One-way answer hashing so a guess can be checked without the plaintext answer id."""

import hashlib


def hash_identifier(identifier: str) -> str:
    """Return the lowercase hex SHA-256 digest of an identifier."""
    return hashlib.sha256(identifier.encode("utf-8")).hexdigest()


def validate_guess(candidate_id: str, expected_digest: str) -> bool:
    """Check a candidate id against the puzzle's answer digest."""
    return hash_identifier(candidate_id) == expected_digest
