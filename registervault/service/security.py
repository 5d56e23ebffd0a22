from __future__ import annotations
import hashlib, hmac, os

SCHEME = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 200_000

def _derive(password: str, salt: bytes, iterations: int) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)

def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """Encode as `scheme$iterations$salt$digest`, hex fields."""
    salt = os.urandom(16)
    return f"{SCHEME}${iterations}${salt.hex()}${_derive(password, salt, iterations).hex()}"

def verify_password(password: str, stored: str) -> bool:
    parts = stored.split("$", 3)
    if len(parts) != 4 or parts[0] != SCHEME:
        return False
    try:
        iterations = int(parts[1])
        salt = bytes.fromhex(parts[2])
        expected = bytes.fromhex(parts[3])
    except ValueError:
        return False
    return hmac.compare_digest(_derive(password, salt, iterations), expected)
