import base64, os

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives import hashes

from .db import get_meta, set_meta
from .errors import VaultIOError

DEFAULT_KDF_ITERS = 200_000
VERIFIER_PLAINTEXT = b"verify"


def derive_key(master_password: str, salt: bytes, kdf_iters: int) -> bytes:
    """PBKDF2-HMAC-SHA256 key, urlsafe-base64 encoded as Fernet expects."""
    kdf = PBKDF2HMAC(algorithm=hashes.SHA256(), length=32, salt=salt, iterations=kdf_iters)
    return base64.urlsafe_b64encode(kdf.derive(master_password.encode("utf-8")))


def new_salt() -> bytes:
    return os.urandom(16)


def stored_kdf_iters(conn) -> int:
    raw = get_meta(conn, "kdf_iters")
    if raw is None:
        return DEFAULT_KDF_ITERS
    try:
        iters = int(bytes(raw).decode("ascii"))
    except (TypeError, ValueError) as e:
        raise VaultIOError("Vault metadata is corrupt: invalid key derivation settings.") from e
    if iters < 1:
        raise VaultIOError("Vault metadata is corrupt: invalid key derivation settings.")
    return iters


def get_fernet(conn, master_password: str) -> Fernet:
    salt = get_meta(conn, "salt")
    if not isinstance(salt, bytes) or not salt:
        raise VaultIOError("Vault metadata is corrupt: missing salt.")
    return Fernet(derive_key(master_password, salt, stored_kdf_iters(conn)))


def has_verifier(conn) -> bool:
    return bool(get_meta(conn, "verifier"))


def set_verifier(conn, f: Fernet, commit: bool = True):
    set_meta(conn, "verifier", f.encrypt(VERIFIER_PLAINTEXT), commit=commit)


def check_verifier(conn, f: Fernet) -> bool:
    token = get_meta(conn, "verifier")
    if not isinstance(token, bytes) or not token:
        return False
    try:
        plain = f.decrypt(token)
    except InvalidToken:
        return False
    return plain == VERIFIER_PLAINTEXT
