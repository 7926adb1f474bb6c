"""
AES-256-GCM encryption for vault secrets.

The key is 32 random bytes stored hex-encoded in the key file (chmod 600).
Each secret gets its own random 12-byte IV; the stored form is "ivHex:cipherHex".
"""

from __future__ import annotations

import secrets
import stat
from pathlib import Path

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from echosync.core.logging import get_logger

logger = get_logger("vault.crypto")

KEY_BYTES = 32
IV_BYTES = 12


def generate_key() -> bytes:
    return secrets.token_bytes(KEY_BYTES)


def _read_key(key_path: Path) -> bytes | None:
    try:
        key = bytes.fromhex(key_path.read_text(encoding="utf-8").strip())
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.warning(f"Failed to load encryption key from {key_path}: {e}")
        return None
    if len(key) != KEY_BYTES:
        logger.warning(f"Encryption key at {key_path} must be {KEY_BYTES} bytes, got {len(key)}")
        return None
    return key


def load_or_create_key(key_path: Path) -> bytes:
    """Load the vault key, generating and saving a new one if absent or unreadable.

    A failure to save the new key is logged; the key is still returned so the
    process keeps running, but secrets persisted with it won't survive a restart.
    """
    if key_path.exists():
        key = _read_key(key_path)
        if key is not None:
            return key
        logger.warning("Generating a new encryption key; previously stored secrets become unreadable")

    key = generate_key()
    try:
        key_path.parent.mkdir(parents=True, exist_ok=True)
        key_path.write_text(key.hex(), encoding="utf-8")
        key_path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 600
        logger.info(f"New encryption key generated and saved to {key_path}")
    except OSError as e:
        logger.error(f"Failed to save encryption key to {key_path}: {e}")
    return key


def encrypt_secret(plaintext: str, key: bytes) -> str | None:
    """Encrypt one secret. Returns "ivHex:cipherHex", or None on failure."""
    try:
        iv = secrets.token_bytes(IV_BYTES)
        ciphertext = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
    except (ValueError, TypeError, UnicodeEncodeError) as e:
        logger.error(f"Encryption failed: {e}")
        return None
    return f"{iv.hex()}:{ciphertext.hex()}"


def decrypt_secret(token: str, key: bytes) -> str | None:
    """Decrypt an "ivHex:cipherHex" token. Returns None for anything that doesn't verify."""
    try:
        iv_hex, cipher_hex = str(token).split(":", 1)
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(cipher_hex)
        if len(iv) != IV_BYTES:
            raise ValueError(f"IV must be {IV_BYTES} bytes, got {len(iv)}")
        plaintext = AESGCM(key).decrypt(iv, ciphertext, None)
        return plaintext.decode("utf-8")
    except (InvalidTag, ValueError, TypeError) as e:
        logger.error(f"Decryption failed: {type(e).__name__}: {e}")
        return None
