"""
Vault module - encrypted provider credentials.

Public API:
    CredentialVault(settings)   → initialize / get / has / set / status
    encrypt_secret, decrypt_secret
"""

from echosync.vault.crypto import decrypt_secret, encrypt_secret, load_or_create_key
from echosync.vault.store import CredentialVault, redact

__all__ = ["CredentialVault", "decrypt_secret", "encrypt_secret", "load_or_create_key", "redact"]
