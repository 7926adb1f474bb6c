"""
Credential vault - per-provider secrets, encrypted at rest.

Sources, in precedence order:
1. Environment (surfaced through Settings)
2. Encrypted credentials file

The in-memory map is read without locks. That is only safe because everything
runs on one asyncio loop and set() is synchronous; a threaded caller would need
a lock around the read-modify-persist cycle.
"""

import json

from echosync.core.config import Settings
from echosync.core.logging import get_logger
from echosync.core.types import CredentialState, CredentialStatus
from echosync.vault.crypto import decrypt_secret, encrypt_secret, load_or_create_key

logger = get_logger("vault.store")

# Order used by status()
STATUS_PROVIDERS = ("gemini", "openai", "claude", "perplexity")

NO_KEY_PREVIEW = "no key"


def _normalize(provider_id: str) -> str:
    return str(provider_id).strip().lower()


def redact(secret: str | None) -> str:
    """Preview that never reveals a whole secret."""
    if not secret:
        return NO_KEY_PREVIEW
    if len(secret) <= 8:
        return "****"
    return f"{secret[:4]}...{secret[-4:]}"


class CredentialVault:
    """Encrypted store of provider API keys."""

    def __init__(self, settings: Settings):
        self._settings = settings
        self._credentials_path = settings.credentials_path
        self._key_path = settings.encryption_key_path
        self._key: bytes | None = None
        self._credentials: dict[str, str] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def providers(self) -> list[str]:
        """Provider ids currently holding a secret."""
        self._ensure_initialized()
        return sorted(self._credentials)

    def initialize(self) -> None:
        """Load environment keys, then the encrypted file. Safe to call repeatedly."""
        if self._initialized:
            return

        logger.info("Loading credentials...")
        self._key = load_or_create_key(self._key_path)

        for provider_id, secret in self._settings.env_credentials().items():
            if secret and secret.strip():
                self._credentials[provider_id] = secret.strip()
                logger.info(f"Loaded {provider_id} key from environment")

        for provider_id, secret in self._load_file().items():
            if provider_id in self._credentials:
                logger.debug(f"Ignoring stored {provider_id} key, environment value wins")
                continue
            self._credentials[provider_id] = secret
            logger.info(f"Loaded {provider_id} key from encrypted file")

        self._initialized = True
        logger.info(f"Credential vault initialized with {len(self._credentials)} keys")

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def _load_file(self) -> dict[str, str]:
        """Decrypt the credentials file. Missing or corrupt files count as empty."""
        if not self._credentials_path.exists():
            return {}

        try:
            data = json.loads(self._credentials_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load encrypted credentials: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error("Encrypted credentials file is not a JSON object, ignoring it")
            return {}

        loaded = {}
        for provider_id, token in data.items():
            secret = decrypt_secret(token, self._key)
            if secret is None:
                logger.warning(f"Dropping undecryptable entry for {provider_id}")
                continue
            if secret.strip():
                loaded[_normalize(provider_id)] = secret
        return loaded

    def _persist(self) -> bool:
        """Encrypt every secret and rewrite the credentials file."""
        payload = {}
        for provider_id, secret in self._credentials.items():
            token = encrypt_secret(secret, self._key)
            if token is None:
                logger.error(f"Could not encrypt {provider_id} key, not persisting vault")
                return False
            payload[provider_id] = token

        try:
            self._credentials_path.parent.mkdir(parents=True, exist_ok=True)
            self._credentials_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save credentials: {e}")
            return False

        logger.info("Credentials saved")
        return True

    def get(self, provider_id: str) -> str | None:
        self._ensure_initialized()
        return self._credentials.get(_normalize(provider_id))

    def has(self, provider_id: str) -> bool:
        return bool(self.get(provider_id))

    def set(self, provider_id: str, secret: str | None) -> bool:
        """Set or (with an empty secret) remove a key, then persist the whole vault.

        Returns whether persisting succeeded. The in-memory change applies either way.
        """
        self._ensure_initialized()
        provider_id = _normalize(provider_id)

        if secret is None or not str(secret).strip():
            self._credentials.pop(provider_id, None)
            logger.info(f"Credential for {provider_id} removed")
        else:
            self._credentials[provider_id] = str(secret).strip()
            logger.info(f"Credential for {provider_id} set ({redact(self._credentials[provider_id])})")

        return self._persist()

    def status(self) -> list[CredentialStatus]:
        """Redacted status of the fixed provider set."""
        self._ensure_initialized()
        result = []
        for provider_id in STATUS_PROVIDERS:
            secret = self._credentials.get(provider_id)
            result.append(
                CredentialStatus(
                    provider_id=provider_id,
                    state=CredentialState.ACTIVE if secret else CredentialState.MISSING,
                    has_key=bool(secret),
                    preview=redact(secret),
                )
            )
        return result
