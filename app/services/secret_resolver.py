import logging
import threading
import time
from typing import Dict, Iterable, Optional

from azure.core.credentials import AccessToken
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import ClientSecretCredential, DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from app.core.config import Settings
from app.core.errors import SecretNotFoundError, TokenAcquisitionError

logger = logging.getLogger(__name__)

# refresh a cached token this many seconds before it expires
TOKEN_REFRESH_MARGIN = 300


def build_credential(settings: Settings):
    """
    Client-credential grant when a client secret is configured,
    otherwise the ambient identity chain (managed identity, CLI login, ...).
    """
    kwargs = {}
    if settings.azure_authority_host:
        kwargs["authority"] = settings.azure_authority_host

    if settings.azure_client_secret:
        return ClientSecretCredential(
            tenant_id=settings.azure_tenant_id,
            client_id=settings.azure_client_id,
            client_secret=settings.azure_client_secret,
            **kwargs,
        )

    logger.info("No client secret configured, using DefaultAzureCredential")
    return DefaultAzureCredential(**kwargs)


class CheckedTokenCredential:
    """
    Wraps a credential so that a failed or empty token result is fatal and a
    successful token is reused until it is about to expire.
    """

    def __init__(self, credential):
        self._credential = credential
        self._tokens: Dict[tuple, AccessToken] = {}
        self._lock = threading.Lock()

    def get_token(self, *scopes: str, **kwargs) -> AccessToken:
        with self._lock:
            cached = self._tokens.get(scopes)
            if cached and cached.expires_on - TOKEN_REFRESH_MARGIN > time.time():
                return cached

            try:
                token = self._credential.get_token(*scopes, **kwargs)
            except ClientAuthenticationError as exc:
                raise TokenAcquisitionError("Failed to retrieve JWT token") from exc

            if token is None or not token.token:
                raise TokenAcquisitionError("Failed to retrieve JWT token")

            self._tokens[scopes] = token
            logger.info("Access token acquired for %s", ", ".join(scopes))
            return token

    def close(self) -> None:
        close = getattr(self._credential, "close", None)
        if close:
            close()


class SecretResolver:
    """
    Resolves named secrets from a Key Vault.

    The access token is acquired once by `authenticate()` and shared by
    every subsequent `get_secret()` call.
    """

    def __init__(
        self,
        vault_url: str,
        credential,
        scope: str = "https://vault.azure.net/.default",
        secret_client: Optional[SecretClient] = None,
        **client_kwargs,
    ):
        self.vault_url = vault_url
        self.scope = scope
        self.credential = CheckedTokenCredential(credential)
        self.client = secret_client or SecretClient(
            vault_url=vault_url,
            credential=self.credential,
            **client_kwargs,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "SecretResolver":
        return cls(
            vault_url=settings.key_vault_uri,
            credential=build_credential(settings),
            scope=settings.key_vault_scope,
        )

    def authenticate(self) -> AccessToken:
        return self.credential.get_token(self.scope)

    def get_secret(self, name: str) -> str:
        logger.info("Fetching secret", extra={"props": {"secret": name}})
        secret = self.client.get_secret(name)
        if secret.value is None:
            raise SecretNotFoundError(name)
        return secret.value

    def get_secrets(self, names: Iterable[str]) -> Dict[str, str]:
        # strictly sequential, one fetch per name
        return {name: self.get_secret(name) for name in names}

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close:
            close()
        self.credential.close()
