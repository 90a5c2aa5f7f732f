import enum
import logging
from typing import Callable, Optional

from azure.cosmos import CosmosClient
from azure.cosmos.documents import ConnectionMode

from app.core.config import Settings
from app.services.cosmos_service import CosmosDbService
from app.services.secret_resolver import SecretResolver

logger = logging.getLogger(__name__)


class InitState(str, enum.Enum):
    UNINITIALIZED = "Uninitialized"
    AUTHENTICATING_SECRETS = "AuthenticatingSecrets"
    CLIENT_CONSTRUCTED = "ClientConstructed"
    DATABASE_ENSURED = "DatabaseEnsured"
    CONTAINER_ENSURED = "ContainerEnsured"
    READY = "Ready"
    FAILED = "Failed"


def gateway_client(url: str, key: str) -> CosmosClient:
    """Cosmos client that proxies through the gateway endpoint (firewall friendly)."""
    return CosmosClient(url, credential=key, connection_mode=ConnectionMode.Gateway)


class CosmosInitializer:
    """
    Startup sequence for the Cosmos DB handle:

        Uninitialized -> AuthenticatingSecrets -> ClientConstructed
        -> DatabaseEnsured -> ContainerEnsured -> Ready

    Every step blocks until the remote call returns. The first failure
    moves to Failed and is re-raised; no handle is produced.
    """

    def __init__(
        self,
        settings: Settings,
        resolver: Optional[SecretResolver] = None,
        client_factory: Callable[[str, str], CosmosClient] = gateway_client,
    ):
        self.settings = settings
        self.resolver = resolver
        self.client_factory = client_factory
        self.state = InitState.UNINITIALIZED

    def _move(self, state: InitState) -> None:
        logger.info("Cosmos init: %s -> %s", self.state.value, state.value)
        self.state = state

    def _connection_values(self):
        s = self.settings
        if s.cosmos_secret_source == "config":
            logger.info("Reading Cosmos connection from CosmosDb section")
            return (
                s.cosmosdb_account,
                s.cosmosdb_key,
                s.cosmosdb_database_name,
                s.cosmosdb_container_name,
            )

        resolver = self.resolver or SecretResolver.from_settings(s)
        try:
            resolver.authenticate()
            secrets = resolver.get_secrets(s.secret_names)
        finally:
            if self.resolver is None:
                resolver.close()

        return (
            secrets[s.secret_name_uri],
            secrets[s.secret_name_key],
            secrets[s.secret_name_database],
            secrets[s.secret_name_container],
        )

    def run(self) -> CosmosDbService:
        if self.state is not InitState.UNINITIALIZED:
            raise RuntimeError(f"Initializer already ran (state={self.state.value})")

        client = None
        try:
            self._move(InitState.AUTHENTICATING_SECRETS)
            account, key, database_name, container_name = self._connection_values()

            client = self.client_factory(account, key)
            service = CosmosDbService(client, database_name, container_name)
            self._move(InitState.CLIENT_CONSTRUCTED)

            service.ensure_database()
            self._move(InitState.DATABASE_ENSURED)

            service.ensure_container()
            self._move(InitState.CONTAINER_ENSURED)
        except Exception:
            self._move(InitState.FAILED)
            logger.exception("Cosmos initialization failed")
            if client is not None:
                client.close()
            raise

        self._move(InitState.READY)
        return service


def initialize_cosmos_service(settings: Settings, **kwargs) -> CosmosDbService:
    return CosmosInitializer(settings, **kwargs).run()
