"""Tests for app.services.cosmos_initializer — startup sequence and provisioning."""

import pytest
from azure.core.exceptions import ClientAuthenticationError, ResourceNotFoundError
from azure.cosmos.documents import ConnectionMode

from app.core.config import Settings
from app.core.errors import TokenAcquisitionError
from app.services import cosmos_initializer
from app.services.cosmos_initializer import (
    CosmosInitializer,
    InitState,
    gateway_client,
    initialize_cosmos_service,
)
from app.services.cosmos_service import PARTITION_KEY_PATH, CosmosDbService
from app.services.secret_resolver import SecretResolver
from app.tests.fakes import (
    SECRETS,
    VAULT_URL,
    FailingCredential,
    FakeCredential,
    FakeSecretClient,
)


def run(settings, resolver, client_factory):
    return initialize_cosmos_service(
        settings, resolver=resolver, client_factory=client_factory
    )


# ─── Happy path ──────────────────────────────────────────────────────


class TestInitialize:
    def test_handle_bound_to_resolved_names(self, settings, resolver, client_factory):
        service = run(settings, resolver, client_factory)

        assert isinstance(service, CosmosDbService)
        assert service.database_name == "TodoDb"
        assert service.container_name == "Items"

        client = client_factory.created[0]
        assert client.url == "https://acct.example.com"
        assert client.key == "K1"
        assert service.client is client

    def test_each_secret_fetched_once_in_order(
        self, settings, resolver, secret_client, client_factory
    ):
        run(settings, resolver, client_factory)
        assert secret_client.calls == [
            "cosmosdbURI",
            "cosmosdbKeys",
            "cosmosDBDatabaseName",
            "cosmosDBContainerName",
        ]

    def test_token_acquired_before_first_secret(
        self, settings, resolver, credential, secret_client, client_factory
    ):
        order = []
        issue = credential.get_token
        fetch = secret_client.get_secret

        def get_token(*scopes, **kwargs):
            order.append("token")
            return issue(*scopes, **kwargs)

        def get_secret(name):
            order.append(name)
            return fetch(name)

        credential.get_token = get_token
        secret_client.get_secret = get_secret

        run(settings, resolver, client_factory)

        assert order[0] == "token"
        assert order.count("token") == 1

    def test_database_then_container(self, settings, resolver, client_factory, backend):
        run(settings, resolver, client_factory)
        assert backend.calls == [
            ("create_database_if_not_exists", "TodoDb"),
            ("create_container_if_not_exists", "TodoDb", "Items"),
        ]

    def test_container_partitioned_on_id(self, settings, resolver, client_factory, backend):
        run(settings, resolver, client_factory)
        container = backend.containers["TodoDb"]["Items"]
        assert container.partition_key.path == "/id"

    def test_partition_key_ignores_configured_names(self, settings, credential, client_factory, backend):
        secrets = dict(SECRETS, cosmosDBDatabaseName="Other", cosmosDBContainerName="pk")
        resolver = SecretResolver(VAULT_URL, credential, secret_client=FakeSecretClient(secrets))

        run(settings, resolver, client_factory)

        assert backend.containers["Other"]["pk"].partition_key.path == PARTITION_KEY_PATH

    def test_state_ready(self, settings, resolver, client_factory):
        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=client_factory)
        assert initializer.state is InitState.UNINITIALIZED
        initializer.run()
        assert initializer.state is InitState.READY

    def test_cannot_run_twice(self, settings, resolver, client_factory):
        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=client_factory)
        initializer.run()
        with pytest.raises(RuntimeError):
            initializer.run()


# ─── Idempotency ─────────────────────────────────────────────────────


class TestIdempotentProvisioning:
    def test_second_startup_reuses_resources(self, settings, client_factory, backend):
        for _ in range(2):
            resolver = SecretResolver(
                VAULT_URL, FakeCredential(), secret_client=FakeSecretClient(SECRETS)
            )
            service = run(settings, resolver, client_factory)
            service.container.upsert_item({"id": "1", "name": "keep me"})

        assert list(backend.databases) == ["TodoDb"]
        assert list(backend.containers["TodoDb"]) == ["Items"]
        assert list(backend.containers["TodoDb"]["Items"].docs) == ["1"]


# ─── Failures ────────────────────────────────────────────────────────


class TestFailures:
    def test_no_token_aborts_before_secrets_and_client(
        self, settings, secret_client, client_factory
    ):
        resolver = SecretResolver(
            VAULT_URL, FakeCredential(token=None), secret_client=secret_client
        )
        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=client_factory)

        with pytest.raises(TokenAcquisitionError):
            initializer.run()

        assert secret_client.calls == []
        assert client_factory.created == []
        assert initializer.state is InitState.FAILED

    def test_missing_secret_aborts(self, settings, credential, client_factory):
        secrets = {k: v for k, v in SECRETS.items() if k != "cosmosDBContainerName"}
        resolver = SecretResolver(VAULT_URL, credential, secret_client=FakeSecretClient(secrets))
        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=client_factory)

        with pytest.raises(ResourceNotFoundError):
            initializer.run()

        assert client_factory.created == []
        assert initializer.state is InitState.FAILED

    def test_provisioning_error_propagates(self, settings, resolver, client_factory, backend):
        def boom(id):
            raise PermissionError("forbidden")

        def factory(url, key):
            client = client_factory(url, key)
            client.create_database_if_not_exists = boom
            return client

        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=factory)
        with pytest.raises(PermissionError):
            initializer.run()

        assert initializer.state is InitState.FAILED
        assert backend.containers == {}
        assert client_factory.created[0].closed is True

    def test_container_error_closes_client(self, settings, resolver, client_factory):
        def factory(url, key):
            client = client_factory(url, key)
            database = client.create_database_if_not_exists(id="TodoDb")

            def boom(id, partition_key):
                raise PermissionError("forbidden")

            database.create_container_if_not_exists = boom
            return client

        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=factory)
        with pytest.raises(PermissionError):
            initializer.run()

        assert initializer.state is InitState.FAILED
        assert client_factory.created[0].closed is True

    def test_rejected_credentials_abort_before_secrets(
        self, settings, secret_client, client_factory
    ):
        credential = FailingCredential()
        resolver = SecretResolver(VAULT_URL, credential, secret_client=secret_client)
        initializer = CosmosInitializer(settings, resolver=resolver, client_factory=client_factory)

        with pytest.raises(TokenAcquisitionError) as exc:
            initializer.run()

        assert isinstance(exc.value.__cause__, ClientAuthenticationError)
        assert credential.calls == 1
        assert secret_client.calls == []
        assert client_factory.created == []
        assert initializer.state is InitState.FAILED


# ─── Connection sources ──────────────────────────────────────────────


class TestConnection:
    def test_gateway_mode(self, monkeypatch):
        seen = {}

        def fake_cosmos_client(url, credential=None, **kwargs):
            seen.update(url=url, credential=credential, **kwargs)
            return object()

        monkeypatch.setattr(cosmos_initializer, "CosmosClient", fake_cosmos_client)
        gateway_client("https://acct.example.com", "K1")

        assert seen["url"] == "https://acct.example.com"
        assert seen["credential"] == "K1"
        assert seen["connection_mode"] == ConnectionMode.Gateway

    def test_config_section_skips_vault(self, client_factory):
        settings = Settings(
            _env_file=None,
            cosmos_secret_source="config",
            cosmosdb_account="https://cfg.example.com",
            cosmosdb_key="K2",
            cosmosdb_database_name="CfgDb",
            cosmosdb_container_name="CfgItems",
        )
        secret_client = FakeSecretClient(SECRETS)
        resolver = SecretResolver(VAULT_URL, FakeCredential(), secret_client=secret_client)

        service = run(settings, resolver, client_factory)

        assert service.database_name == "CfgDb"
        assert client_factory.created[0].url == "https://cfg.example.com"
        assert secret_client.calls == []
