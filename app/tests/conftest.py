import pytest

from app.core.config import Settings
from app.services.secret_resolver import SecretResolver
from app.tests.fakes import (
    SECRETS,
    VAULT_URL,
    FakeCosmosBackend,
    FakeCosmosClient,
    FakeCredential,
    FakeSecretClient,
)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        key_vault_uri=VAULT_URL,
        azure_tenant_id="tenant",
        azure_client_id="client",
        azure_client_secret="secret",
    )


@pytest.fixture
def credential():
    return FakeCredential()


@pytest.fixture
def secret_client():
    return FakeSecretClient(SECRETS)


@pytest.fixture
def resolver(credential, secret_client):
    return SecretResolver(VAULT_URL, credential, secret_client=secret_client)


@pytest.fixture
def backend():
    return FakeCosmosBackend()


@pytest.fixture
def client_factory(backend):
    created = []

    def factory(url, key):
        client = FakeCosmosClient(url, key, backend)
        created.append(client)
        return client

    factory.created = created
    return factory
