"""Tests for app.repositories — Cosmos and in-memory item stores."""

import pytest

from app.repositories.cosmos_repo import CosmosItemRepository
from app.repositories.memory_repo import MemoryItemRepository
from app.services.cosmos_service import CosmosDbService
from app.tests.fakes import FakeCosmosBackend, FakeCosmosClient

ITEM = {"id": "1", "name": "Milk", "description": None, "isComplete": False}


@pytest.fixture(params=["cosmos", "memory"])
def repo(request):
    if request.param == "memory":
        return MemoryItemRepository()
    service = CosmosDbService(FakeCosmosClient("https://acct", "K1", FakeCosmosBackend()), "Db", "Items")
    service.ensure_container()
    return CosmosItemRepository(service)


def test_add_and_get(repo):
    assert repo.add_item(ITEM) == ITEM
    assert repo.get_item("1") == ITEM


def test_get_missing_returns_none(repo):
    assert repo.get_item("nope") is None


def test_list(repo):
    repo.add_item(ITEM)
    repo.add_item({**ITEM, "id": "2"})
    assert sorted(i["id"] for i in repo.list_items()) == ["1", "2"]


def test_update(repo):
    repo.add_item(ITEM)
    repo.update_item("1", {**ITEM, "isComplete": True})
    assert repo.get_item("1")["isComplete"] is True


def test_delete(repo):
    repo.add_item(ITEM)
    repo.delete_item("1")
    assert repo.get_item("1") is None
    with pytest.raises(KeyError):
        repo.delete_item("1")


def test_cosmos_container_resolved_lazily():
    backend = FakeCosmosBackend()
    client = FakeCosmosClient("https://acct", "K1", backend)
    CosmosDbService(client, "Db", "Items").ensure_container()

    # fresh handle without ensure_* reads through get_database_client
    service = CosmosDbService(client, "Db", "Items")
    assert service.container is backend.containers["Db"]["Items"]
