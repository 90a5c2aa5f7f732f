from typing import List, Optional

from azure.cosmos.exceptions import CosmosResourceNotFoundError

from app.repositories.base import ItemRepository
from app.services.cosmos_service import CosmosDbService


class CosmosItemRepository(ItemRepository):
    """
    Cosmos DB implementation of ItemRepository
    - partition key is the item id, so point reads use id twice
    - system properties (_rid, _etag, ...) are stripped before returning
    """

    def __init__(self, service: CosmosDbService):
        self.service = service

    @staticmethod
    def _clean(doc: dict) -> dict:
        return {k: v for k, v in doc.items() if not k.startswith("_")}

    # -------------------------
    # Read
    # -------------------------
    def list_items(self, query: str = "SELECT * FROM c") -> List[dict]:
        docs = self.service.container.query_items(
            query=query,
            enable_cross_partition_query=True,
        )
        return [self._clean(d) for d in docs]

    def get_item(self, item_id: str) -> Optional[dict]:
        try:
            doc = self.service.container.read_item(item=item_id, partition_key=item_id)
        except CosmosResourceNotFoundError:
            return None
        return self._clean(doc)

    # -------------------------
    # Write
    # -------------------------
    def add_item(self, item: dict) -> dict:
        return self._clean(self.service.container.create_item(body=item))

    def update_item(self, item_id: str, item: dict) -> dict:
        return self._clean(self.service.container.upsert_item(body={**item, "id": item_id}))

    def delete_item(self, item_id: str) -> None:
        try:
            self.service.container.delete_item(item=item_id, partition_key=item_id)
        except CosmosResourceNotFoundError:
            raise KeyError(item_id)
