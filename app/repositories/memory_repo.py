import copy
from typing import List, Optional
from app.repositories.base import ItemRepository


class MemoryItemRepository(ItemRepository):

    def __init__(self, db: Optional[dict] = None):
        self.db = db if db is not None else {}

    def list_items(self) -> List[dict]:
        return [copy.deepcopy(i) for i in self.db.values()]

    def get_item(self, item_id: str) -> Optional[dict]:
        item = self.db.get(item_id)
        return copy.deepcopy(item) if item is not None else None

    def add_item(self, item: dict) -> dict:
        self.db[item["id"]] = copy.deepcopy(item)
        return copy.deepcopy(item)

    def update_item(self, item_id: str, item: dict) -> dict:
        if item_id not in self.db:
            raise KeyError(item_id)
        self.db[item_id] = copy.deepcopy(item)
        return copy.deepcopy(item)

    def delete_item(self, item_id: str) -> None:
        if item_id not in self.db:
            raise KeyError(item_id)
        del self.db[item_id]
