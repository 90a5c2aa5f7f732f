from abc import ABC, abstractmethod
from typing import List, Optional


class ItemRepository(ABC):
    """
    Data access for todo items.
    Items are plain dicts in storage shape (id, name, description, isComplete).
    """

    @abstractmethod
    def list_items(self) -> List[dict]:
        pass

    @abstractmethod
    def get_item(self, item_id: str) -> Optional[dict]:
        """Return the item, or None when it does not exist."""
        pass

    @abstractmethod
    def add_item(self, item: dict) -> dict:
        pass

    @abstractmethod
    def update_item(self, item_id: str, item: dict) -> dict:
        pass

    @abstractmethod
    def delete_item(self, item_id: str) -> None:
        """Raises KeyError when the item does not exist."""
        pass
