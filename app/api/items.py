# app/api/items.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from app.dependencies import get_item_repository
from app.repositories.base import ItemRepository
from app.schemas.item import Item, ItemCreate, ItemUpdate
from app.utils.id_generator import generate_uuid

router = APIRouter(tags=["items"])


def _load(repo: ItemRepository, item_id: str) -> dict:
    item = repo.get_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail=f"Item {item_id} not found")
    return item


# -------------------------
# Index (default route)
# -------------------------
@router.get("/", response_model=List[Item])
@router.get("/Item", response_model=List[Item])
@router.get("/Item/Index", response_model=List[Item])
def index(repo: ItemRepository = Depends(get_item_repository)):
    return repo.list_items()


@router.get("/Item/Details/{id}", response_model=Item)
def details(
    id: str = Path(..., min_length=1),
    repo: ItemRepository = Depends(get_item_repository),
):
    return _load(repo, id)


# -------------------------
# Create / Edit / Delete
# -------------------------
@router.post("/Item/Create", response_model=Item, status_code=status.HTTP_201_CREATED)
def create(body: ItemCreate, repo: ItemRepository = Depends(get_item_repository)):
    item = Item(id=generate_uuid(), **body.model_dump())
    return repo.add_item(item.model_dump(by_alias=True))


@router.post("/Item/Edit/{id}", response_model=Item)
def edit(
    body: ItemUpdate,
    id: str = Path(..., min_length=1),
    repo: ItemRepository = Depends(get_item_repository),
):
    current = Item.model_validate(_load(repo, id))
    changes = body.model_dump(exclude_none=True)
    updated = current.model_copy(update=changes)
    return repo.update_item(id, updated.model_dump(by_alias=True))


@router.post("/Item/Delete/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete(
    id: str = Path(..., min_length=1),
    repo: ItemRepository = Depends(get_item_repository),
):
    try:
        repo.delete_item(id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Item {id} not found")
