from typing import List, Optional

from fastapi import APIRouter, Depends, status

from dashboard.api.deps import RecordId, ensure_found, get_store
from dashboard.core.errors import NotFoundError
from dashboard.models.schemas import Envelope, MessageOut, ProductIn, ProductOut
from dashboard.store import ListFilters, Store

router = APIRouter()


@router.get("", response_model=Envelope[List[ProductOut]])
def list_products(
    search: Optional[str] = None,
    category: Optional[str] = None,
    sort: Optional[str] = None,
    store: Store = Depends(get_store),
):
    """Products filtered by name substring and category; ``sort`` is one of
    price_asc, price_desc, stock_asc, stock_desc (newest first otherwise)."""
    filters = ListFilters.build(search=search, category=category, sort=sort)
    return {"data": store.list_products(filters)}


@router.get("/{product_id}", response_model=Envelope[ProductOut])
def get_product(product_id: RecordId, store: Store = Depends(get_store)):
    return {"data": ensure_found(store.get_product(product_id), "Product")}


@router.post("", response_model=Envelope[ProductOut], status_code=status.HTTP_201_CREATED)
def create_product(payload: ProductIn, store: Store = Depends(get_store)):
    return {"data": store.create_product(payload.model_dump())}


@router.put("/{product_id}", response_model=Envelope[ProductOut])
def update_product(product_id: RecordId, payload: ProductIn, store: Store = Depends(get_store)):
    return {"data": ensure_found(store.update_product(product_id, payload.model_dump()), "Product")}


@router.delete("/{product_id}", response_model=Envelope[MessageOut])
def delete_product(product_id: RecordId, store: Store = Depends(get_store)):
    if not store.delete_product(product_id):
        raise NotFoundError("Product not found")
    return {"data": {"message": "Product deleted successfully"}}
