from typing import List, Optional

from fastapi import APIRouter, Depends

from dashboard.api.deps import RecordId, ensure_found, get_store
from dashboard.core.errors import NotFoundError
from dashboard.models.schemas import Envelope, MessageOut, OrderIn, OrderOut
from dashboard.services.orders_service import place_order, reprice_order
from dashboard.store import ListFilters, Store

router = APIRouter()


@router.get("", response_model=Envelope[List[OrderOut]])
def list_orders(status: Optional[str] = None, store: Store = Depends(get_store)):
    return {"data": store.list_orders(ListFilters.build(status=status))}


@router.get("/{order_id}", response_model=Envelope[OrderOut])
def get_order(order_id: RecordId, store: Store = Depends(get_store)):
    return {"data": ensure_found(store.get_order(order_id), "Order")}


@router.post("", response_model=Envelope[OrderOut], status_code=201)
def create_order(payload: OrderIn, store: Store = Depends(get_store)):
    """Create an order; ``total_amount`` is always price x quantity."""
    return {"data": place_order(store, payload)}


@router.put("/{order_id}", response_model=Envelope[OrderOut])
def update_order(order_id: RecordId, payload: OrderIn, store: Store = Depends(get_store)):
    return {"data": reprice_order(store, order_id, payload)}


@router.delete("/{order_id}", response_model=Envelope[MessageOut])
def delete_order(order_id: RecordId, store: Store = Depends(get_store)):
    if not store.delete_order(order_id):
        raise NotFoundError("Order not found")
    return {"data": {"message": "Order deleted successfully"}}
