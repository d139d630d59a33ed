from typing import List, Optional

from fastapi import APIRouter, Depends, status

from dashboard.api.deps import RecordId, ensure_found, get_store
from dashboard.core.errors import NotFoundError
from dashboard.models.schemas import CustomerIn, CustomerOut, Envelope, MessageOut
from dashboard.store import ListFilters, Store

router = APIRouter()


@router.get("", response_model=Envelope[List[CustomerOut]])
def list_customers(search: Optional[str] = None, store: Store = Depends(get_store)):
    return {"data": store.list_customers(ListFilters.build(search=search))}


@router.get("/{customer_id}", response_model=Envelope[CustomerOut])
def get_customer(customer_id: RecordId, store: Store = Depends(get_store)):
    return {"data": ensure_found(store.get_customer(customer_id), "Customer")}


@router.post("", response_model=Envelope[CustomerOut], status_code=status.HTTP_201_CREATED)
def create_customer(payload: CustomerIn, store: Store = Depends(get_store)):
    return {"data": store.create_customer(payload.model_dump())}


@router.put("/{customer_id}", response_model=Envelope[CustomerOut])
def update_customer(customer_id: RecordId, payload: CustomerIn, store: Store = Depends(get_store)):
    return {"data": ensure_found(store.update_customer(customer_id, payload.model_dump()), "Customer")}


@router.delete("/{customer_id}", response_model=Envelope[MessageOut])
def delete_customer(customer_id: RecordId, store: Store = Depends(get_store)):
    if not store.delete_customer(customer_id):
        raise NotFoundError("Customer not found")
    return {"data": {"message": "Customer deleted successfully"}}
