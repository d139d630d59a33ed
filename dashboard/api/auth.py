from fastapi import APIRouter, Depends, status

from dashboard.api.deps import get_current_customer, get_settings, get_store
from dashboard.core.config import Settings
from dashboard.models.schemas import AuthResponse, CustomerOut, Envelope, LoginIn, RegisterIn
from dashboard.services import auth_service
from dashboard.store import Store

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterIn,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    customer, token = auth_service.register(store, settings, payload)
    return {
        "message": "Customer registered successfully",
        "data": {"customer": customer, "token": token},
    }


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginIn,
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    customer, token = auth_service.login(store, settings, payload)
    return {"message": "Login successful", "data": {"customer": customer, "token": token}}


@router.get("/me", response_model=Envelope[CustomerOut])
def me(customer=Depends(get_current_customer)):
    return {"data": customer}
