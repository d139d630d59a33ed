import logging
from typing import Tuple

from dashboard.core import security
from dashboard.core.config import Settings
from dashboard.core.errors import AuthError, ConflictError
from dashboard.models.schemas import LoginIn, RegisterIn
from dashboard.store import Record, Store

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def public_customer(customer: Record) -> Record:
    return {
        "id": customer["id"],
        "email": customer["email"],
        "first_name": customer.get("first_name"),
        "last_name": customer.get("last_name"),
        "role": customer.get("role") or "customer",
        "created_at": customer.get("created_at"),
    }


def issue_token(settings: Settings, customer: Record) -> str:
    return security.create_token(
        settings,
        subject=customer["id"],
        email=customer["email"],
        role=customer.get("role") or "customer",
    )


def register(store: Store, settings: Settings, payload: RegisterIn) -> Tuple[Record, str]:
    if store.get_customer_by_email(payload.email) is not None:
        raise ConflictError("A customer with this email already exists")

    values = {
        "name": f"{payload.first_name} {payload.last_name}",
        "email": payload.email,
        "first_name": payload.first_name,
        "last_name": payload.last_name,
        "password_hash": security.hash_password(payload.password),
    }
    try:
        customer = store.create_customer(values)
    except ConflictError:
        # lost the race against a concurrent registration
        raise ConflictError("A customer with this email already exists")

    logger.info("Registered customer %s", customer["id"])
    return public_customer(customer), issue_token(settings, customer)


def login(store: Store, settings: Settings, payload: LoginIn) -> Tuple[Record, str]:
    customer = store.get_customer_by_email(payload.email)
    if customer is None:
        security.dummy_verify()
        raise AuthError(INVALID_CREDENTIALS)
    if not security.verify_password(payload.password, customer.get("password_hash")):
        raise AuthError(INVALID_CREDENTIALS)
    return public_customer(customer), issue_token(settings, customer)
