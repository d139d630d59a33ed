from typing import Annotated, Optional

from fastapi import Depends, Header, Path, Request

from dashboard.core.config import Settings
from dashboard.core.errors import AuthError, ForbiddenError, NotFoundError
from dashboard.core.security import TOKEN_TYPE, decode_token
from dashboard.models.schemas import MAX_INT, MIN_INT
from dashboard.store import Record, Store

RecordId = Annotated[int, Path(ge=MIN_INT, le=MAX_INT)]


def bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    """Token from ``Authorization``, with or without the ``Bearer`` scheme."""
    if not authorization:
        return None
    scheme, _, rest = authorization.strip().partition(" ")
    if scheme.lower() == "bearer":
        return rest.strip() or None
    return authorization.strip()


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_current_customer(
    token: Optional[str] = Depends(bearer_token),
    store: Store = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Record:
    if not token:
        raise AuthError("Authorization header is required")

    payload = decode_token(settings, token)
    if payload.get("type") != TOKEN_TYPE:
        raise ForbiddenError("Access denied. Customer authentication required.")

    try:
        customer_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthError("Invalid token")

    customer = store.get_customer(customer_id)
    if customer is None:
        raise AuthError("Customer not found")
    return customer


def ensure_found(record: Optional[Record], entity: str) -> Record:
    if record is None:
        raise NotFoundError(f"{entity} not found")
    return record
