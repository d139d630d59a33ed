from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Generic, Literal, Optional, TypeVar

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints

T = TypeVar("T")

# largest value an INTEGER column holds on every backend
MIN_INT = -(2**31)
MAX_INT = 2**31 - 1
MAX_PRICE = Decimal("10000000000")

OrderStatus = Literal["pending", "shipped", "completed"]


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _whole_cents(value: Decimal) -> Decimal:
    if value != value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP):
        raise ValueError("price must have at most 2 decimal places")
    return value


RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalText = Annotated[Optional[str], AfterValidator(_blank_to_none)]
NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]
Price = Annotated[Decimal, Field(ge=0, lt=MAX_PRICE), AfterValidator(_whole_cents)]
Count = Annotated[int, Field(ge=0, le=MAX_INT)]
RecordRef = Annotated[int, Field(gt=0, le=MAX_INT)]
Quantity = Annotated[int, Field(gt=0, le=MAX_INT)]


# --- Envelopes ---

class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: T


class MessageOut(BaseModel):
    message: str


# --- Products ---

class ProductIn(BaseModel):
    name: RequiredText
    category: RequiredText
    price: Price
    stock: Count = 0


class ProductOut(BaseModel):
    id: int
    name: str
    category: str
    price: float
    stock: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Customers ---

class CustomerIn(BaseModel):
    name: RequiredText
    email: NormalizedEmail
    phone: OptionalText = None
    address: OptionalText = None


class CustomerOut(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[str] = None
    created_at: Optional[datetime] = None


# --- Orders ---

class OrderIn(BaseModel):
    # unknown fields are kept so the pricing step can see (and drop) a
    # client-supplied total_amount
    model_config = ConfigDict(extra="allow")

    customer_id: RecordRef
    product_id: RecordRef
    quantity: Quantity
    status: OrderStatus = "pending"


class OrderOut(BaseModel):
    id: int
    customer_id: int
    product_id: int
    quantity: int
    total_amount: float
    status: str
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None
    product_name: Optional[str] = None


# --- Stats ---

class SummaryStats(BaseModel):
    totalProducts: int
    totalCustomers: int
    totalOrders: int
    totalRevenue: str
    lowStockProducts: int
    pendingOrders: int


class CategoryStat(BaseModel):
    category: str
    count: int
    totalStock: int


class OrderStat(BaseModel):
    status: str
    count: int
    total: float


# --- Auth ---

class RegisterIn(BaseModel):
    email: NormalizedEmail
    password: str = Field(..., min_length=6)
    first_name: RequiredText
    last_name: RequiredText


class LoginIn(BaseModel):
    # plain str: a malformed email must fail like any other bad login
    email: Annotated[str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=1)]
    password: str = Field(..., min_length=1)


class AuthCustomer(BaseModel):
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str = "customer"
    created_at: Optional[datetime] = None


class AuthData(BaseModel):
    customer: AuthCustomer
    token: str


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AuthData

