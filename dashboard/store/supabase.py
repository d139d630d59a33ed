"""
Supabase (hosted Postgres) implementation of the dashboard store.

The tables are owned by the Supabase project; their layout mirrors
``dashboard.db.models``. All filter values go through the PostgREST builder
methods, never into a hand-built query string. The one exception, the
``or`` filter used for customer search, quotes its values.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

import httpx
from postgrest.exceptions import APIError

from dashboard.core.errors import ConflictError, UnclassifiedError, ValidationError
from dashboard.db.seed import SAMPLE_CUSTOMERS, SAMPLE_PRODUCTS, sample_orders
from dashboard.store.base import Record, Store
from dashboard.store.query import ListFilters, escape_like, resolve_sort

logger = logging.getLogger(__name__)

CUSTOMER_COLUMNS = "id, name, email, phone, address, first_name, last_name, role, created_at"
ORDER_COLUMNS = "*, customers(name), products(name)"


def quote_filter_value(value: str) -> str:
    """Double-quote a value for a PostgREST logical (``or``) filter."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _jsonable(values: Record) -> Record:
    # the REST client serializes with json.dumps, which rejects Decimal
    return {k: (str(v) if isinstance(v, Decimal) else v) for k, v in values.items()}


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _flatten_order(row: Record) -> Record:
    row = dict(row)
    customer = row.pop("customers", None) or {}
    product = row.pop("products", None) or {}
    row["customer_name"] = customer.get("name")
    row["product_name"] = product.get("name")
    return row


def _classify_api_error(exc: APIError, unique_message: str, fk_message: str):
    code = getattr(exc, "code", None)
    message = getattr(exc, "message", None) or str(exc)
    if code == "23505":
        return ConflictError(unique_message)
    if code == "23503":
        return ConflictError(fk_message)
    if code in ("23514", "22P02"):
        return ValidationError(f"Constraint violated: {message}")
    return UnclassifiedError(message)


class SupabaseStore(Store):
    backend = "supabase"

    def __init__(self, client):
        self.client = client

    def _execute(
        self,
        query,
        unique_message: str = "Record already exists",
        fk_message: str = "Referenced record does not exist or is still in use",
    ):
        try:
            return query.execute()
        except APIError as exc:
            logger.warning("Supabase error %s: %s", getattr(exc, "code", None), exc)
            raise _classify_api_error(exc, unique_message, fk_message) from exc
        except httpx.HTTPError as exc:
            logger.error("Supabase request failed: %s", exc, exc_info=True)
            raise UnclassifiedError(str(exc)) from exc

    def _count(self, table: str, **eq) -> int:
        query = self.client.table(table).select("id", count="exact")
        for column, value in eq.items():
            query = query.eq(column, value)
        return self._execute(query).count or 0

    # --- lifecycle ---

    def seed_if_empty(self) -> None:
        if self._count("products") == 0:
            self._execute(self.client.table("products").insert([_jsonable(p) for p in SAMPLE_PRODUCTS]))
            logger.info("Seeded %d sample products", len(SAMPLE_PRODUCTS))
        if self._count("customers") == 0:
            self._execute(self.client.table("customers").insert(SAMPLE_CUSTOMERS))
            logger.info("Seeded %d sample customers", len(SAMPLE_CUSTOMERS))

        if self._count("orders") == 0:
            product_ids = [r["id"] for r in self._execute(
                self.client.table("products").select("id").order("id")
            ).data]
            customer_ids = [r["id"] for r in self._execute(
                self.client.table("customers").select("id").order("id")
            ).data]
            if len(product_ids) < len(SAMPLE_PRODUCTS) or len(customer_ids) < len(SAMPLE_CUSTOMERS):
                logger.warning("Not enough products/customers to seed sample orders")
                return
            orders = sample_orders()
            for values in orders:
                values["customer_id"] = customer_ids[values["customer_id"] - 1]
                values["product_id"] = product_ids[values["product_id"] - 1]
            self._execute(self.client.table("orders").insert([_jsonable(o) for o in orders]))
            logger.info("Seeded %d sample orders", len(orders))

    def ping(self) -> bool:
        try:
            self.client.table("products").select("id").limit(1).execute()
            return True
        except Exception:
            logger.warning("Supabase ping failed", exc_info=True)
            return False

    # --- products ---

    def list_products(self, filters: ListFilters) -> List[Record]:
        query = self.client.table("products").select("*")
        if filters.search:
            query = query.ilike("name", f"%{escape_like(filters.search)}%")
        if filters.category:
            query = query.eq("category", filters.category)
        column, descending = resolve_sort(filters.sort)
        query = query.order(column, desc=descending)
        if column != "id":
            query = query.order("id", desc=True)
        return self._execute(query).data

    def get_product(self, product_id: int) -> Optional[Record]:
        rows = self._execute(self.client.table("products").select("*").eq("id", product_id).limit(1)).data
        return rows[0] if rows else None

    def get_product_price(self, product_id: int) -> Optional[Decimal]:
        rows = self._execute(
            self.client.table("products").select("price").eq("id", product_id).limit(1)
        ).data
        return _decimal(rows[0]["price"]) if rows else None

    def create_product(self, values: Record) -> Record:
        return self._execute(self.client.table("products").insert(_jsonable(values))).data[0]

    def update_product(self, product_id: int, values: Record) -> Optional[Record]:
        values = dict(values, updated_at=datetime.now(timezone.utc).isoformat())
        rows = self._execute(
            self.client.table("products").update(_jsonable(values)).eq("id", product_id)
        ).data
        return rows[0] if rows else None

    def delete_product(self, product_id: int) -> bool:
        rows = self._execute(
            self.client.table("products").delete().eq("id", product_id),
            fk_message="Product is referenced by existing orders",
        ).data
        return bool(rows)

    # --- customers ---

    def list_customers(self, filters: ListFilters) -> List[Record]:
        query = self.client.table("customers").select(CUSTOMER_COLUMNS)
        if filters.search:
            pattern = quote_filter_value(f"%{escape_like(filters.search)}%")
            query = query.or_(f"name.ilike.{pattern},email.ilike.{pattern}")
        return self._execute(query.order("id", desc=True)).data

    def get_customer(self, customer_id: int) -> Optional[Record]:
        rows = self._execute(
            self.client.table("customers").select(CUSTOMER_COLUMNS).eq("id", customer_id).limit(1)
        ).data
        return rows[0] if rows else None

    def get_customer_by_email(self, email: str) -> Optional[Record]:
        rows = self._execute(self.client.table("customers").select("*").eq("email", email).limit(1)).data
        return rows[0] if rows else None

    def create_customer(self, values: Record) -> Record:
        rows = self._execute(
            self.client.table("customers").insert(values),
            unique_message="Email already exists",
        ).data
        row = dict(rows[0])
        row.pop("password_hash", None)
        return row

    def update_customer(self, customer_id: int, values: Record) -> Optional[Record]:
        rows = self._execute(
            self.client.table("customers").update(values).eq("id", customer_id),
            unique_message="Email already exists",
        ).data
        if not rows:
            return None
        return self.get_customer(customer_id)

    def delete_customer(self, customer_id: int) -> bool:
        rows = self._execute(
            self.client.table("customers").delete().eq("id", customer_id),
            fk_message="Customer is referenced by existing orders",
        ).data
        return bool(rows)

    # --- orders ---

    def list_orders(self, filters: ListFilters) -> List[Record]:
        query = self.client.table("orders").select(ORDER_COLUMNS)
        if filters.status:
            query = query.eq("status", filters.status)
        return [_flatten_order(r) for r in self._execute(query.order("id", desc=True)).data]

    def get_order(self, order_id: int) -> Optional[Record]:
        rows = self._execute(
            self.client.table("orders").select(ORDER_COLUMNS).eq("id", order_id).limit(1)
        ).data
        return _flatten_order(rows[0]) if rows else None

    def create_order(self, values: Record) -> Record:
        rows = self._execute(
            self.client.table("orders").insert(_jsonable(values)),
            fk_message="Customer or product not found",
        ).data
        return self.get_order(rows[0]["id"])

    def update_order(self, order_id: int, values: Record) -> Optional[Record]:
        rows = self._execute(
            self.client.table("orders").update(_jsonable(values)).eq("id", order_id),
            fk_message="Customer or product not found",
        ).data
        if not rows:
            return None
        return self.get_order(order_id)

    def delete_order(self, order_id: int) -> bool:
        return bool(self._execute(self.client.table("orders").delete().eq("id", order_id)).data)

    # --- stats ---

    def summary_stats(self, low_stock_threshold: int) -> Record:
        completed = self._execute(
            self.client.table("orders").select("total_amount").eq("status", "completed")
        ).data
        low_stock = self._execute(
            self.client.table("products").select("id", count="exact").lt("stock", low_stock_threshold)
        ).count
        return {
            "totalProducts": self._count("products"),
            "totalCustomers": self._count("customers"),
            "totalOrders": self._count("orders"),
            "totalRevenue": sum((_decimal(r["total_amount"]) for r in completed), Decimal("0")),
            "lowStockProducts": low_stock or 0,
            "pendingOrders": self._count("orders", status="pending"),
        }

    def category_stats(self) -> List[Record]:
        rows = self._execute(self.client.table("products").select("category, stock")).data
        groups = OrderedDict()
        for row in sorted(rows, key=lambda r: r["category"]):
            group = groups.setdefault(row["category"], {"category": row["category"], "count": 0, "totalStock": 0})
            group["count"] += 1
            group["totalStock"] += row.get("stock") or 0
        return list(groups.values())

    def order_stats(self) -> List[Record]:
        rows = self._execute(self.client.table("orders").select("status, total_amount")).data
        groups = OrderedDict()
        for row in sorted(rows, key=lambda r: r["status"]):
            group = groups.setdefault(row["status"], {"status": row["status"], "count": 0, "total": Decimal("0")})
            group["count"] += 1
            group["total"] += _decimal(row["total_amount"])
        return list(groups.values())
