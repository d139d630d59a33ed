"""
SQLAlchemy implementation of the dashboard store.

Works against any SQLAlchemy URL; SQLite (the default, a local file) gets
foreign-key enforcement switched on per connection so that both backends
reject dangling order references the same way.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Iterator, List, Optional

from sqlalchemy import create_engine, delete, event, func, or_, select, text, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dashboard.core.errors import ConflictError, UnclassifiedError, ValidationError
from dashboard.db.base import Base
from dashboard.db.models import Customer, Order, Product
from dashboard.db.seed import SAMPLE_CUSTOMERS, SAMPLE_PRODUCTS, sample_orders
from dashboard.store.base import Record, Store
from dashboard.store.query import ListFilters, resolve_sort

logger = logging.getLogger(__name__)

CUSTOMER_SECRET_FIELDS = ("password_hash",)


# --- query builders ---

def build_product_query(filters: ListFilters):
    stmt = select(Product)
    if filters.search:
        stmt = stmt.where(Product.name.icontains(filters.search, autoescape=True))
    if filters.category:
        stmt = stmt.where(Product.category == filters.category)

    column, descending = resolve_sort(filters.sort)
    sort_column = getattr(Product, column)
    stmt = stmt.order_by(sort_column.desc() if descending else sort_column.asc())
    if column != "id":
        stmt = stmt.order_by(Product.id.desc())
    return stmt


def build_customer_query(filters: ListFilters):
    stmt = select(Customer)
    if filters.search:
        stmt = stmt.where(
            or_(
                Customer.name.icontains(filters.search, autoescape=True),
                Customer.email.icontains(filters.search, autoescape=True),
            )
        )
    return stmt.order_by(Customer.id.desc())


def build_order_query(filters: ListFilters):
    stmt = (
        select(
            Order,
            Customer.name.label("customer_name"),
            Product.name.label("product_name"),
        )
        .join(Customer, Order.customer_id == Customer.id)
        .join(Product, Order.product_id == Product.id)
    )
    if filters.status:
        stmt = stmt.where(Order.status == filters.status)
    return stmt.order_by(Order.id.desc())


# --- row helpers ---

def _as_dict(obj, exclude=()) -> Record:
    return {c.key: getattr(obj, c.key) for c in obj.__table__.columns if c.key not in exclude}


def _order_dict(row) -> Record:
    order, customer_name, product_name = row
    record = _as_dict(order)
    record["customer_name"] = customer_name
    record["product_name"] = product_name
    return record


def _classify_integrity_error(exc: IntegrityError, unique_message: str, fk_message: str):
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    message = str(orig if orig is not None else exc)
    lowered = message.lower()

    if code == "23505" or "unique constraint" in lowered or "duplicate key" in lowered:
        return ConflictError(unique_message)
    if code == "23503" or "foreign key constraint" in lowered:
        return ConflictError(fk_message)
    if code == "23514" or "check constraint" in lowered:
        return ValidationError(f"Constraint violated: {message}")
    return UnclassifiedError(message)


def _write(session: Session, stmt):
    # each session is short-lived, there is no identity map worth syncing
    return session.execute(stmt, execution_options={"synchronize_session": False})


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class SqlStore(Store):
    backend = "sql"

    def __init__(self, engine: Engine):
        self.engine = engine
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str) -> "SqlStore":
        kwargs = {"pool_pre_ping": True}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees a fresh empty db
                kwargs["poolclass"] = StaticPool
        return cls(create_engine(url, **kwargs))

    @contextmanager
    def _session(
        self,
        unique_message: str = "Record already exists",
        fk_message: str = "Referenced record does not exist or is still in use",
    ) -> Iterator[Session]:
        session = self.SessionLocal()
        try:
            yield session
        except IntegrityError as exc:
            session.rollback()
            logger.warning("Integrity error: %s", exc.orig)
            raise _classify_integrity_error(exc, unique_message, fk_message) from exc
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("Store failure: %s", exc, exc_info=True)
            raise UnclassifiedError(str(getattr(exc, "orig", None) or exc)) from exc
        finally:
            session.close()

    # --- lifecycle ---

    def init_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def seed_if_empty(self) -> None:
        with self._session() as session:
            if not session.scalar(select(func.count()).select_from(Product)):
                session.add_all([Product(**values) for values in SAMPLE_PRODUCTS])
                logger.info("Seeded %d sample products", len(SAMPLE_PRODUCTS))
            if not session.scalar(select(func.count()).select_from(Customer)):
                session.add_all([Customer(**values) for values in SAMPLE_CUSTOMERS])
                logger.info("Seeded %d sample customers", len(SAMPLE_CUSTOMERS))
            session.flush()

            if not session.scalar(select(func.count()).select_from(Order)):
                product_ids = session.scalars(select(Product.id).order_by(Product.id)).all()
                customer_ids = session.scalars(select(Customer.id).order_by(Customer.id)).all()
                orders = sample_orders()
                if len(product_ids) >= len(SAMPLE_PRODUCTS) and len(customer_ids) >= len(SAMPLE_CUSTOMERS):
                    for values in orders:
                        values["customer_id"] = customer_ids[values["customer_id"] - 1]
                        values["product_id"] = product_ids[values["product_id"] - 1]
                        session.add(Order(**values))
                    logger.info("Seeded %d sample orders", len(orders))
                else:
                    logger.warning("Not enough products/customers to seed sample orders")
            session.commit()

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("Database ping failed", exc_info=True)
            return False

    def close(self) -> None:
        self.engine.dispose()

    # --- products ---

    def list_products(self, filters: ListFilters) -> List[Record]:
        with self._session() as session:
            return [_as_dict(p) for p in session.scalars(build_product_query(filters))]

    def get_product(self, product_id: int) -> Optional[Record]:
        with self._session() as session:
            product = session.get(Product, product_id)
            return _as_dict(product) if product else None

    def get_product_price(self, product_id: int) -> Optional[Decimal]:
        with self._session() as session:
            return session.scalar(select(Product.price).where(Product.id == product_id))

    def create_product(self, values: Record) -> Record:
        with self._session() as session:
            product = Product(**values)
            session.add(product)
            session.commit()
            session.refresh(product)
            return _as_dict(product)

    def update_product(self, product_id: int, values: Record) -> Optional[Record]:
        with self._session() as session:
            result = _write(
                session,
                update(Product)
                .where(Product.id == product_id)
                .values(**values, updated_at=func.now())
            )
            session.commit()
            if result.rowcount == 0:
                return None
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> bool:
        with self._session(fk_message="Product is referenced by existing orders") as session:
            result = _write(session, delete(Product).where(Product.id == product_id))
            session.commit()
            return result.rowcount > 0

    # --- customers ---

    def list_customers(self, filters: ListFilters) -> List[Record]:
        with self._session() as session:
            return [
                _as_dict(c, exclude=CUSTOMER_SECRET_FIELDS)
                for c in session.scalars(build_customer_query(filters))
            ]

    def get_customer(self, customer_id: int) -> Optional[Record]:
        with self._session() as session:
            customer = session.get(Customer, customer_id)
            return _as_dict(customer, exclude=CUSTOMER_SECRET_FIELDS) if customer else None

    def get_customer_by_email(self, email: str) -> Optional[Record]:
        with self._session() as session:
            customer = session.scalar(select(Customer).where(Customer.email == email))
            return _as_dict(customer) if customer else None

    def create_customer(self, values: Record) -> Record:
        with self._session(unique_message="Email already exists") as session:
            customer = Customer(**values)
            session.add(customer)
            session.commit()
            session.refresh(customer)
            return _as_dict(customer, exclude=CUSTOMER_SECRET_FIELDS)

    def update_customer(self, customer_id: int, values: Record) -> Optional[Record]:
        with self._session(unique_message="Email already exists") as session:
            result = _write(
                session,
                update(Customer).where(Customer.id == customer_id).values(**values)
            )
            session.commit()
            if result.rowcount == 0:
                return None
        return self.get_customer(customer_id)

    def delete_customer(self, customer_id: int) -> bool:
        with self._session(fk_message="Customer is referenced by existing orders") as session:
            result = _write(session, delete(Customer).where(Customer.id == customer_id))
            session.commit()
            return result.rowcount > 0

    # --- orders ---

    def list_orders(self, filters: ListFilters) -> List[Record]:
        with self._session() as session:
            return [_order_dict(row) for row in session.execute(build_order_query(filters))]

    def get_order(self, order_id: int) -> Optional[Record]:
        with self._session() as session:
            row = session.execute(
                build_order_query(ListFilters()).where(Order.id == order_id)
            ).first()
            return _order_dict(row) if row else None

    def create_order(self, values: Record) -> Record:
        with self._session(fk_message="Customer or product not found") as session:
            order = Order(**values)
            session.add(order)
            session.commit()
            order_id = order.id
        return self.get_order(order_id)

    def update_order(self, order_id: int, values: Record) -> Optional[Record]:
        with self._session(fk_message="Customer or product not found") as session:
            result = _write(session, update(Order).where(Order.id == order_id).values(**values))
            session.commit()
            if result.rowcount == 0:
                return None
        return self.get_order(order_id)

    def delete_order(self, order_id: int) -> bool:
        with self._session() as session:
            result = _write(session, delete(Order).where(Order.id == order_id))
            session.commit()
            return result.rowcount > 0

    # --- stats ---

    def summary_stats(self, low_stock_threshold: int) -> Record:
        with self._session() as session:
            revenue = session.scalar(
                select(func.sum(Order.total_amount)).where(Order.status == "completed")
            )
            return {
                "totalProducts": session.scalar(select(func.count()).select_from(Product)),
                "totalCustomers": session.scalar(select(func.count()).select_from(Customer)),
                "totalOrders": session.scalar(select(func.count()).select_from(Order)),
                "totalRevenue": Decimal(str(revenue or 0)),
                "lowStockProducts": session.scalar(
                    select(func.count()).select_from(Product).where(Product.stock < low_stock_threshold)
                ),
                "pendingOrders": session.scalar(
                    select(func.count()).select_from(Order).where(Order.status == "pending")
                ),
            }

    def category_stats(self) -> List[Record]:
        stmt = (
            select(
                Product.category,
                func.count(Product.id).label("count"),
                func.coalesce(func.sum(Product.stock), 0).label("totalStock"),
            )
            .group_by(Product.category)
            .order_by(Product.category)
        )
        with self._session() as session:
            return [row._asdict() for row in session.execute(stmt)]

    def order_stats(self) -> List[Record]:
        stmt = (
            select(
                Order.status,
                func.count(Order.id).label("count"),
                func.sum(Order.total_amount).label("total"),
            )
            .group_by(Order.status)
            .order_by(Order.status)
        )
        with self._session() as session:
            return [row._asdict() for row in session.execute(stmt)]
