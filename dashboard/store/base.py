"""
Data-access interface used by every router.

Records cross this boundary as plain dicts keyed by column name. Order reads
additionally carry ``customer_name`` and ``product_name``.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List, Optional

from dashboard.store.query import ListFilters

Record = Dict[str, Any]


class Store(ABC):
    backend = "abstract"

    # --- lifecycle ---
    def init_schema(self) -> None:
        """Create tables if the backend owns its schema."""

    @abstractmethod
    def seed_if_empty(self) -> None: ...

    @abstractmethod
    def ping(self) -> bool: ...

    def close(self) -> None:
        pass

    # --- products ---
    @abstractmethod
    def list_products(self, filters: ListFilters) -> List[Record]: ...

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Record]: ...

    @abstractmethod
    def get_product_price(self, product_id: int) -> Optional[Decimal]: ...

    @abstractmethod
    def create_product(self, values: Record) -> Record: ...

    @abstractmethod
    def update_product(self, product_id: int, values: Record) -> Optional[Record]: ...

    @abstractmethod
    def delete_product(self, product_id: int) -> bool: ...

    # --- customers ---
    @abstractmethod
    def list_customers(self, filters: ListFilters) -> List[Record]: ...

    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[Record]: ...

    @abstractmethod
    def get_customer_by_email(self, email: str) -> Optional[Record]: ...

    @abstractmethod
    def create_customer(self, values: Record) -> Record: ...

    @abstractmethod
    def update_customer(self, customer_id: int, values: Record) -> Optional[Record]: ...

    @abstractmethod
    def delete_customer(self, customer_id: int) -> bool: ...

    # --- orders ---
    @abstractmethod
    def list_orders(self, filters: ListFilters) -> List[Record]: ...

    @abstractmethod
    def get_order(self, order_id: int) -> Optional[Record]: ...

    @abstractmethod
    def create_order(self, values: Record) -> Record: ...

    @abstractmethod
    def update_order(self, order_id: int, values: Record) -> Optional[Record]: ...

    @abstractmethod
    def delete_order(self, order_id: int) -> bool: ...

    # --- stats ---
    @abstractmethod
    def summary_stats(self, low_stock_threshold: int) -> Record: ...

    @abstractmethod
    def category_stats(self) -> List[Record]: ...

    @abstractmethod
    def order_stats(self) -> List[Record]: ...
