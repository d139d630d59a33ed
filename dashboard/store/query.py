"""
Backend-neutral list filters.

Each store renders a ``ListFilters`` with its own query builder; this module
only decides *what* is filtered and in which order, never how values reach
the database.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

# sort key -> (column, descending)
PRODUCT_SORTS = {
    "price_asc": ("price", False),
    "price_desc": ("price", True),
    "stock_asc": ("stock", False),
    "stock_desc": ("stock", True),
}

DEFAULT_ORDERING = ("id", True)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ListFilters:
    search: Optional[str] = None
    category: Optional[str] = None
    sort: Optional[str] = None
    status: Optional[str] = None

    @classmethod
    def build(cls, search=None, category=None, sort=None, status=None) -> "ListFilters":
        """Blank query parameters count as absent."""
        return cls(
            search=_clean(search),
            category=_clean(category),
            sort=_clean(sort),
            status=_clean(status),
        )


def resolve_sort(sort: Optional[str]) -> Tuple[str, bool]:
    """Map a client sort key onto the allow-list; anything else is newest first."""
    return PRODUCT_SORTS.get(sort or "", DEFAULT_ORDERING)


def escape_like(value: str, escape: str = "\\") -> str:
    """Escape LIKE wildcards so the text is matched literally."""
    return (
        value.replace(escape, escape + escape)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )
