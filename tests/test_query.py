from dashboard.store.query import DEFAULT_ORDERING, ListFilters, escape_like, resolve_sort
from dashboard.store.sql import build_customer_query, build_order_query, build_product_query

HOSTILE = "x'; DROP TABLE products; --"


def test_resolve_sort_allow_list():
    assert resolve_sort("price_asc") == ("price", False)
    assert resolve_sort("price_desc") == ("price", True)
    assert resolve_sort("stock_asc") == ("stock", False)
    assert resolve_sort("stock_desc") == ("stock", True)


def test_resolve_sort_fallback():
    for value in (None, "", "bogus", "id; DROP TABLE products", "PRICE_ASC"):
        assert resolve_sort(value) == DEFAULT_ORDERING


def test_blank_filters_are_absent():
    filters = ListFilters.build(search="  ", category="", sort=None, status=" shipped ")
    assert filters == ListFilters(status="shipped")


def test_escape_like():
    assert escape_like("50%_off") == "50\\%\\_off"
    assert escape_like("a\\b") == "a\\\\b"


def test_product_search_is_bound_not_interpolated():
    compiled = build_product_query(ListFilters(search=HOSTILE, category=HOSTILE)).compile()
    assert "DROP" not in str(compiled)
    assert list(compiled.params.values()).count(HOSTILE) == 2


def test_product_query_ordering():
    sql = str(build_product_query(ListFilters(sort="price_asc")).compile())
    assert "ORDER BY products.price ASC, products.id DESC" in sql

    sql = str(build_product_query(ListFilters(sort="nope")).compile())
    assert "ORDER BY products.id DESC" in sql


def test_customer_search_covers_name_and_email():
    compiled = build_customer_query(ListFilters(search=HOSTILE)).compile()
    sql = str(compiled)
    assert "customers.name" in sql and "customers.email" in sql and " OR " in sql
    assert "DROP" not in sql


def test_order_status_filter_is_bound():
    compiled = build_order_query(ListFilters(status=HOSTILE)).compile()
    assert "DROP" not in str(compiled)
    assert HOSTILE in compiled.params.values()
