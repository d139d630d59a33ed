"""Fixed sample rows loaded into an empty store."""

from decimal import Decimal

SAMPLE_PRODUCTS = [
    {"name": 'Laptop Pro 15"', "category": "Electronics", "price": Decimal("1299.99"), "stock": 50},
    {"name": "Wireless Mouse", "category": "Electronics", "price": Decimal("29.99"), "stock": 200},
    {"name": "Mechanical Keyboard", "category": "Electronics", "price": Decimal("149.99"), "stock": 75},
    {"name": 'Monitor 27" 4K', "category": "Electronics", "price": Decimal("499.99"), "stock": 30},
    {"name": "USB-C Hub", "category": "Accessories", "price": Decimal("49.99"), "stock": 150},
    {"name": "Webcam HD", "category": "Electronics", "price": Decimal("79.99"), "stock": 100},
    {"name": "Desk Chair", "category": "Furniture", "price": Decimal("299.99"), "stock": 25},
    {"name": "Standing Desk", "category": "Furniture", "price": Decimal("599.99"), "stock": 15},
    {"name": "Notebook Set", "category": "Office", "price": Decimal("19.99"), "stock": 500},
    {"name": "Pen Pack", "category": "Office", "price": Decimal("9.99"), "stock": 1000},
]

SAMPLE_CUSTOMERS = [
    {"name": "John Doe", "email": "john@example.com", "phone": "555-0101", "address": "123 Main St, NYC"},
    {"name": "Jane Smith", "email": "jane@example.com", "phone": "555-0102", "address": "456 Oak Ave, LA"},
    {"name": "Bob Johnson", "email": "bob@example.com", "phone": "555-0103", "address": "789 Pine Rd, Chicago"},
    {"name": "Alice Brown", "email": "alice@example.com", "phone": "555-0104", "address": "321 Elm St, Houston"},
    {"name": "Charlie Wilson", "email": "charlie@example.com", "phone": "555-0105", "address": "654 Maple Dr, Phoenix"},
]

# (customer_id, product_id, quantity, total_amount, status); ids refer to the
# rows above in insertion order
SAMPLE_ORDERS = [
    (1, 1, 1, Decimal("1299.99"), "completed"),
    (1, 2, 2, Decimal("59.98"), "completed"),
    (2, 3, 1, Decimal("149.99"), "shipped"),
    (2, 4, 1, Decimal("499.99"), "pending"),
    (3, 5, 3, Decimal("149.97"), "completed"),
    (3, 7, 1, Decimal("299.99"), "shipped"),
    (4, 8, 1, Decimal("599.99"), "pending"),
    (4, 9, 5, Decimal("99.95"), "completed"),
    (5, 6, 2, Decimal("159.98"), "shipped"),
    (5, 10, 10, Decimal("99.90"), "completed"),
]


def sample_orders():
    return [
        {
            "customer_id": customer_id,
            "product_id": product_id,
            "quantity": quantity,
            "total_amount": total,
            "status": status,
        }
        for customer_id, product_id, quantity, total, status in SAMPLE_ORDERS
    ]
