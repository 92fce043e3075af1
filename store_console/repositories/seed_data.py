# ==============================================================================
# DATOS DE DEMOSTRACIÓN
# ==============================================================================
# Semilla determinista del almacén en memoria: mismas tiendas, miembros,
# productos y pedidos en cada arranque (y en cada test).
# ==============================================================================

from datetime import timedelta
from typing import List

from store_console.clock import ManualClock
from store_console.models import (
    Member, Order, OrderItem, OrderStatus, Product, Store, items_total
)


STORE_NAMES = ['Downtown Store', 'Mall Location', 'Airport Branch', 'Suburban Center']

MEMBER_ROWS = [
    # (nombre, email, índice de tienda)
    ('John Smith', 'john@store1.com', 0),
    ('Sarah Johnson', 'sarah@store2.com', 1),
    ('Mike Wilson', 'mike@store3.com', 2),
    ('Emma Brown', 'emma@store4.com', 3),
    ('David Lee', 'david@store1.com', 0),
]

PRODUCT_ROWS = [
    # (nombre, categoría, precio, stock)
    ('Wireless Mouse', 'Electronics', 24.99, 120),
    ('Mechanical Keyboard', 'Electronics', 89.50, 45),
    ('USB-C Hub', 'Electronics', 39.00, 0),
    ('Desk Lamp', 'Home', 32.75, 60),
    ('Ceramic Mug', 'Home', 12.00, 200),
    ('Notebook A5', 'Stationery', 6.25, 500),
    ('Gel Pen Set', 'Stationery', 9.90, 310),
    ('Water Bottle', 'Outdoor', 18.40, 75),
]

ORDER_COUNT = 15
_STATUS_CYCLE = [OrderStatus.PENDING, OrderStatus.APPROVED, OrderStatus.REJECTED]


def _iso(clock, days_ago: int = 0) -> str:
    return (clock.utcnow() - timedelta(days=days_ago)).isoformat()


def seed_stores() -> List[Store]:
    return [
        Store(id=str(i + 1), store_id=f'ST{i + 1:03d}', name=name,
              member_count=sum(1 for row in MEMBER_ROWS if row[2] == i))
        for i, name in enumerate(STORE_NAMES)
    ]


def seed_members(clock=None) -> List[Member]:
    clock = clock or ManualClock()
    return [
        Member(
            id=str(i + 1),
            name=name,
            email=email,
            store_id=str(store_index + 1),
            store_name=STORE_NAMES[store_index],
            password='password',
            created_at=_iso(clock, days_ago=30 - i),
        )
        for i, (name, email, store_index) in enumerate(MEMBER_ROWS)
    ]


def seed_products() -> List[Product]:
    return [
        Product(
            id=str(i + 1),
            name=name,
            description=f'{name} ({category.lower()})',
            price=price,
            category=category,
            image=f'/static/products/{i + 1}.png',
            stock=stock,
        )
        for i, (name, category, price, stock) in enumerate(PRODUCT_ROWS)
    ]


def seed_orders(clock=None) -> List[Order]:
    """
    15 pedidos: estado rotando pending/approved/rejected,
    miembro y tienda rotando sobre la semilla, total siempre consistente.
    """
    clock = clock or ManualClock()
    products = seed_products()
    orders = []
    for index in range(ORDER_COUNT):
        member_index = index % len(MEMBER_ROWS)
        name, _email, store_index = MEMBER_ROWS[member_index]
        product = products[index % len(products)]
        items = [OrderItem(
            product_id=product.id,
            product_name=product.name,
            quantity=(index % 3) + 1,
            price=product.price,
        )]
        orders.append(Order(
            id=f'order-{index + 1}',
            member_id=str(member_index + 1),
            member_name=name,
            store_id=str(store_index + 1),
            store_name=STORE_NAMES[store_index],
            items=items,
            total=items_total(items),
            status=_STATUS_CYCLE[index % len(_STATUS_CYCLE)],
            created_at=_iso(clock, days_ago=ORDER_COUNT - index),
        ))
    return orders
