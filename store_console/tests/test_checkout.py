import asyncio

import pytest

from store_console.models import OrderStatus, ValidationError
from store_console.repositories import BackingStoreError


def fill_cart(container):
    async def load():
        keyboard = await container.product_service.get_product('2')
        mug = await container.product_service.get_product('5')
        return keyboard, mug

    keyboard, mug = asyncio.run(load())
    container.cart_service.add_item(keyboard, 2)
    container.cart_service.add_item(mug, 3)


def test_checkout_creates_pending_order_and_clears_cart(container):
    container.session_state.login('john@store1.com', 'password')
    fill_cart(container)
    expected_total = container.cart_service.get_total_price()

    result = asyncio.run(container.checkout_service.checkout())

    assert result.ok is True
    order = result.data
    assert order.status == OrderStatus.PENDING
    assert order.member_id == '1'
    assert order.store_name == 'Downtown Store'
    assert order.total == expected_total == round(2 * 89.50 + 3 * 12.00, 2)
    assert order.item_count == 5
    assert container.cart_service.is_empty()

    stored = asyncio.run(container.store.get_orders())
    assert stored[-1].id == 'order-16'


def test_checkout_invalidates_orders(container):
    container.session_state.login('john@store1.com', 'password')
    asyncio.run(container.order_service.list_orders())
    fill_cart(container)

    asyncio.run(container.checkout_service.checkout())

    assert container.cache.is_stale('orders')
    history = asyncio.run(container.order_service.orders_for_member('1'))
    assert history.data[0].id == 'order-16'


def test_failed_checkout_keeps_cart(container):
    container.session_state.login('john@store1.com', 'password')
    fill_cart(container)

    async def rejected(data):
        raise BackingStoreError('Almacén no disponible')

    container.store.add_order = rejected
    result = asyncio.run(container.checkout_service.checkout())

    assert result.ok is False
    assert container.cart_service.get_total_items() == 5
    notes = container.notifier.drain()
    assert notes[-1].is_error
    assert notes[-1].description == 'Almacén no disponible'


def test_empty_cart_cannot_checkout(container):
    container.session_state.login('john@store1.com', 'password')

    with pytest.raises(ValidationError):
        asyncio.run(container.checkout_service.checkout())


def test_admin_cannot_checkout(container):
    container.session_state.login('admin@example.com', 'password')
    fill_cart(container)

    with pytest.raises(ValidationError):
        container.checkout_service.build_order()


def test_built_order_totals_match_lines(container):
    container.session_state.login('sarah@store2.com', 'password')
    fill_cart(container)

    order = container.checkout_service.build_order()

    assert order['status'] == 'pending'
    assert order['storeId'] == '2'
    assert order['total'] == round(sum(i['quantity'] * i['price'] for i in order['items']), 2)
