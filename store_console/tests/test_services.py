import asyncio
import re

import pytest

from store_console.models import OrderStatus, ValidationError
from store_console.services import generate_temp_password, is_empty_result


def login_admin(container):
    container.session_state.login('admin@example.com', 'password')


# --- Pedidos ---

def test_search_without_matches_is_an_empty_result(container):
    result = asyncio.run(container.order_service.filter_orders('zzz-no-match'))

    assert result.data == []
    assert is_empty_result(result)


def test_search_by_member_and_store(container):
    by_member = asyncio.run(container.order_service.filter_orders('sarah'))
    by_store = asyncio.run(container.order_service.filter_orders('AIRPORT'))

    assert {o.member_name for o in by_member.data} == {'Sarah Johnson'}
    assert {o.store_name for o in by_store.data} == {'Airport Branch'}


def test_status_filter(container):
    pending = asyncio.run(container.order_service.filter_orders(status='pending'))

    assert len(pending.data) == 5
    assert all(o.status == OrderStatus.PENDING for o in pending.data)

    with pytest.raises(ValidationError):
        asyncio.run(container.order_service.filter_orders(status='shipped'))


def test_orders_page(container):
    view = asyncio.run(container.order_service.orders_page(page=2, page_size=10))

    assert view.page.total_pages == 2
    assert [o.id for o in view.page.page_items] == [f'order-{i}' for i in range(11, 16)]
    assert not view.is_empty_result

    clamped = asyncio.run(container.order_service.orders_page(page=9, page_size=10))
    assert clamped.page.current_page == 2


def test_orders_are_read_once_within_the_window(container):
    calls = []
    original = container.store.get_orders

    async def counting():
        calls.append(1)
        return await original()

    container.store.get_orders = counting
    asyncio.run(container.order_service.filter_orders('john'))
    asyncio.run(container.order_service.orders_page())
    asyncio.run(container.order_service.orders_for_member('1'))

    assert len(calls) == 1


def test_member_history_is_newest_first(container):
    history = asyncio.run(container.order_service.orders_for_member('1'))

    assert [o.id for o in history.data] == ['order-11', 'order-6', 'order-1']


def test_reject_then_approve_is_refused(container):
    login_admin(container)
    asyncio.run(container.order_service.list_orders())

    assert asyncio.run(container.order_service.reject_order('order-4')).ok
    second = asyncio.run(container.order_service.approve_order('order-4'))

    assert not second.ok
    order = asyncio.run(container.order_service.get_order('order-4'))
    assert order.status == OrderStatus.REJECTED
    assert len(container.audit_service.get_logs_by_type('PEDIDO')) == 1


# --- Tiendas ---

def test_store_validation_happens_before_the_store_is_called(container):
    calls = []

    async def add_store(data):
        calls.append(data)

    container.store.add_store = add_store

    with pytest.raises(ValidationError):
        asyncio.run(container.store_service.add_store({'name': '', 'storeId': 'ST009'}))
    with pytest.raises(ValidationError):
        asyncio.run(container.store_service.add_store({'name': 'Harbor'}))
    assert calls == []


def test_add_store_refreshes_the_list(container):
    login_admin(container)
    asyncio.run(container.store_service.list_stores())

    result = asyncio.run(container.store_service.add_store({'name': ' Harbor Outlet ', 'storeId': 'ST005'}))
    stores = asyncio.run(container.store_service.list_stores())

    assert result.ok
    assert result.data.name == 'Harbor Outlet'
    assert [s.name for s in stores.data][-1] == 'Harbor Outlet'
    assert container.audit_service.get_logs_by_type('TIENDA')[0]['user'] == 'Admin User'


def test_search_stores_by_name_or_code(container):
    by_code = asyncio.run(container.store_service.search_stores('st003'))
    by_name = asyncio.run(container.store_service.search_stores('mall'))

    assert [s.name for s in by_code.data] == ['Airport Branch']
    assert [s.store_id for s in by_name.data] == ['ST002']


# --- Miembros ---

def test_temp_password_format():
    for _ in range(20):
        assert re.match(r'^temp[a-z0-9]{6}$', generate_temp_password())


def test_new_member_without_password_gets_a_temporary_one(container):
    login_admin(container)
    result = asyncio.run(container.member_service.add_member(
        {'name': 'Lena Park', 'email': 'lena@store3.com', 'storeId': '3', 'password': ''}
    ))

    assert result.ok
    assert re.match(r'^temp[a-z0-9]{6}$', result.data.password)
    assert result.data.store_name == 'Airport Branch'


def test_member_update_without_password_keeps_it(container):
    login_admin(container)
    result = asyncio.run(container.member_service.update_member('2', {'name': 'Sarah J.', 'password': ''}))

    assert result.ok
    assert result.data.password == 'password'
    assert result.data.name == 'Sarah J.'


def test_member_store_change_copies_the_store_name(container):
    login_admin(container)
    result = asyncio.run(container.member_service.update_member('5', {'storeId': '4'}))

    assert result.data.store_name == 'Suburban Center'


def test_store_rename_does_not_touch_members(container):
    login_admin(container)
    asyncio.run(container.store_service.update_store('1', {'name': 'Downtown Flagship'}))

    member = asyncio.run(container.member_service.get_member('1'))
    assert member.store_name == 'Downtown Store'


def test_member_filters(container):
    by_store = asyncio.run(container.member_service.filter_members(store_id='1'))
    by_text = asyncio.run(container.member_service.filter_members('EMMA'))

    assert [m.name for m in by_store.data] == ['John Smith', 'David Lee']
    assert [m.email for m in by_text.data] == ['emma@store4.com']


def test_member_validation(container):
    with pytest.raises(ValidationError):
        asyncio.run(container.member_service.add_member({'name': 'X', 'email': 'x', 'storeId': '1'}))
    with pytest.raises(ValidationError):
        asyncio.run(container.member_service.update_member('1', {'email': ' '}))


# --- Catálogo y panel ---

def test_missing_product_is_none(container):
    assert asyncio.run(container.product_service.get_product('999')) is None
    assert asyncio.run(container.product_service.get_product('3')).name == 'USB-C Hub'


def test_product_search_and_categories(container):
    home = asyncio.run(container.product_service.search_products(category='Home'))
    pens = asyncio.run(container.product_service.search_products('pen'))

    assert [p.name for p in home.data] == ['Desk Lamp', 'Ceramic Mug']
    assert [p.name for p in pens.data] == ['Gel Pen Set']
    assert asyncio.run(container.product_service.categories()) == [
        'Electronics', 'Home', 'Outdoor', 'Stationery'
    ]


def test_dashboard_counts(container):
    stats = asyncio.run(container.dashboard_service.get_stats())

    assert stats['total_orders'] == 5
    assert stats['pending_orders'] == 5
    assert stats['total_stores'] == 4
    assert stats['total_members'] == 5
    assert stats['is_loading'] is False
    assert stats['error'] is None


def test_dashboard_reports_fetch_errors(container):
    async def broken():
        raise ConnectionError('sin red')

    container.store.get_members = broken
    stats = asyncio.run(container.dashboard_service.get_stats())

    assert stats['total_members'] == 0
    assert stats['error'] == 'sin red'
    assert stats['total_stores'] == 4
