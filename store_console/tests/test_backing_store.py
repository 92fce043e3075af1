import asyncio

import pytest

from store_console.clock import ManualClock
from store_console.models import ORDER_TRANSITIONS, OrderStatus, ValidationError, items_total
from store_console.repositories import (
    IBackingStore, InvalidTransitionError, MockBackingStore, NotFoundError
)


@pytest.fixture
def store(clock):
    return MockBackingStore(clock=clock, latency=0)


def new_order(**overrides):
    data = {
        'memberId': '1',
        'memberName': 'John Smith',
        'storeId': '1',
        'storeName': 'Downtown Store',
        'items': [{'productId': '1', 'productName': 'Wireless Mouse', 'quantity': 2, 'price': 24.99}],
        'total': 49.98,
    }
    data.update(overrides)
    return data


def test_satisfies_the_store_contract(store):
    assert isinstance(store, IBackingStore)


def test_seed_integrity(store):
    stores = asyncio.run(store.get_stores())
    members = asyncio.run(store.get_members())
    products = asyncio.run(store.get_products())
    orders = asyncio.run(store.get_orders())

    assert [s.store_id for s in stores] == ['ST001', 'ST002', 'ST003', 'ST004']
    assert len(members) == 5
    assert len(products) == 8
    assert len(orders) == 15
    assert all(o.total == items_total(o.items) for o in orders)
    assert sum(1 for o in orders if o.status == OrderStatus.PENDING) == 5
    assert {m.store_name for m in members} <= {s.name for s in stores}


def test_reads_return_copies(store):
    orders = asyncio.run(store.get_orders())
    orders[0].status = OrderStatus.APPROVED

    assert asyncio.run(store.get_orders())[0].status == OrderStatus.PENDING


def test_each_call_waits_the_configured_latency():
    clock = ManualClock()
    store = MockBackingStore(clock=clock, latency=0.3)

    asyncio.run(store.get_stores())
    asyncio.run(store.get_orders())

    assert clock.now() == pytest.approx(0.6)


@pytest.mark.parametrize('current', list(OrderStatus))
@pytest.mark.parametrize('target', [OrderStatus.APPROVED, OrderStatus.REJECTED])
def test_only_pending_orders_change_status(store, current, target):
    created = asyncio.run(store.add_order(new_order()))
    if current != OrderStatus.PENDING:
        asyncio.run(store.update_order_status(created.id, current))

    if target in ORDER_TRANSITIONS[current]:
        updated = asyncio.run(store.update_order_status(created.id, target))
        assert updated.status == target
    else:
        with pytest.raises(InvalidTransitionError):
            asyncio.run(store.update_order_status(created.id, target))


def test_unknown_status_is_a_validation_error(store):
    with pytest.raises(ValidationError):
        asyncio.run(store.update_order_status('order-1', 'shipped'))


@pytest.mark.parametrize('call', [
    lambda s: s.update_order_status('order-999', OrderStatus.APPROVED),
    lambda s: s.update_store('999', {'name': 'X'}),
    lambda s: s.delete_store('999'),
    lambda s: s.update_member('999', {'name': 'X'}),
    lambda s: s.delete_member('999'),
])
def test_unknown_ids_raise_not_found(store, call):
    with pytest.raises(NotFoundError):
        asyncio.run(call(store))


def test_new_order_gets_next_id_and_timestamp(store, clock):
    clock.advance(60)
    created = asyncio.run(store.add_order(new_order()))

    assert created.id == 'order-16'
    assert created.status == OrderStatus.PENDING
    assert created.created_at == '2024-01-01T00:01:00+00:00'


def test_new_order_must_be_pending(store):
    with pytest.raises(InvalidTransitionError):
        asyncio.run(store.add_order(new_order(status='approved')))


def test_wrong_total_is_rejected(store):
    with pytest.raises(ValidationError):
        asyncio.run(store.add_order(new_order(total=50.00)))
    assert len(asyncio.run(store.get_orders())) == 15


def test_order_without_items_is_rejected(store):
    with pytest.raises(ValidationError):
        asyncio.run(store.add_order(new_order(items=[], total=0)))


def test_store_crud(store):
    created = asyncio.run(store.add_store({'name': 'Harbor Outlet', 'storeId': 'ST005'}))
    assert created.id == '5'
    assert created.member_count == 0

    updated = asyncio.run(store.update_store('5', {'name': 'Harbor Plaza'}))
    assert updated.name == 'Harbor Plaza'
    assert updated.store_id == 'ST005'

    asyncio.run(store.delete_store('5'))
    assert [s.id for s in asyncio.run(store.get_stores())] == ['1', '2', '3', '4']


def test_member_patch_keeps_id_and_created_at(store):
    before = asyncio.run(store.get_members())[0]

    updated = asyncio.run(store.update_member('1', {'id': '77', 'createdAt': 'x', 'name': 'Johnny'}))

    assert updated.id == '1'
    assert updated.created_at == before.created_at
    assert updated.name == 'Johnny'


def test_unseeded_store_is_empty(clock):
    store = MockBackingStore(clock=clock, latency=0, seeded=False)

    assert asyncio.run(store.get_orders()) == []
    assert asyncio.run(store.add_store({'name': 'A', 'storeId': 'S1'})).id == '1'
