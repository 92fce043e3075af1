import pytest

from store_console.models import (
    Member, Order, OrderItem, OrderStatus, Product, Session, Store, UserRole, ValidationError,
    items_total, money
)


def make_order(**overrides):
    fields = dict(
        id='order-1', member_id='1', member_name='John Smith',
        store_id='1', store_name='Downtown Store',
        items=[OrderItem('1', 'Wireless Mouse', 3, 24.99)],
        total=74.97,
    )
    fields.update(overrides)
    return Order(**fields)


def test_order_total_must_match_lines():
    assert make_order().total == 74.97
    with pytest.raises(ValidationError):
        make_order(total=75.00)


def test_order_needs_items():
    with pytest.raises(ValidationError):
        make_order(items=[], total=0)


def test_order_status_must_be_known():
    with pytest.raises(ValidationError):
        make_order(status='shipped')


def test_transitions_leave_pending_only():
    order = make_order()

    assert order.can_transition_to(OrderStatus.APPROVED)
    assert order.can_transition_to(OrderStatus.REJECTED)

    approved = order.with_status(OrderStatus.APPROVED)
    assert approved.status.is_terminal
    assert not approved.can_transition_to(OrderStatus.REJECTED)
    assert order.status == OrderStatus.PENDING


def test_order_search_matches_id_member_and_store():
    order = make_order()

    assert order.matches_search('ORDER-1')
    assert order.matches_search('smith')
    assert order.matches_search('downtown')
    assert order.matches_search('')
    assert not order.matches_search('airport')


def test_order_round_trip_keeps_camel_case_keys():
    data = make_order().to_dict()

    assert data['memberName'] == 'John Smith'
    assert data['items'][0]['productId'] == '1'
    assert Order.from_dict(data) == make_order()


@pytest.mark.parametrize('quantity', [0, -2, 1.5])
def test_order_item_quantity(quantity):
    with pytest.raises(ValidationError):
        OrderItem('1', 'Mouse', quantity, 10.0)


def test_items_total_rounds_to_cents():
    items = [OrderItem('1', 'A', 3, 0.1), OrderItem('2', 'B', 1, 0.2)]
    assert items_total(items) == 0.5
    assert money(0.1 + 0.2) == 0.3


@pytest.mark.parametrize('price,stock', [(-1, 5), (10, -1), (10, 2.5), ('abc', 1)])
def test_product_rejects_bad_numbers(price, stock):
    with pytest.raises(ValidationError):
        Product(id='1', name='Lamp', price=price, stock=stock)


def test_product_in_stock():
    assert Product(id='1', name='Lamp', price=10, stock=1).in_stock
    assert not Product(id='1', name='Lamp', price=10, stock=0).in_stock


def test_store_requires_name_and_code():
    with pytest.raises(ValidationError):
        Store(id='1', store_id='ST001', name='  ')
    with pytest.raises(ValidationError):
        Store(id='1', store_id='', name='Downtown Store')
    with pytest.raises(ValidationError):
        Store(id='1', store_id='ST001', name='Downtown Store', member_count=-1)


def test_member_requires_valid_email():
    with pytest.raises(ValidationError):
        Member(id='1', name='John', email='john.store1.com', store_id='1')


def test_session_dict_omits_missing_store():
    admin = Session(user_id='admin', name='Admin User', email='admin@example.com', role=UserRole.ADMIN)
    member = Session(user_id='1', name='John Smith', email='john@store1.com',
                     role=UserRole.STORE_MEMBER, store_id='1', store_name='Downtown Store')

    assert 'storeId' not in admin.to_dict()
    assert member.to_dict()['storeName'] == 'Downtown Store'
