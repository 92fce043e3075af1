import asyncio

import pytest


def login_as(client, email, password='password'):
    return client.post('/login', json={'email': email, 'password': password})


def test_login_returns_home_for_the_role(client):
    admin = login_as(client, 'admin@example.com')
    assert admin.status_code == 200
    assert admin.get_json()['redirect'] == '/admin'

    member = login_as(client, 'john@store1.com')
    assert member.get_json()['redirect'] == '/store'
    assert member.get_json()['session']['storeName'] == 'Downtown Store'


@pytest.mark.parametrize('body,status', [
    ({'email': 'admin@example.com', 'password': 'nope'}, 401),
    ({'email': 'admin@example.com'}, 400),
    ({'email': 'ghost@example.com', 'password': 'password'}, 401),
])
def test_bad_logins(client, body, status):
    response = client.post('/login', json=body)

    assert response.status_code == status
    assert response.get_json()['ok'] is False


@pytest.mark.parametrize('path', ['/admin', '/admin/stores', '/admin/orders', '/store', '/store/cart'])
def test_anonymous_requests_are_sent_to_login(client, path):
    response = client.get(path)

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/login')


def test_store_member_cannot_open_admin_pages(client):
    login_as(client, 'john@store1.com')

    response = client.get('/admin')

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/login')


def test_admin_cannot_open_the_storefront(client):
    login_as(client, 'admin@example.com')

    assert client.get('/store').status_code == 302


def test_logout_revokes_access(client):
    login_as(client, 'admin@example.com')
    assert client.get('/admin').status_code == 200

    client.post('/logout')

    assert client.get('/admin').status_code == 302


def test_dashboard(client):
    login_as(client, 'admin@example.com')

    stats = client.get('/admin').get_json()['stats']

    assert stats['total_orders'] == 5
    assert stats['pending_orders'] == 5
    assert stats['total_stores'] == 4
    assert stats['total_members'] == 5


def test_orders_search_without_matches(client):
    login_as(client, 'admin@example.com')

    data = client.get('/admin/orders?q=zzz').get_json()

    assert data['orders'] == []
    assert data['no_results'] is True
    assert data['pagination']['totalPages'] == 1


def test_orders_pagination(client):
    login_as(client, 'admin@example.com')

    data = client.get('/admin/orders?page=2').get_json()

    assert [o['id'] for o in data['orders']] == [f'order-{i}' for i in range(11, 16)]
    assert data['pagination']['canGoPrevious'] is True
    assert data['no_results'] is False


def test_approve_order(client):
    login_as(client, 'admin@example.com')
    client.get('/admin/orders')

    first = client.post('/admin/orders/order-7/approve')
    assert first.status_code == 200
    assert first.get_json()['order']['status'] == 'approved'
    assert first.get_json()['notifications'][0]['description'] == 'Pedido aprobado correctamente'

    again = client.post('/admin/orders/order-7/approve')
    assert again.status_code == 409
    assert again.get_json()['notifications'][0]['variant'] == 'destructive'

    orders = client.get('/admin/orders?q=order-7').get_json()['orders']
    assert orders[0]['status'] == 'approved'


def test_unknown_order_is_not_found(client):
    login_as(client, 'admin@example.com')

    response = client.post('/admin/orders/order-999/reject')

    assert response.status_code == 404
    assert response.get_json()['not_found'] is True


def test_store_crud_routes(client):
    login_as(client, 'admin@example.com')

    created = client.post('/admin/stores', json={'name': 'Harbor Outlet', 'storeId': 'ST005'})
    assert created.status_code == 201
    store_id = created.get_json()['store']['id']

    updated = client.put(f'/admin/stores/{store_id}', json={'name': 'Harbor Plaza'})
    assert updated.get_json()['store']['name'] == 'Harbor Plaza'

    assert client.delete(f'/admin/stores/{store_id}').status_code == 200
    names = [s['name'] for s in client.get('/admin/stores').get_json()['stores']]
    assert 'Harbor Plaza' not in names


def test_store_without_name_is_rejected(client):
    login_as(client, 'admin@example.com')

    response = client.post('/admin/stores', json={'storeId': 'ST009'})

    assert response.status_code == 400
    assert response.get_json()['ok'] is False


def test_members_page_includes_store_lookup(client):
    login_as(client, 'admin@example.com')

    data = client.get('/admin/members?store=1').get_json()

    assert [m['name'] for m in data['members']] == ['John Smith', 'David Lee']
    assert len(data['stores']) == 4


def test_missing_product_is_not_found(client):
    login_as(client, 'john@store1.com')

    response = client.get('/store/product/999')

    assert response.status_code == 404
    assert response.get_json()['not_found'] is True


def test_cart_and_checkout(client):
    login_as(client, 'john@store1.com')

    client.post('/store/cart', json={'productId': '2', 'quantity': 2})
    cart = client.post('/store/cart', json={'productId': '2', 'quantity': 1}).get_json()['cart']
    assert cart['items_count'] == 1
    assert cart['total_items'] == 3

    cart = client.put('/store/cart/2', json={'quantity': 1}).get_json()['cart']
    assert cart['total_price'] == 89.5

    response = client.post('/store/checkout')
    assert response.status_code == 201
    order = response.get_json()['order']
    assert order['status'] == 'pending'
    assert order['total'] == 89.5

    assert client.get('/store/cart').get_json()['cart']['items'] == []
    history = client.get('/store/orders').get_json()['orders']
    assert history[0]['id'] == order['id']


def test_checkout_with_empty_cart(client):
    login_as(client, 'john@store1.com')

    assert client.post('/store/checkout').status_code == 400


def test_bad_cart_quantity(client):
    login_as(client, 'john@store1.com')

    assert client.post('/store/cart', json={'productId': '2', 'quantity': 0}).status_code == 400
    assert client.post('/store/cart', json={'productId': '2', 'quantity': 'x'}).status_code == 400


def test_password_mismatch(client):
    login_as(client, 'john@store1.com')

    response = client.post('/store/profile/password',
                           json={'newPassword': 'secret1', 'confirmPassword': 'secret2'})

    assert response.status_code == 400
    assert response.get_json()['error'] == 'Las contraseñas no coinciden'


def test_password_change(client):
    login_as(client, 'sarah@store2.com')

    response = client.post('/store/profile/password',
                           json={'newPassword': 'secret1', 'confirmPassword': 'secret1'})

    assert response.status_code == 200
    assert response.get_json()['notifications'][0]['title'] == 'Contraseña actualizada'


def test_unknown_route(client):
    response = client.get('/nowhere')

    assert response.status_code == 404
    assert response.get_json()['not_found'] is True


def test_orders_refresh_bypasses_the_cache(client, container):
    login_as(client, 'admin@example.com')
    client.get('/admin/orders')
    asyncio.run(container.store.update_order_status('order-1', 'rejected'))

    cached = client.get('/admin/orders?q=order-1&status=pending').get_json()
    refreshed = client.get('/admin/orders?q=order-1&status=pending&refresh=1').get_json()

    assert 'order-1' in [o['id'] for o in cached['orders']]
    assert 'order-1' not in [o['id'] for o in refreshed['orders']]
    assert refreshed['is_updating'] is False


def test_out_of_stock_product_is_not_carted(client):
    login_as(client, 'john@store1.com')

    response = client.post('/store/cart', json={'productId': '3', 'quantity': 3})

    assert response.status_code == 400
    assert response.get_json()['ok'] is False
    assert client.get('/store/cart').get_json()['cart']['items'] == []
    assert client.post('/store/checkout').status_code == 400


def test_cart_quantity_above_stock_is_rejected(client):
    login_as(client, 'john@store1.com')
    client.post('/store/cart', json={'productId': '2', 'quantity': 40})

    assert client.post('/store/cart', json={'productId': '2', 'quantity': 6}).status_code == 400
    assert client.put('/store/cart/2', json={'quantity': 46}).status_code == 400
    assert client.get('/store/cart').get_json()['cart']['total_items'] == 40
