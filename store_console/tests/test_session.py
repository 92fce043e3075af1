import asyncio

import pytest

from store_console.models import Product, UserRole, ValidationError


def test_admin_login(container):
    session_state = container.session_state

    assert session_state.login('admin@example.com', 'password') is True
    session = session_state.current_session()
    assert session.role == UserRole.ADMIN
    assert session.is_admin
    assert session.store_id is None


def test_login_ignores_case_and_spaces_in_email(container):
    session_state = container.session_state

    assert session_state.login('  John@Store1.com ', 'password') is True
    session = session_state.current_session()
    assert session.user_id == '1'
    assert session.role == UserRole.STORE_MEMBER
    assert session.store_id == '1'
    assert session.store_name == 'Downtown Store'


@pytest.mark.parametrize('email,credential', [
    ('admin@example.com', 'wrong'),
    ('admin@example.com', ''),
    ('nobody@example.com', 'password'),
    ('', 'password'),
])
def test_rejected_login_leaves_no_session(container, email, credential):
    assert container.session_state.login(email, credential) is False
    assert container.session_state.current_session() is None
    assert not container.session_state.is_authenticated


def test_failed_login_keeps_the_previous_session(container):
    session_state = container.session_state
    session_state.login('sarah@store2.com', 'password')

    assert session_state.login('admin@example.com', 'nope') is False
    assert session_state.current_session().user_id == '2'


def test_access_requires_exact_role(container):
    session_state = container.session_state
    assert not session_state.can_access(UserRole.ADMIN)

    session_state.login('admin@example.com', 'password')
    assert session_state.can_access(UserRole.ADMIN)
    assert session_state.can_access('admin')
    assert not session_state.can_access(UserRole.STORE_MEMBER)
    assert not session_state.can_access('superuser')

    session_state.login('john@store1.com', 'password')
    assert session_state.can_access(UserRole.STORE_MEMBER)
    assert not session_state.can_access(UserRole.ADMIN)
    with pytest.raises(PermissionError):
        session_state.require_role(UserRole.ADMIN)


def test_logout_clears_session_and_cart(container):
    session_state = container.session_state
    session_state.login('john@store1.com', 'password')
    container.cart_service.add_item(Product(id='1', name='Laptop', price=999.99, stock=5), 2)

    session_state.logout()

    assert session_state.current_session() is None
    assert container.cart_service.is_empty()
    assert not session_state.can_access(UserRole.STORE_MEMBER)


def test_login_and_logout_are_audited(container):
    session_state = container.session_state
    session_state.login('admin@example.com', 'password')
    session_state.logout()

    logs = container.audit_service.get_logs_by_type('SESION')
    assert len(logs) == 2
    assert logs[0]['message'].startswith('Cierre de sesión')
    assert logs[1]['details'] == {'role': 'admin'}


def test_logout_without_session_writes_nothing(container):
    container.session_state.logout()
    assert container.audit_service.get_recent_logs() == []


@pytest.mark.parametrize('new,confirm', [
    ('', ''),
    ('secret1', ''),
    ('secret1', 'secret2'),
    ('abc', 'abc'),
])
def test_password_change_validation(container, new, confirm):
    container.session_state.login('admin@example.com', 'password')

    with pytest.raises(ValidationError):
        asyncio.run(container.session_state.update_password(new, confirm))


def test_password_change_needs_a_session(container):
    session_state = container.session_state

    assert asyncio.run(session_state.update_password('secret1', 'secret1')) is False

    session_state.login('admin@example.com', 'password')
    assert asyncio.run(session_state.update_password('secret1', 'secret1')) is True
