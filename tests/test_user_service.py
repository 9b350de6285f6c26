import pytest

from biz_manager.models import Capability, User, UserRole, ValidationError, capabilities_for
from biz_manager.repositories import SessionRepository
from biz_manager.services import UserService


@pytest.fixture
def users(tmp_path):
    return UserService(SessionRepository(str(tmp_path)))


def test_capability_table():
    assert capabilities_for('admin') == frozenset(Capability)
    assert capabilities_for('staff') == {Capability.ORDERS, Capability.INVENTORY, Capability.CUSTOMERS}
    assert capabilities_for(UserRole.ACCOUNTANT) == {
        Capability.ORDERS, Capability.EXPENSES, Capability.PROFIT_LOSS, Capability.ANALYTICS,
    }
    assert capabilities_for('guest') == frozenset()


def test_visible_sections_keep_menu_order(users):
    assert users.visible_sections('staff') == ['orders', 'inventory', 'customers']
    assert users.visible_sections('accountant') == ['orders', 'expenses', 'profitloss', 'analytics']


def test_user_can_access():
    user = User(id='2', username='staff', role=UserRole.STAFF)
    assert user.can_access('inventory')
    assert not user.can_access(Capability.PROFIT_LOSS)
    assert not user.can_access('unknown')
    assert not user.is_admin()


@pytest.mark.parametrize('username', ['', '   ', None])
def test_blank_username_fails(users, username):
    with pytest.raises(ValidationError):
        users.login(username, 'admin')
    assert users.current_user() is None


def test_invalid_role_fails(users):
    with pytest.raises(ValidationError):
        users.login('bob', 'owner')


def test_login_reuses_demo_user(users):
    user = users.login('admin', 'admin')
    assert user.id == '1'
    assert user.name == 'Admin User'


def test_login_creates_adhoc_user(users):
    user = users.login('bob', 'staff')
    assert user.name == 'bob'
    assert user.role == UserRole.STAFF
    assert user.id.isdigit()

    # Mismo nombre que un demo pero otro rol: también es ad-hoc
    other = users.login('admin', 'staff')
    assert other.id != '1'


def test_session_restore_and_logout(tmp_path, users):
    users.login('accountant', 'accountant')

    restored = UserService(SessionRepository(str(tmp_path))).current_user()
    assert restored.username == 'accountant'
    assert restored.role == UserRole.ACCOUNTANT

    users.logout()
    assert users.current_user() is None


def test_corrupt_session_marker_is_no_session(tmp_path, users):
    (tmp_path / 'currentUser.json').write_text('[1, 2', encoding='utf-8')
    assert users.current_user() is None


def test_demo_users(users):
    assert [u.username for u in users.get_users()] == ['admin', 'staff', 'accountant']
    assert users.get_users()[0].is_admin()
