"""
Shared test fixtures for all backend tests.

Staff users, a small floor plan and a menu. Orders are built through the
services so fixtures never bypass the table synchronizer.
"""
import pytest
from decimal import Decimal

from users.models import User
from menu.models import MenuItem
from tables.models import Table


# ============================================================================
# USER FIXTURES
# ============================================================================

@pytest.fixture
def waiter(db):
    """Create the default waiter"""
    return User.objects.create_user(
        username='john_waiter',
        password='password123',
        first_name='John',
        last_name='Smith',
        role=User.Role.WAITER,
    )


@pytest.fixture
def second_waiter(db):
    """Create a second waiter for ownership checks"""
    return User.objects.create_user(
        username='mary_waiter',
        password='password123',
        first_name='Mary',
        last_name='Jones',
        role=User.Role.WAITER,
    )


@pytest.fixture
def chef(db):
    """Create the default chef"""
    return User.objects.create_user(
        username='gordon_chef',
        password='password123',
        first_name='Gordon',
        last_name='Ramsay',
        role=User.Role.CHEF,
    )


@pytest.fixture
def second_chef(db):
    return User.objects.create_user(
        username='julia_chef',
        password='password123',
        first_name='Julia',
        last_name='Child',
        role=User.Role.CHEF,
    )


@pytest.fixture
def manager(db):
    """Create a manager"""
    return User.objects.create_user(
        username='sarah_manager',
        password='password123',
        first_name='Sarah',
        last_name='Lee',
        role=User.Role.MANAGER,
    )


# ============================================================================
# TABLE FIXTURES
# ============================================================================

@pytest.fixture
def table_5(db):
    """Available four-top, table 5"""
    return Table.objects.create(number=5, capacity=4, location='Main Hall')


@pytest.fixture
def table_6(db):
    """Available two-top, table 6"""
    return Table.objects.create(number=6, capacity=2, location='Window')


@pytest.fixture
def table_8(db):
    """Available six-top, table 8"""
    return Table.objects.create(number=8, capacity=6, location='Patio')


# ============================================================================
# MENU FIXTURES
# ============================================================================

@pytest.fixture
def caesar_salad(db):
    return MenuItem.objects.create(
        name='Caesar Salad',
        price=Decimal('12.99'),
        category=MenuItem.Category.APPETIZER,
        ingredients=['romaine', 'parmesan', 'croutons'],
        allergens=['dairy', 'gluten'],
    )


@pytest.fixture
def ribeye(db):
    return MenuItem.objects.create(
        name='Ribeye Steak',
        price=Decimal('24.99'),
        category=MenuItem.Category.MAIN,
    )


@pytest.fixture
def lemonade(db):
    return MenuItem.objects.create(
        name='Lemonade',
        price=Decimal('3.50'),
        category=MenuItem.Category.BEVERAGE,
    )


@pytest.fixture
def sold_out_dessert(db):
    return MenuItem.objects.create(
        name='Chocolate Lava Cake',
        price=Decimal('8.00'),
        category=MenuItem.Category.DESSERT,
        available=False,
    )


# ============================================================================
# ORDER FIXTURES
# ============================================================================

@pytest.fixture
def open_order(table_5, waiter, caesar_salad, ribeye):
    """Pending order on table 5: 2 x Caesar Salad, 1 x Ribeye Steak"""
    from orders.services import OrderService
    return OrderService.create_order(
        table_number=table_5.number,
        items=[
            {'menu_item_id': caesar_salad.pk, 'quantity': 2},
            {'menu_item_id': ribeye.pk, 'quantity': 1, 'notes': 'medium rare'},
        ],
        waiter=waiter,
        customer_name='Alice',
    )


@pytest.fixture
def served_order(open_order, chef):
    """open_order taken through preparing and ready to served"""
    from orders.services import OrderLifecycleService
    OrderLifecycleService.accept(open_order.pk, chef, 15)
    OrderLifecycleService.complete(open_order.pk, chef)
    return OrderLifecycleService.serve(open_order.pk, confirmed=True)
