"""
Django management command to set up demo restaurant data:
staff accounts, tables 1-8 and a small menu.
"""
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from billing.models import Bill
from menu.models import MenuItem
from orders.models import Order
from reservations.models import Reservation
from tables.models import Table
from users.models import User

DEMO_PASSWORD = "password123"

DEMO_STAFF = [
    ("john_waiter", "John", "Smith", User.Role.WAITER),
    ("gordon_chef", "Gordon", "Ramsay", User.Role.CHEF),
    ("sarah_manager", "Sarah", "Lee", User.Role.MANAGER),
]

# (number, capacity, location)
DEMO_TABLES = [
    (1, 2, "Window"),
    (2, 2, "Window"),
    (3, 4, "Main Hall"),
    (4, 4, "Main Hall"),
    (5, 4, "Main Hall"),
    (6, 6, "Main Hall"),
    (7, 8, "Patio"),
    (8, 8, "Private Room"),
]

DEMO_MENU = [
    ("Caesar Salad", "12.99", MenuItem.Category.APPETIZER, ["romaine", "parmesan", "croutons"], ["dairy", "gluten"]),
    ("Bruschetta", "9.50", MenuItem.Category.APPETIZER, ["tomato", "basil", "bread"], ["gluten"]),
    ("Ribeye Steak", "24.99", MenuItem.Category.MAIN, ["ribeye", "butter", "thyme"], ["dairy"]),
    ("Grilled Salmon", "21.00", MenuItem.Category.MAIN, ["salmon", "lemon", "dill"], ["fish"]),
    ("Mushroom Risotto", "17.50", MenuItem.Category.MAIN, ["arborio rice", "mushroom", "parmesan"], ["dairy"]),
    ("Tiramisu", "8.00", MenuItem.Category.DESSERT, ["mascarpone", "espresso", "ladyfingers"], ["dairy", "egg", "gluten"]),
    ("Lemonade", "3.50", MenuItem.Category.BEVERAGE, ["lemon", "sugar"], []),
    ("Espresso", "2.75", MenuItem.Category.BEVERAGE, ["coffee"], []),
]


class Command(BaseCommand):
    help = 'Set up demo staff, tables and menu items'

    def add_arguments(self, parser):
        parser.add_argument(
            '--reset',
            action='store_true',
            help='Delete bills, orders, reservations, tables and menu items before seeding',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Setting up demo restaurant data...'))

        with transaction.atomic():
            if options['reset']:
                self.stdout.write('Resetting existing restaurant data...')
                Table.objects.update(
                    status=Table.TableStatus.AVAILABLE, current_order=None, assigned_waiter=None
                )
                Bill.objects.all().delete()
                Order.objects.all().delete()
                Reservation.objects.all().delete()
                Table.objects.all().delete()
                MenuItem.objects.all().delete()

            for username, first_name, last_name, role in DEMO_STAFF:
                user, created = User.objects.get_or_create(
                    username=username,
                    defaults={'first_name': first_name, 'last_name': last_name, 'role': role},
                )
                if created:
                    user.set_password(DEMO_PASSWORD)
                    user.save()
                    self.stdout.write(f'  ✓ Created {role} {username}')

            for number, capacity, location in DEMO_TABLES:
                _, created = Table.objects.get_or_create(
                    number=number, defaults={'capacity': capacity, 'location': location}
                )
                if created:
                    self.stdout.write(f'  ✓ Created table {number} ({capacity} seats, {location})')

            for name, price, category, ingredients, allergens in DEMO_MENU:
                _, created = MenuItem.objects.get_or_create(
                    name=name,
                    defaults={
                        'price': Decimal(price),
                        'category': category,
                        'ingredients': ingredients,
                        'allergens': allergens,
                    },
                )
                if created:
                    self.stdout.write(f'  ✓ Added {name} ({price})')

        self.stdout.write(
            self.style.SUCCESS(
                f'Done: {User.objects.count()} staff, {Table.objects.count()} tables, '
                f'{MenuItem.objects.count()} menu items'
            )
        )
