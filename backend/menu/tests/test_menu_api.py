import pytest
from rest_framework import status

from menu.models import MenuItem


@pytest.mark.django_db
class TestMenuAPI:

    def test_menu_is_public(self, api_client, caesar_salad, ribeye):
        response = api_client.get('/api/menu/items/')

        assert response.status_code == status.HTTP_200_OK
        names = [item['name'] for item in response.data['results']]
        assert names == ['Caesar Salad', 'Ribeye Steak']

    def test_filter_by_category(self, api_client, caesar_salad, ribeye, lemonade):
        response = api_client.get('/api/menu/items/', {'category': 'beverage'})

        assert [item['name'] for item in response.data['results']] == ['Lemonade']

    def test_waiter_cannot_create_item(self, waiter_client):
        response = waiter_client.post(
            '/api/menu/items/',
            {'name': 'Soup', 'price': '6.00', 'category': 'appetizer'},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_manager_creates_item(self, manager_client):
        response = manager_client.post(
            '/api/menu/items/',
            {
                'name': 'Tomato Soup',
                'price': '6.50',
                'category': 'appetizer',
                'ingredients': ['tomato', 'basil'],
                'allergens': [],
            },
            format='json',
        )

        assert response.status_code == status.HTTP_201_CREATED
        item = MenuItem.objects.get(name='Tomato Soup')
        assert item.ingredients == ['tomato', 'basil']
        assert item.available is True

    def test_negative_price_rejected(self, manager_client):
        response = manager_client.post(
            '/api/menu/items/',
            {'name': 'Free Money', 'price': '-1.00', 'category': 'main'},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'
        assert 'price' in response.data['details']['errors']

    def test_toggle_availability(self, manager_client, ribeye):
        response = manager_client.post(
            f'/api/menu/items/{ribeye.pk}/toggle-availability/', {'available': False}, format='json'
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['available'] is False

    def test_delete_referenced_item_returns_400(self, manager_client, open_order, ribeye):
        response = manager_client.delete(f'/api/menu/items/{ribeye.pk}/')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'
