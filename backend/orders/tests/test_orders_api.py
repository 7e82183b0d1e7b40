import pytest
from rest_framework import status

from orders.models import Order
from tables.models import Table


@pytest.mark.django_db
class TestOrdersAPI:

    def test_waiter_opens_order(self, waiter_client, waiter, table_6, lemonade, caesar_salad):
        payload = {
            'table_number': 6,
            'customer_name': 'Bob',
            'items': [
                {'menu_item_id': lemonade.pk, 'quantity': 2},
                {'menu_item_id': caesar_salad.pk, 'quantity': 1, 'notes': 'no croutons'},
            ],
        }

        response = waiter_client.post('/api/orders/', payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == 'pending'
        assert response.data['table_number'] == 6
        assert response.data['assigned_waiter'] == waiter.pk
        assert response.data['subtotal'] == '19.99'
        assert len(response.data['items']) == 2

        table_6.refresh_from_db()
        assert table_6.status == Table.TableStatus.OCCUPIED

    def test_occupied_table_returns_conflict(self, waiter_client, open_order, lemonade):
        response = waiter_client.post(
            '/api/orders/',
            {'table_number': 5, 'items': [{'menu_item_id': lemonade.pk, 'quantity': 1}]},
            format='json',
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'table_conflict'
        assert response.data['details']['current_order'] == str(open_order.pk)

    def test_empty_items_rejected(self, waiter_client, table_6):
        response = waiter_client.post('/api/orders/', {'table_number': 6, 'items': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'
        assert 'items' in response.data['details']['errors']

    def test_unavailable_item_rejected(self, waiter_client, table_6, sold_out_dessert):
        response = waiter_client.post(
            '/api/orders/',
            {'table_number': 6, 'items': [{'menu_item_id': sold_out_dessert.pk, 'quantity': 1}]},
            format='json',
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not Order.objects.exists()

    def test_waiter_id_must_belong_to_a_waiter(self, manager_client, chef, table_6, lemonade):
        response = manager_client.post(
            '/api/orders/',
            {
                'table_number': 6,
                'waiter_id': chef.pk,
                'items': [{'menu_item_id': lemonade.pk, 'quantity': 1}],
            },
            format='json',
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['details']['entity'] == 'Waiter'
        table_6.refresh_from_db()
        assert table_6.assigned_waiter is None

    def test_chef_cannot_open_order(self, chef_client, table_6, lemonade):
        response = chef_client.post(
            '/api/orders/',
            {'table_number': 6, 'items': [{'menu_item_id': lemonade.pk, 'quantity': 1}]},
            format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_kitchen_flow(self, chef_client, waiter_client, open_order, chef):
        response = chef_client.post(
            f'/api/orders/{open_order.pk}/accept/', {'estimated_prep_minutes': 15}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'preparing'
        assert response.data['assigned_chef'] == chef.pk
        assert response.data['chef_name'] == 'Gordon Ramsay'

        response = chef_client.post(f'/api/orders/{open_order.pk}/complete/')
        assert response.data['status'] == 'ready'

        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/serve/', {'confirmed': False}, format='json'
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/serve/', {'confirmed': True}, format='json'
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == 'served'

    def test_waiter_cannot_accept(self, waiter_client, open_order):
        response = waiter_client.post(
            f'/api/orders/{open_order.pk}/accept/', {'estimated_prep_minutes': 15}, format='json'
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_advance_defaults_chef_to_caller(self, chef_client, open_order, chef):
        response = chef_client.post(
            f'/api/orders/{open_order.pk}/advance/',
            {'status': 'preparing', 'estimated_prep_minutes': 5},
            format='json',
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.data['assigned_chef'] == chef.pk

    def test_advance_to_paid_is_refused(self, manager_client, served_order):
        response = manager_client.post(
            f'/api/orders/{served_order.pk}/advance/', {'status': 'paid'}, format='json'
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'invalid_transition'

    def test_skipping_a_step_conflicts(self, chef_client, open_order):
        response = chef_client.post(f'/api/orders/{open_order.pk}/complete/')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['details']['current_status'] == 'pending'

    def test_unknown_order(self, chef_client, db):
        response = chef_client.post(
            '/api/orders/00000000-0000-0000-0000-000000000000/accept/',
            {'estimated_prep_minutes': 15},
            format='json',
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_kitchen_queue(self, chef_client, open_order):
        response = chef_client.get('/api/orders/kitchen-queue/')

        assert response.status_code == status.HTTP_200_OK
        assert [o['id'] for o in response.data] == [str(open_order.pk)]

    def test_filter_by_status(self, waiter_client, open_order, served_order):
        response = waiter_client.get('/api/orders/', {'status': 'served'})

        assert response.status_code == status.HTTP_200_OK
        assert [o['id'] for o in response.data['results']] == [str(served_order.pk)]

    def test_nested_items(self, waiter_client, open_order):
        response = waiter_client.get(f'/api/orders/{open_order.pk}/items/')

        assert response.status_code == status.HTTP_200_OK
        assert [i['name'] for i in response.data] == ['Caesar Salad', 'Ribeye Steak']
        assert response.data[0]['line_total'] == '25.98'

    def test_orders_cannot_be_deleted(self, manager_client, open_order):
        response = manager_client.delete(f'/api/orders/{open_order.pk}/')
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
