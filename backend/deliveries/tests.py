from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from accounts.models import User
from partners.models import Partner
from riders.models import RiderProfile
from services.order_management import accept_order, create_order, update_order_status, InvalidTransitionError
from wallets.models import Wallet, WalletTransaction
from .models import DeliveryOrder
from . import views


class DeliveryApiTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.store = Partner.objects.create(name='Store A', address='Rua A, 1', latitude=0, longitude=0)
		self.store_user = User.objects.create_user(username='store', password='store1234', role='partner')
		self.rider = User.objects.create_user(
			username='rider', password='rider1234', role='rider', first_name='Joao', last_name='Silva'
		)
		RiderProfile.objects.create(user=self.rider, is_online=True, current_latitude=0, current_longitude=0.01)
		Wallet.objects.create(user=self.rider)

	def _post(self, view, path, data, user, **kwargs):
		request = self.factory.post(path, data, format='json')
		force_authenticate(request, user=user)
		return view(request, **kwargs)

	def _patch(self, view, path, data, user, **kwargs):
		request = self.factory.patch(path, data, format='json')
		force_authenticate(request, user=user)
		return view(request, **kwargs)

	def _get(self, view, path, user, params=None, **kwargs):
		request = self.factory.get(path, params or {})
		force_authenticate(request, user=user)
		return view(request, **kwargs)

	def _create_order(self, **overrides):
		data = {
			'store_id': self.store.id,
			'delivery_address': 'Rua B, 2',
			'delivery_latitude': '0',
			'delivery_longitude': '0.01',
			'value': '50.00',
			'delivery_fee': '8.00',
		}
		data.update(overrides)
		return self._post(views.orders, '/api/deliveries/', data, self.store_user)

	def test_end_to_end_delivery_credits_rider_once(self):
		response = self._create_order()
		self.assertEqual(response.status_code, 201)
		order_id = response.data['id']
		self.assertEqual(response.data['status'], 'pending')

		response = self._get(
			views.matching_riders, '/api/deliveries/matching/', self.store_user,
			{'lat': '0', 'lng': '0', 'radius': '5'},
		)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['count'], 1)
		match = response.data['riders'][0]
		self.assertEqual(match['rider_id'], self.rider.id)
		self.assertEqual(match['distance'], 1.11)

		response = self._post(
			views.accept, f'/api/deliveries/{order_id}/accept/',
			{'rider_id': self.rider.id, 'rider_name': 'Joao'}, self.rider, order_id=order_id,
		)
		self.assertEqual(response.status_code, 200)
		order = response.data['order']
		self.assertEqual(order['status'], 'accepted')
		self.assertEqual(order['app_commission'], '1.00')
		self.assertEqual(order['estimated_time'], 2)
		self.assertEqual(order['distance'], 1.11)

		for new_status in ('inProgress', 'completed'):
			response = self._patch(
				views.update_status, f'/api/deliveries/{order_id}/status/',
				{'status': new_status}, self.rider, order_id=order_id,
			)
			self.assertEqual(response.status_code, 200)
			self.assertEqual(response.data['order']['status'], new_status)

		wallet = Wallet.objects.get(user=self.rider)
		self.assertEqual(wallet.balance, Decimal('1.00'))
		self.assertEqual(
			WalletTransaction.objects.filter(delivery_order_id=order_id, type=WalletTransaction.COMMISSION).count(), 1
		)

	def test_accept_defaults_to_requesting_rider(self):
		order_id = self._create_order().data['id']

		response = self._post(
			views.accept, f'/api/deliveries/{order_id}/accept/', {}, self.rider, order_id=order_id
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['order']['rider_id'], self.rider.id)
		self.assertEqual(response.data['order']['rider_name'], 'Joao Silva')

	def test_second_accept_returns_conflict(self):
		other = User.objects.create_user(username='other', password='other1234', role='rider')
		order_id = self._create_order().data['id']
		self._post(views.accept, '/accept/', {}, self.rider, order_id=order_id)

		response = self._post(views.accept, '/accept/', {}, other, order_id=order_id)

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['code'], 'order_not_available')

	def test_invalid_transition_returns_conflict(self):
		order_id = self._create_order().data['id']

		response = self._patch(
			views.update_status, '/status/', {'status': 'completed'}, self.store_user, order_id=order_id
		)

		self.assertEqual(response.status_code, 409)
		self.assertEqual(response.data['code'], 'invalid_transition')

	def test_missing_wallet_on_completion_is_internal_error(self):
		Wallet.objects.filter(user=self.rider).delete()
		order_id = self._create_order().data['id']
		self._post(views.accept, '/accept/', {}, self.rider, order_id=order_id)
		self._patch(views.update_status, '/status/', {'status': 'inProgress'}, self.rider, order_id=order_id)

		response = self._patch(
			views.update_status, '/status/', {'status': 'completed'}, self.rider, order_id=order_id
		)

		self.assertEqual(response.status_code, 500)
		self.assertEqual(response.data['error'], 'Internal server error')
		self.assertEqual(DeliveryOrder.objects.get(id=order_id).status, DeliveryOrder.IN_PROGRESS)

	def test_blocked_and_unknown_store(self):
		self.store.is_blocked = True
		self.store.save(update_fields=['is_blocked'])

		response = self._create_order()
		self.assertEqual(response.status_code, 403)
		self.assertEqual(response.data['code'], 'partner_blocked')

		response = self._create_order(store_id=9999)
		self.assertEqual(response.status_code, 404)

	def test_create_order_validates_payload(self):
		response = self._create_order(delivery_latitude='95')

		self.assertEqual(response.status_code, 400)
		self.assertIn('delivery_latitude', response.data)

	def test_list_and_detail(self):
		first = self._create_order().data['id']
		second = self._create_order().data['id']
		self._post(views.accept, '/accept/', {}, self.rider, order_id=second)

		response = self._get(views.orders, '/api/deliveries/', self.store_user, {'status': 'pending'})
		self.assertEqual(response.data['total'], 1)
		self.assertEqual(response.data['orders'][0]['id'], first)

		response = self._get(views.orders, '/api/deliveries/', self.store_user, {'limit': '1'})
		self.assertEqual(response.data['total'], 2)
		self.assertEqual(len(response.data['orders']), 1)

		response = self._get(views.order_detail, f'/api/deliveries/{first}/', self.store_user, order_id=first)
		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['store_name'], 'Store A')

		response = self._get(views.order_detail, '/api/deliveries/9999/', self.store_user, order_id=9999)
		self.assertEqual(response.status_code, 404)

	def test_matching_for_stored_order(self):
		order_id = self._create_order().data['id']

		response = self._get(
			views.order_matching_riders, f'/api/deliveries/{order_id}/matching/', self.store_user,
			order_id=order_id,
		)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['riders'][0]['rider_id'], self.rider.id)
		self.assertEqual(response.data['riders'][0]['trip_distance'], 1.11)

		response = self._get(
			views.order_matching_riders, '/matching/', self.store_user, {'radius': '1'}, order_id=order_id
		)
		self.assertEqual(response.data['count'], 0)

	def test_matching_requires_coordinates(self):
		response = self._get(views.matching_riders, '/api/deliveries/matching/', self.store_user, {'lat': '0'})

		self.assertEqual(response.status_code, 400)

	def test_requires_authentication(self):
		request = self.factory.get('/api/deliveries/')
		response = views.orders(request)

		self.assertEqual(response.status_code, 401)


class OrderEventTests(TestCase):
	def setUp(self):
		self.store = Partner.objects.create(name='Store A', latitude=0, longitude=0)
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		Wallet.objects.create(user=self.rider)

	@patch('realtime.notifications.notify_order_event', return_value=True)
	def test_events_published_after_commit(self, mock_notify):
		with self.captureOnCommitCallbacks(execute=False) as callbacks:
			order = create_order({
				'store_id': self.store.id,
				'delivery_address': 'Rua B',
				'delivery_latitude': Decimal('0'),
				'delivery_longitude': Decimal('0.01'),
				'value': Decimal('10.00'),
				'delivery_fee': Decimal('2.00'),
			})
		# Nothing is published until the transaction commits
		mock_notify.assert_not_called()
		self.assertEqual(len(callbacks), 1)

		for callback in callbacks:
			callback()
		mock_notify.assert_called_once()
		event_type, published = mock_notify.call_args[0]
		self.assertEqual(event_type, 'order_created')
		self.assertEqual(published.id, order.id)

		mock_notify.reset_mock()
		with self.captureOnCommitCallbacks(execute=True):
			accept_order(order.id, self.rider.id, 'Rider')
		self.assertEqual(mock_notify.call_args[0][0], 'order_accepted')
		self.assertEqual(mock_notify.call_args[0][1].status, DeliveryOrder.ACCEPTED)

	def test_rejected_transition_publishes_nothing(self):
		order = DeliveryOrder.objects.create(
			store=self.store, store_name='Store A', store_latitude=0, store_longitude=0,
			delivery_address='Rua B', delivery_latitude=0, delivery_longitude=0.01,
			value=10, delivery_fee=2,
		)

		with self.captureOnCommitCallbacks() as callbacks:
			with self.assertRaises(InvalidTransitionError):
				update_order_status(order.id, DeliveryOrder.COMPLETED)

		self.assertEqual(callbacks, [])
