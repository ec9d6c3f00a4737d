from decimal import Decimal
from unittest.mock import patch

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.test import TestCase, TransactionTestCase

from accounts.models import User
from deliveries.models import DeliveryOrder
from partners.models import Partner
from services.order_management import accept_order, update_order_status
from wallets.models import Wallet
from .notifications import notify_order_event
from .tasks import publish_order_event_task


class OrderNotificationTests(TestCase):
	def setUp(self):
		self.store = Partner.objects.create(name='Store A', latitude=0, longitude=0)
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		self.order = DeliveryOrder.objects.create(
			store=self.store, store_name='Store A', store_latitude=0, store_longitude=0,
			delivery_address='Rua B', delivery_latitude=0, delivery_longitude=0.01,
			value=10, delivery_fee=2, status=DeliveryOrder.ACCEPTED, rider=self.rider, estimated_time=2,
		)
		self.layer = get_channel_layer()

	def test_event_reaches_order_and_rider_groups(self):
		async_to_sync(self.layer.group_add)(f'order_{self.order.id}', 'order-watcher')
		async_to_sync(self.layer.group_add)(f'rider_{self.rider.id}', 'rider-app')

		self.assertTrue(notify_order_event('order_accepted', self.order))

		for channel in ('order-watcher', 'rider-app'):
			message = async_to_sync(self.layer.receive)(channel)
			self.assertEqual(message['event'], 'order_accepted')
			self.assertEqual(message['order_id'], self.order.id)
			self.assertEqual(message['rider_id'], self.rider.id)
			self.assertEqual(message['estimated_time'], 2)

	@patch('realtime.notifications.get_channel_layer', return_value=None)
	def test_missing_channel_layer_reports_failure(self, mock_layer):
		self.assertFalse(notify_order_event('order_accepted', self.order))

	@patch('realtime.notifications.notify_order_event', return_value=True)
	def test_task_skips_deleted_orders(self, mock_notify):
		self.assertFalse(publish_order_event_task(9999, 'order_created'))
		mock_notify.assert_not_called()

		self.assertTrue(publish_order_event_task(self.order.id, 'order_created'))
		mock_notify.assert_called_once()


class BrokerOutageTests(TransactionTestCase):
	def setUp(self):
		self.store = Partner.objects.create(name='Store A', latitude=0, longitude=0)
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		Wallet.objects.create(user=self.rider)
		self.order = DeliveryOrder.objects.create(
			store=self.store, store_name='Store A', store_latitude=0, store_longitude=0,
			delivery_address='Rua B', delivery_latitude=0, delivery_longitude=0.01,
			value=10, delivery_fee=2,
		)

	@patch('realtime.tasks.publish_order_event_task.delay', side_effect=ConnectionError('broker down'))
	def test_committed_transitions_survive_publish_failure(self, mock_delay):
		order = accept_order(self.order.id, self.rider.id, 'Rider')

		self.assertEqual(order.status, DeliveryOrder.ACCEPTED)
		self.order.refresh_from_db()
		self.assertEqual(self.order.status, DeliveryOrder.ACCEPTED)
		self.assertEqual(self.order.rider_id, self.rider.id)

		update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)
		order = update_order_status(self.order.id, DeliveryOrder.COMPLETED)

		self.assertEqual(order.status, DeliveryOrder.COMPLETED)
		self.assertEqual(Wallet.objects.get(user=self.rider).balance, Decimal('1.00'))
		self.assertEqual(mock_delay.call_count, 3)
