from decimal import Decimal

from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from accounts.models import User
from deliveries.models import DeliveryOrder
from partners.models import Partner
from services.wallet_ledger import (
	credit_commission,
	request_withdrawal,
	list_transactions,
	InsufficientBalanceError,
	InvalidAmountError,
	WalletNotFoundError,
)
from .models import Wallet, WalletTransaction
from .views import my_wallet, my_transactions, withdraw


class WalletLedgerTests(TestCase):
	def setUp(self):
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		self.wallet = Wallet.objects.create(user=self.rider)
		store = Partner.objects.create(name='Store', latitude=0, longitude=0)
		self.order = DeliveryOrder.objects.create(
			store=store, store_name='Store', store_latitude=0, store_longitude=0,
			delivery_address='Rua B', delivery_latitude=0, delivery_longitude=0.01,
			value=Decimal('20.00'), delivery_fee=Decimal('5.00'),
			status=DeliveryOrder.COMPLETED, rider=self.rider,
		)

	def test_credit_commission_appends_entry_and_updates_balances(self):
		entry = credit_commission(self.rider.id, Decimal('3.00'), self.order.id)

		self.wallet.refresh_from_db()
		self.assertEqual(self.wallet.balance, Decimal('3.00'))
		self.assertEqual(self.wallet.total_earned, Decimal('3.00'))
		self.assertEqual(entry.type, WalletTransaction.COMMISSION)
		self.assertEqual(entry.status, WalletTransaction.COMPLETED)
		self.assertIsNotNone(entry.completed_at)
		self.assertEqual(entry.description, f'Commission for order #{self.order.id}')

	def test_credit_commission_is_idempotent_per_order(self):
		first = credit_commission(self.rider.id, Decimal('1.00'), self.order.id)
		second = credit_commission(self.rider.id, Decimal('1.00'), self.order.id)

		self.assertEqual(first.id, second.id)
		self.wallet.refresh_from_db()
		self.assertEqual(self.wallet.balance, Decimal('1.00'))
		self.assertEqual(WalletTransaction.objects.count(), 1)

	def test_database_rejects_second_commission_row_for_order(self):
		credit_commission(self.rider.id, Decimal('1.00'), self.order.id)

		with self.assertRaises(IntegrityError):
			with transaction.atomic():
				WalletTransaction.objects.create(
					wallet=self.wallet, user=self.rider, type=WalletTransaction.COMMISSION,
					amount=Decimal('1.00'), status=WalletTransaction.COMPLETED, delivery_order=self.order,
				)

	def test_credit_without_wallet_raises(self):
		self.wallet.delete()

		with self.assertRaises(WalletNotFoundError):
			credit_commission(self.rider.id, Decimal('1.00'), self.order.id)

	def test_withdrawal_limits(self):
		credit_commission(self.rider.id, Decimal('3.00'), self.order.id)

		with self.assertRaises(InvalidAmountError):
			request_withdrawal(self.rider.id, Decimal('0'))
		with self.assertRaises(InvalidAmountError):
			request_withdrawal(self.rider.id, Decimal('-1.00'))
		with self.assertRaises(InsufficientBalanceError):
			request_withdrawal(self.rider.id, Decimal('3.01'))

		entry = request_withdrawal(self.rider.id, Decimal('3.00'))

		self.wallet.refresh_from_db()
		self.assertEqual(entry.status, WalletTransaction.PENDING)
		self.assertEqual(self.wallet.balance, Decimal('0.00'))
		self.assertEqual(self.wallet.total_withdrawn, Decimal('3.00'))
		self.assertEqual(self.wallet.total_earned, Decimal('3.00'))

	def test_list_transactions_newest_first(self):
		credit_commission(self.rider.id, Decimal('3.00'), self.order.id)
		request_withdrawal(self.rider.id, Decimal('1.00'))

		entries = list_transactions(self.rider.id)

		self.assertEqual([e.type for e in entries], [WalletTransaction.WITHDRAWAL, WalletTransaction.COMMISSION])
		self.assertEqual(len(list_transactions(self.rider.id, limit=1, offset=1)), 1)


class WalletApiTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		self.wallet = Wallet.objects.create(user=self.rider, balance=Decimal('10.00'), total_earned=Decimal('10.00'))
		self.partner = User.objects.create_user(username='shop', password='shop1234', role='partner')

	def test_my_wallet(self):
		request = self.factory.get('/api/wallet/me/')
		force_authenticate(request, user=self.rider)
		response = my_wallet(request)

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['wallet']['balance'], '10.00')
		self.assertEqual(response.data['transactions'], [])

	def test_withdraw_debits_balance(self):
		request = self.factory.post('/api/wallet/withdraw/', {'amount': '4.50'}, format='json')
		force_authenticate(request, user=self.rider)
		response = withdraw(request)

		self.assertEqual(response.status_code, 201)
		self.assertEqual(response.data['wallet']['balance'], '5.50')
		self.assertEqual(response.data['transaction']['type'], WalletTransaction.WITHDRAWAL)

		request = self.factory.get('/api/wallet/me/transactions/')
		force_authenticate(request, user=self.rider)
		response = my_transactions(request)
		self.assertEqual(len(response.data['transactions']), 1)

	def test_withdraw_more_than_balance_is_rejected(self):
		request = self.factory.post('/api/wallet/withdraw/', {'amount': '10.01'}, format='json')
		force_authenticate(request, user=self.rider)
		response = withdraw(request)

		self.assertEqual(response.status_code, 422)
		self.assertEqual(response.data['code'], 'insufficient_balance')
		self.wallet.refresh_from_db()
		self.assertEqual(self.wallet.balance, Decimal('10.00'))

	def test_non_riders_are_forbidden(self):
		request = self.factory.get('/api/wallet/me/')
		force_authenticate(request, user=self.partner)
		response = my_wallet(request)

		self.assertEqual(response.status_code, 403)
