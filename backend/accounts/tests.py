from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIRequestFactory

from riders.models import RiderProfile
from wallets.models import Wallet
from .models import User
from .views import register, login, refresh_token


class RegistrationTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()

	def _register(self, **data):
		payload = {'username': 'joao_rider', 'password': 'password123', 'email': 'joao@example.com'}
		payload.update(data)
		request = self.factory.post('/api/auth/register/', payload, format='json')
		return register(request)

	def test_rider_registration_creates_profile_and_empty_wallet(self):
		response = self._register(role='rider')

		self.assertEqual(response.status_code, 201)
		user = User.objects.get(username='joao_rider')
		self.assertTrue(RiderProfile.objects.filter(user=user, is_online=False).exists())
		wallet = Wallet.objects.get(user=user)
		self.assertEqual(wallet.balance, 0)
		self.assertIn('access', response.data['tokens'])

	def test_partner_registration_has_no_wallet(self):
		response = self._register(username='loja', email='loja@example.com', role='partner')

		self.assertEqual(response.status_code, 201)
		self.assertFalse(Wallet.objects.filter(user__username='loja').exists())

	@patch('accounts.serializers.create_wallet', side_effect=RuntimeError('wallet store down'))
	def test_wallet_failure_rolls_back_user(self, mock_create_wallet):
		with self.assertRaises(RuntimeError):
			self._register(role='rider')

		self.assertFalse(User.objects.filter(username='joao_rider').exists())

	def test_admin_role_cannot_be_self_assigned(self):
		response = self._register(role='admin')

		self.assertEqual(response.status_code, 400)
		self.assertIn('role', response.data)
		self.assertFalse(User.objects.filter(username='joao_rider').exists())

	def test_duplicate_email_rejected(self):
		self._register()

		response = self._register(username='other')

		self.assertEqual(response.status_code, 400)
		self.assertIn('email', response.data)


class LoginTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		User.objects.create_user(username='rider', password='rider1234', role='rider')

	def test_login_and_refresh(self):
		request = self.factory.post('/api/auth/login/', {'username': 'rider', 'password': 'rider1234'}, format='json')
		response = login(request)

		self.assertEqual(response.status_code, 200)
		refresh = response.data['tokens']['refresh']

		request = self.factory.post('/api/auth/refresh/', {'refresh': refresh}, format='json')
		response = refresh_token(request)
		self.assertEqual(response.status_code, 200)
		self.assertIn('access', response.data)

	def test_bad_credentials(self):
		request = self.factory.post('/api/auth/login/', {'username': 'rider', 'password': 'nope'}, format='json')
		response = login(request)

		self.assertEqual(response.status_code, 400)

	def test_invalid_refresh_token(self):
		request = self.factory.post('/api/auth/refresh/', {'refresh': 'garbage'}, format='json')
		response = refresh_token(request)

		self.assertEqual(response.status_code, 401)


class PremiumTests(TestCase):
	def test_is_premium_requires_active_premium_subscription(self):
		user = User(username='u', is_subscriber=True, subscription_type=User.SUBSCRIPTION_PREMIUM)
		self.assertTrue(user.is_premium)

		user.subscription_expires_at = timezone.now() + timedelta(days=1)
		self.assertTrue(user.is_premium)

		user.subscription_expires_at = timezone.now() - timedelta(seconds=1)
		self.assertFalse(user.is_premium)

		user.subscription_expires_at = None
		user.subscription_type = User.SUBSCRIPTION_STANDARD
		self.assertFalse(user.is_premium)

		user.subscription_type = User.SUBSCRIPTION_PREMIUM
		user.is_subscriber = False
		self.assertFalse(user.is_premium)
