from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIRequestFactory

from .views import health_check


class HealthCheckTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()

	@patch('app_backend.views.check_redis')
	def test_healthy_when_all_checks_pass(self, mock_redis):
		response = health_check(self.factory.get('/health/'))

		self.assertEqual(response.status_code, 200)
		self.assertEqual(response.data['status'], 'healthy')
		self.assertEqual(
			set(response.data['services']), {'database', 'redis', 'channels', 'celery'}
		)

	@patch('app_backend.views.check_redis', side_effect=ConnectionError('refused'))
	def test_unhealthy_when_redis_is_down(self, mock_redis):
		response = health_check(self.factory.get('/health/'))

		self.assertEqual(response.status_code, 503)
		self.assertEqual(response.data['services']['redis'], 'unhealthy: refused')
		self.assertEqual(response.data['services']['database'], 'healthy')
