from decimal import Decimal

from django.test import TestCase
from rest_framework.test import APIRequestFactory, force_authenticate

from accounts.models import User
from .models import RiderProfile
from .views import RiderStatusView, RiderLocationView


class RiderApiTests(TestCase):
	def setUp(self):
		self.factory = APIRequestFactory()
		self.rider = User.objects.create_user(username='rider', password='rider1234', role='rider')
		self.profile = RiderProfile.objects.create(user=self.rider)
		self.partner = User.objects.create_user(username='shop', password='shop1234', role='partner')

	def _call(self, view, method, user, data=None):
		request = getattr(self.factory, method)('/api/rider/', data, format='json')
		force_authenticate(request, user=user)
		return view.as_view()(request)

	def test_toggle_online(self):
		response = self._call(RiderStatusView, 'put', self.rider, {'is_online': True})

		self.assertEqual(response.status_code, 200)
		self.profile.refresh_from_db()
		self.assertTrue(self.profile.is_online)

		response = self._call(RiderStatusView, 'get', self.rider)
		self.assertEqual(response.data, {'is_online': True})

	def test_update_location(self):
		response = self._call(RiderLocationView, 'post', self.rider, {'latitude': '-23.55052', 'longitude': '-46.633308'})

		self.assertEqual(response.status_code, 200)
		self.profile.refresh_from_db()
		self.assertEqual(self.profile.current_latitude, Decimal('-23.550520'))
		self.assertIsNotNone(self.profile.last_location_update)

		response = self._call(RiderLocationView, 'get', self.rider)
		self.assertAlmostEqual(response.data['longitude'], -46.633308)

	def test_location_out_of_range_rejected(self):
		response = self._call(RiderLocationView, 'post', self.rider, {'latitude': '91', 'longitude': '0'})

		self.assertEqual(response.status_code, 400)

	def test_unlocated_rider_reports_no_location(self):
		response = self._call(RiderLocationView, 'get', self.rider)

		self.assertIsNone(response.data['latitude'])
		self.assertIsNone(response.data['longitude'])

	def test_reads_do_not_create_missing_profile(self):
		newcomer = User.objects.create_user(username='newcomer', password='rider1234', role='rider')

		for view in (RiderStatusView, RiderLocationView):
			response = self._call(view, 'get', newcomer)
			self.assertEqual(response.status_code, 404)
			self.assertEqual(response.data['code'], 'rider_not_found')
		self.assertFalse(RiderProfile.objects.filter(user=newcomer).exists())

		response = self._call(RiderStatusView, 'put', newcomer, {'is_online': True})
		self.assertEqual(response.status_code, 200)
		self.assertTrue(RiderProfile.objects.get(user=newcomer).is_online)

	def test_only_riders_allowed(self):
		response = self._call(RiderStatusView, 'get', self.partner)

		self.assertEqual(response.status_code, 403)
