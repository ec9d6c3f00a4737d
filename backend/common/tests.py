from types import SimpleNamespace

from django.db import IntegrityError
from django.test import SimpleTestCase

from common.exceptions import (
	delivery_exception_handler,
	InvalidStateError,
	LedgerIntegrityError,
	NotFoundError,
	RejectedError,
)
from common.utils import calculate_distance, find_nearby


class GeoTests(SimpleTestCase):
	def test_distance_identity_and_symmetry(self):
		points = [(0, 0), (0, 0.01), (-23.55052, -46.633308), (40.7128, -74.006), (89.9, 179.9)]

		for a in points:
			self.assertEqual(calculate_distance(*a, *a), 0)
			for b in points:
				self.assertAlmostEqual(calculate_distance(*a, *b), calculate_distance(*b, *a), places=9)

	def test_known_distances(self):
		# One hundredth of a degree of longitude at the equator
		self.assertAlmostEqual(calculate_distance(0, 0, 0, 0.01), 1.112, places=3)
		# Sao Paulo to Rio de Janeiro
		self.assertAlmostEqual(calculate_distance(-23.5505, -46.6333, -22.9068, -43.1729), 360.8, delta=2)

	def test_accepts_decimal_strings(self):
		self.assertAlmostEqual(calculate_distance('0', '0', '0', '0.01'), 1.112, places=3)

	def test_find_nearby_skips_unlocated_and_sorts(self):
		far = SimpleNamespace(current_latitude=0, current_longitude=0.03)
		near = SimpleNamespace(current_latitude=0, current_longitude=0.01)
		nowhere = SimpleNamespace(current_latitude=None, current_longitude=None)
		outside = SimpleNamespace(current_latitude=0, current_longitude=1)

		found = find_nearby([far, nowhere, near, outside], 0, 0, radius=5)

		self.assertEqual([item for item, _ in found], [near, far])


class ExceptionHandlerTests(SimpleTestCase):
	def test_taxonomy_maps_to_status_codes(self):
		for exc, expected in [
			(NotFoundError('missing'), 404),
			(InvalidStateError('taken'), 409),
			(RejectedError('no'), 422),
		]:
			response = delivery_exception_handler(exc, {})
			self.assertEqual(response.status_code, expected)
			self.assertEqual(response.data['error'], str(exc))

	def test_integrity_errors_hide_details(self):
		with self.assertLogs('common.exceptions', level='ERROR'):
			response = delivery_exception_handler(LedgerIntegrityError('wallet 7 missing'), {})

		self.assertEqual(response.status_code, 500)
		self.assertEqual(response.data, {'error': 'Internal server error', 'code': 'integrity_error'})

	def test_unique_violation_is_conflict(self):
		response = delivery_exception_handler(IntegrityError('UNIQUE constraint failed'), {})

		self.assertEqual(response.status_code, 409)

	def test_other_exceptions_fall_through(self):
		self.assertIsNone(delivery_exception_handler(ValueError('boom'), {}))
