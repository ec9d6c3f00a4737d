from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase
from django.utils import timezone

from accounts.models import User
from deliveries.models import DeliveryOrder, Rating
from partners.models import Partner
from riders.models import Bike, MaintenanceLog, RiderProfile
from wallets.models import Wallet, WalletTransaction
from services.matching import MatchingCriteria, RiderCandidate, find_matching_riders, rank_candidates
from services.matching.eligibility import is_eligible
from services.matching.vehicles import estimate_minutes
from services.order_management import (
	OrderFilters,
	accept_order,
	create_order,
	get_order_by_id,
	list_orders,
	matching_criteria_for_order,
	update_order_status,
	InvalidTransitionError,
	OrderNotAvailableError,
	OrderNotFoundError,
	PartnerBlockedError,
	PartnerNotFoundError,
	RiderBlockedByMaintenanceError,
	RiderNotFoundError,
)
from services.order_management import order_lifecycle
from services.wallet_ledger import WalletNotFoundError

# Longitude offsets along the equator, in degrees, for a given distance
KM_PER_DEGREE = 111.19492664455873


def degrees_for_km(km):
	return km / KM_PER_DEGREE


def make_rider(username, lat=None, lng=None, online=True, premium=False, vehicle=None, wallet=True):
	user = User.objects.create_user(username=username, password='rider1234', role='rider')
	if premium:
		user.is_subscriber = True
		user.subscription_type = User.SUBSCRIPTION_PREMIUM
		user.save(update_fields=['is_subscriber', 'subscription_type'])
	RiderProfile.objects.create(
		user=user,
		is_online=online,
		current_latitude=lat,
		current_longitude=lng,
		last_location_update=timezone.now() if lat is not None else None,
	)
	if vehicle:
		Bike.objects.create(user=user, model='Test', vehicle_type=vehicle)
	if wallet:
		Wallet.objects.create(user=user)
	return user


def make_store(name='Store A', lat=0, lng=0, blocked=False):
	return Partner.objects.create(name=name, address='Rua A, 1', latitude=lat, longitude=lng, is_blocked=blocked)


def order_data(store, delivery_lng=0.01, **overrides):
	data = {
		'store_id': store.id,
		'delivery_address': 'Rua B, 2',
		'delivery_latitude': Decimal('0'),
		'delivery_longitude': Decimal(str(delivery_lng)),
		'value': Decimal('50.00'),
		'delivery_fee': Decimal('8.00'),
	}
	data.update(overrides)
	return data


def candidate(rider_id, distance, premium=False, rating=0.0, vehicle='MOTORCYCLE', eta=0, trip=None):
	return RiderCandidate(
		rider_id=rider_id,
		name=f'rider{rider_id}',
		email='',
		distance=distance,
		vehicle_type=vehicle,
		estimated_time=eta,
		is_premium=premium,
		average_rating=rating,
		current_latitude=0.0,
		current_longitude=0.0,
		trip_distance=trip,
	)


class RankingTests(TestCase):
	def test_premium_rider_ranks_before_closer_better_rated_rider(self):
		r1 = candidate(1, 2.0, premium=True, rating=3)
		r2 = candidate(2, 0.5, rating=5)

		ranked = rank_candidates([r2, r1])

		self.assertEqual([c.rider_id for c in ranked], [1, 2])

	def test_rating_breaks_tie_when_distances_within_threshold(self):
		r1 = candidate(1, 1.0, rating=4)
		r2 = candidate(2, 1.05, rating=5)

		ranked = rank_candidates([r1, r2])

		self.assertEqual([c.rider_id for c in ranked], [2, 1])

	def test_distance_wins_when_difference_exceeds_threshold(self):
		r1 = candidate(1, 1.0, rating=1)
		r2 = candidate(2, 1.5, rating=5)

		ranked = rank_candidates([r2, r1])

		self.assertEqual([c.rider_id for c in ranked], [1, 2])

	def test_missing_rating_counts_as_zero(self):
		r1 = candidate(1, 1.0, rating=None)
		r2 = candidate(2, 1.0, rating=1)

		ranked = rank_candidates([r1, r2])

		self.assertEqual([c.rider_id for c in ranked], [2, 1])

	def test_eta_only_counts_with_trip_and_beyond_two_minutes(self):
		fast = candidate(1, 1.5, eta=5, trip=2.0)
		slow = candidate(2, 1.0, eta=10, trip=2.0)

		self.assertEqual([c.rider_id for c in rank_candidates([slow, fast], has_trip=True)], [1, 2])
		# Without trip geometry ETA is ignored and distance decides
		self.assertEqual([c.rider_id for c in rank_candidates([fast, slow])], [2, 1])

	def test_eta_within_two_minutes_falls_through_to_distance(self):
		a = candidate(1, 1.5, eta=5, trip=2.0)
		b = candidate(2, 1.0, eta=7, trip=2.0)

		ranked = rank_candidates([a, b], has_trip=True)

		self.assertEqual([c.rider_id for c in ranked], [2, 1])

	def test_suitable_vehicle_ranks_before_unsuitable(self):
		bicycle = candidate(1, 0.2, vehicle='BICYCLE', eta=1, trip=4.0)
		motorcycle = candidate(2, 3.0, vehicle='MOTORCYCLE', eta=14, trip=4.0)

		ranked = rank_candidates([bicycle, motorcycle], has_trip=True)

		self.assertEqual([c.rider_id for c in ranked], [2, 1])

	def test_full_tie_keeps_input_order(self):
		a = candidate(1, 1.0, rating=4)
		b = candidate(2, 1.0, rating=4)

		self.assertEqual([c.rider_id for c in rank_candidates([a, b])], [1, 2])
		self.assertEqual([c.rider_id for c in rank_candidates([b, a])], [2, 1])


class EligibilityTests(TestCase):
	def test_gates_on_offline_location_and_radius(self):
		criteria = MatchingCriteria(latitude=0, longitude=0, radius=5)

		self.assertTrue(is_eligible(candidate(1, 4.9), criteria))
		self.assertFalse(is_eligible(candidate(1, 5.1), criteria))

		offline = candidate(1, 1.0)
		offline.is_online = False
		self.assertFalse(is_eligible(offline, criteria))

		unlocated = candidate(1, 1.0)
		unlocated.current_latitude = None
		self.assertFalse(is_eligible(unlocated, criteria))

	def test_estimate_minutes_rounds_half_up(self):
		self.assertEqual(estimate_minutes(1.25, 'MOTORCYCLE'), 3)  # 2.5 min
		self.assertEqual(estimate_minutes(1.11, 'MOTORCYCLE'), 2)
		self.assertEqual(estimate_minutes(1.0, 'BICYCLE'), 4)
		self.assertEqual(estimate_minutes(0, 'BICYCLE'), 0)


class FindMatchingRidersTests(TestCase):
	def setUp(self):
		self.criteria = MatchingCriteria(latitude=0, longitude=0, radius=5)

	def test_returns_online_riders_within_radius_closest_first(self):
		near = make_rider('near', 0, 0.01)
		far = make_rider('far', 0, 0.02)
		make_rider('offline', 0, 0.005, online=False)
		make_rider('unlocated')
		make_rider('outside', 0, 0.1)

		riders = find_matching_riders(self.criteria)

		self.assertEqual([r.rider_id for r in riders], [near.id, far.id])
		self.assertAlmostEqual(riders[0].distance, 1.11, places=2)

	def test_critical_maintenance_excludes_rider_unless_overridden(self):
		closest = make_rider('worn', 0, 0.001)
		other = make_rider('other', 0, 0.02)
		bike = Bike.objects.create(user=closest, model='CG 160')
		MaintenanceLog.objects.create(
			bike=bike, user=closest, part_name='Brake pads', category='TRAVOES', wear_percentage=0.95
		)

		riders = find_matching_riders(self.criteria)
		self.assertEqual([r.rider_id for r in riders], [other.id])

		RiderProfile.objects.filter(user=closest).update(maintenance_block_override=True)

		riders = find_matching_riders(self.criteria)
		self.assertEqual([r.rider_id for r in riders], [closest.id, other.id])

	def test_critico_status_blocks_regardless_of_wear(self):
		rider = make_rider('critico', 0, 0.001)
		bike = Bike.objects.create(user=rider, model='CG 160')
		MaintenanceLog.objects.create(
			bike=bike, user=rider, part_name='Oil', category='OLEO',
			wear_percentage=0.2, status=MaintenanceLog.STATUS_CRITICO
		)

		self.assertEqual(find_matching_riders(self.criteria), [])

	def _trip_criteria(self, trip_km):
		return MatchingCriteria(
			latitude=0, longitude=0, radius=5,
			store_latitude=0, store_longitude=0,
			delivery_latitude=0, delivery_longitude=degrees_for_km(trip_km),
		)

	def test_bicycle_gated_by_trip_distance(self):
		rider = make_rider('cyclist', 0, 0.005, vehicle=Bike.BICYCLE)

		self.assertEqual(find_matching_riders(self._trip_criteria(5)), [])

		riders = find_matching_riders(self._trip_criteria(2))
		self.assertEqual([r.rider_id for r in riders], [rider.id])
		self.assertEqual(riders[0].vehicle_type, Bike.BICYCLE)

	def test_motorcycle_gated_by_trip_distance(self):
		rider = make_rider('biker', 0, 0.005, vehicle=Bike.MOTORCYCLE)

		riders = find_matching_riders(self._trip_criteria(8))
		self.assertEqual([r.rider_id for r in riders], [rider.id])

		self.assertEqual(find_matching_riders(self._trip_criteria(12)), [])

	def test_latest_bike_is_current_vehicle(self):
		rider = make_rider('switcher', 0, 0.005, vehicle=Bike.MOTORCYCLE)
		Bike.objects.create(user=rider, model='Caloi', vehicle_type=Bike.BICYCLE)

		self.assertEqual(find_matching_riders(self._trip_criteria(5)), [])

	def test_candidate_eta_includes_trip(self):
		make_rider('eta', 0, 0.01)

		riders = find_matching_riders(self._trip_criteria(1.11195))

		# (1.11 to store + 1.11 trip) / 30 km/h
		self.assertEqual(riders[0].estimated_time, 4)

	def test_annotations_premium_rating_and_active_orders(self):
		premium = make_rider('premium', 0, 0.03, premium=True)
		regular = make_rider('regular', 0, 0.001)
		store = make_store()
		order = DeliveryOrder.objects.create(
			store=store, store_name=store.name, store_latitude=0, store_longitude=0,
			delivery_address='x', delivery_latitude=0, delivery_longitude=0.01,
			value=10, delivery_fee=2, status=DeliveryOrder.ACCEPTED, rider=regular,
		)
		Rating.objects.create(rider=regular, delivery_order=order, rating=5)
		Rating.objects.create(rider=regular, delivery_order=order, rating=3)
		# Ratings without a delivery do not count
		Rating.objects.create(rider=regular, rating=1)

		riders = find_matching_riders(self.criteria)

		self.assertEqual([r.rider_id for r in riders], [premium.id, regular.id])
		self.assertTrue(riders[0].is_premium)
		self.assertEqual(riders[0].average_rating, 0.0)
		self.assertEqual(riders[1].average_rating, 4.0)
		self.assertEqual(riders[1].active_orders, 1)


class CreateOrderTests(TestCase):
	def setUp(self):
		self.store = make_store()

	def test_create_order_defaults_store_fields_from_partner(self):
		order = create_order(order_data(self.store))

		self.assertEqual(order.status, DeliveryOrder.PENDING)
		self.assertEqual(order.store_name, 'Store A')
		self.assertEqual(order.store_address, 'Rua A, 1')
		self.assertEqual(order.store_latitude, Decimal('0'))
		self.assertEqual(order.app_commission, Decimal('1.00'))
		self.assertEqual(order.priority, 'normal')
		self.assertIsNone(order.rider_id)

	def test_explicit_store_fields_win(self):
		order = create_order(order_data(
			self.store, store_name='Kiosk', store_latitude=Decimal('0.001'), priority='urgent'
		))

		self.assertEqual(order.store_name, 'Kiosk')
		self.assertEqual(order.store_latitude, Decimal('0.001'))
		self.assertEqual(order.priority, 'urgent')

	def test_unknown_store_rejected(self):
		data = order_data(self.store)
		data['store_id'] = 9999

		with self.assertRaises(PartnerNotFoundError):
			create_order(data)

	def test_blocked_store_rejected(self):
		blocked = make_store('Blocked', blocked=True)

		with self.assertRaises(PartnerBlockedError):
			create_order(order_data(blocked))
		self.assertFalse(DeliveryOrder.objects.exists())


class AcceptOrderTests(TestCase):
	def setUp(self):
		self.store = make_store()
		self.order = create_order(order_data(self.store))
		self.rider = make_rider('rider', 0, 0.01)

	def test_accept_locks_in_commission_distance_and_eta(self):
		order = accept_order(self.order.id, self.rider.id, 'Joao')

		self.assertEqual(order.status, DeliveryOrder.ACCEPTED)
		self.assertEqual(order.rider_id, self.rider.id)
		self.assertEqual(order.rider_name, 'Joao')
		self.assertEqual(order.app_commission, Decimal('1.00'))
		self.assertAlmostEqual(order.distance, 1.11, places=2)
		self.assertEqual(order.estimated_time, 2)
		self.assertIsNotNone(order.accepted_at)

	def test_premium_rider_gets_premium_commission_which_is_then_fixed(self):
		premium = make_rider('premium', premium=True)

		order = accept_order(self.order.id, premium.id, 'Premium')
		self.assertEqual(order.app_commission, Decimal('3.00'))

		premium.is_subscriber = False
		premium.save(update_fields=['is_subscriber'])
		order.refresh_from_db()
		self.assertEqual(order.app_commission, Decimal('3.00'))

	def test_expired_premium_gets_standard_commission(self):
		lapsed = make_rider('lapsed', premium=True)
		lapsed.subscription_expires_at = timezone.now() - timedelta(days=1)
		lapsed.save(update_fields=['subscription_expires_at'])

		order = accept_order(self.order.id, lapsed.id, 'Lapsed')

		self.assertEqual(order.app_commission, Decimal('1.00'))

	def test_bicycle_eta_uses_bicycle_speed(self):
		cyclist = make_rider('cyclist', vehicle=Bike.BICYCLE)

		order = accept_order(self.order.id, cyclist.id, 'Cyclist')

		# 1.11 km / 15 km/h
		self.assertEqual(order.estimated_time, 4)

	def test_second_acceptance_fails_and_first_rider_keeps_order(self):
		other = make_rider('other')
		accept_order(self.order.id, self.rider.id, 'First')

		with self.assertRaises(OrderNotAvailableError):
			accept_order(self.order.id, other.id, 'Second')

		self.order.refresh_from_db()
		self.assertEqual(self.order.rider_id, self.rider.id)

	def test_conditional_update_rejects_stale_pending_read(self):
		other = make_rider('other')
		real_get_rider = order_lifecycle._get_rider

		def get_rider_after_competing_accept(rider_id):
			# Another transaction wins between our read and our write
			DeliveryOrder.objects.filter(pk=self.order.pk).update(status=DeliveryOrder.ACCEPTED, rider=other)
			return real_get_rider(rider_id)

		with patch.object(order_lifecycle, '_get_rider', side_effect=get_rider_after_competing_accept):
			with self.assertRaises(OrderNotAvailableError):
				accept_order(self.order.id, self.rider.id, 'Late')

		self.order.refresh_from_db()
		self.assertNotEqual(self.order.rider_id, self.rider.id)

	def test_unknown_order_and_rider(self):
		with self.assertRaises(OrderNotFoundError):
			accept_order(9999, self.rider.id, 'x')

		partner_user = User.objects.create_user(username='shop', password='x', role='partner')
		with self.assertRaises(RiderNotFoundError):
			accept_order(self.order.id, partner_user.id, 'x')

	def test_rider_with_critical_maintenance_cannot_accept(self):
		bike = Bike.objects.create(user=self.rider, model='CG')
		MaintenanceLog.objects.create(
			bike=bike, user=self.rider, part_name='Chain', category='TRANSMISSAO', wear_percentage=0.9
		)

		with self.assertRaises(RiderBlockedByMaintenanceError):
			accept_order(self.order.id, self.rider.id, 'Blocked')

		self.order.refresh_from_db()
		self.assertEqual(self.order.status, DeliveryOrder.PENDING)

		RiderProfile.objects.filter(user=self.rider).update(maintenance_block_override=True)
		order = accept_order(self.order.id, self.rider.id, 'Override')
		self.assertEqual(order.status, DeliveryOrder.ACCEPTED)


class UpdateOrderStatusTests(TestCase):
	def setUp(self):
		self.store = make_store()
		self.rider = make_rider('rider', 0, 0.01)
		self.order = create_order(order_data(self.store))

	def _accepted(self, rider=None):
		return accept_order(self.order.id, (rider or self.rider).id, 'Rider')

	def test_happy_path_stamps_timestamps_and_credits_once(self):
		self._accepted()
		order = update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)
		self.assertIsNotNone(order.in_progress_at)

		order = update_order_status(self.order.id, DeliveryOrder.COMPLETED)
		self.assertIsNotNone(order.completed_at)

		wallet = Wallet.objects.get(user=self.rider)
		self.assertEqual(wallet.balance, Decimal('1.00'))
		self.assertEqual(wallet.total_earned, Decimal('1.00'))
		self.rider.refresh_from_db()
		self.assertEqual(self.rider.loyalty_points, 10)

	def test_repeated_completion_is_a_no_op(self):
		self._accepted()
		update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)
		update_order_status(self.order.id, DeliveryOrder.COMPLETED)
		order = update_order_status(self.order.id, DeliveryOrder.COMPLETED)

		self.assertEqual(order.status, DeliveryOrder.COMPLETED)
		self.assertEqual(
			WalletTransaction.objects.filter(delivery_order=self.order, type=WalletTransaction.COMMISSION).count(), 1
		)
		self.assertEqual(Wallet.objects.get(user=self.rider).balance, Decimal('1.00'))
		self.rider.refresh_from_db()
		self.assertEqual(self.rider.loyalty_points, 10)

	def test_invalid_transitions_rejected(self):
		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, DeliveryOrder.COMPLETED)
		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)
		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, DeliveryOrder.ACCEPTED)
		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, 'delivered')

		self._accepted()
		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, DeliveryOrder.COMPLETED)

	def test_terminal_states_are_final(self):
		update_order_status(self.order.id, DeliveryOrder.CANCELLED)

		with self.assertRaises(InvalidTransitionError):
			update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)

		order = update_order_status(self.order.id, DeliveryOrder.CANCELLED)
		self.assertEqual(order.status, DeliveryOrder.CANCELLED)
		self.assertIsNotNone(order.cancelled_at)

	def test_cancel_after_acceptance_credits_nothing(self):
		self._accepted()
		update_order_status(self.order.id, DeliveryOrder.CANCELLED)

		self.assertFalse(WalletTransaction.objects.exists())

	def test_missing_wallet_rolls_back_completion(self):
		walletless = make_rider('walletless', wallet=False)
		self._accepted(walletless)
		update_order_status(self.order.id, DeliveryOrder.IN_PROGRESS)

		with self.assertRaises(WalletNotFoundError):
			update_order_status(self.order.id, DeliveryOrder.COMPLETED)

		self.order.refresh_from_db()
		walletless.refresh_from_db()
		self.assertEqual(self.order.status, DeliveryOrder.IN_PROGRESS)
		self.assertIsNone(self.order.completed_at)
		self.assertEqual(walletless.loyalty_points, 0)

	def test_unknown_order(self):
		with self.assertRaises(OrderNotFoundError):
			update_order_status(9999, DeliveryOrder.CANCELLED)


class OrderQueryTests(TestCase):
	def setUp(self):
		self.store = make_store()
		self.other_store = make_store('Store B')
		self.rider = make_rider('rider')
		self.first = create_order(order_data(self.store))
		self.second = create_order(order_data(self.store))
		self.third = create_order(order_data(self.other_store))
		accept_order(self.second.id, self.rider.id, 'Rider')

	def test_list_orders_newest_first_with_total(self):
		orders, total = list_orders()

		self.assertEqual(total, 3)
		self.assertEqual([o.id for o in orders], [self.third.id, self.second.id, self.first.id])

	def test_filters_are_combined(self):
		orders, total = list_orders(OrderFilters(status=DeliveryOrder.PENDING, store_id=self.store.id))
		self.assertEqual(total, 1)
		self.assertEqual(orders[0].id, self.first.id)

		orders, total = list_orders(OrderFilters(rider_id=self.rider.id))
		self.assertEqual([o.id for o in orders], [self.second.id])

	def test_pagination(self):
		orders, total = list_orders(OrderFilters(limit=1, offset=1))

		self.assertEqual(total, 3)
		self.assertEqual([o.id for o in orders], [self.second.id])

	def test_get_order_by_id(self):
		self.assertEqual(get_order_by_id(self.first.id).id, self.first.id)
		with self.assertRaises(OrderNotFoundError):
			get_order_by_id(9999)

	def test_matching_criteria_for_order_uses_trip_geometry(self):
		criteria = matching_criteria_for_order(self.first)

		self.assertEqual(criteria.radius, 5)
		self.assertTrue(criteria.has_trip)
		self.assertAlmostEqual(criteria.trip_distance, 1.112, places=3)
		self.assertEqual(matching_criteria_for_order(self.first, radius=2).radius, 2)
