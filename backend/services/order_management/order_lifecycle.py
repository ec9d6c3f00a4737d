"""
Core delivery order lifecycle operations.

This module owns the order state machine:

    pending --accept--> accepted --> inProgress --> completed
       \\________________\\_____________\\________--> cancelled

Completion credits the rider's commission exactly once, inside the same
transaction as the status change.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from deliveries.models import DeliveryOrder
from partners.models import Partner
from common.utils import calculate_distance
from realtime.notifications import schedule_order_event
from services.matching import (
    MatchingCriteria,
    estimate_minutes,
    get_current_vehicle_type,
    is_blocked_by_maintenance,
)
from services.wallet_ledger import credit_commission
from .exceptions import (
    OrderNotFoundError,
    OrderNotAvailableError,
    InvalidTransitionError,
    RiderNotFoundError,
    RiderBlockedByMaintenanceError,
    PartnerNotFoundError,
    PartnerBlockedError,
)

User = get_user_model()
logger = logging.getLogger(__name__)

PREMIUM_COMMISSION = Decimal('3.00')
STANDARD_COMMISSION = Decimal('1.00')
LOYALTY_POINTS_PER_DELIVERY = 10

ALLOWED_TRANSITIONS = {
    DeliveryOrder.PENDING: {DeliveryOrder.CANCELLED},
    DeliveryOrder.ACCEPTED: {DeliveryOrder.IN_PROGRESS, DeliveryOrder.CANCELLED},
    DeliveryOrder.IN_PROGRESS: {DeliveryOrder.COMPLETED, DeliveryOrder.CANCELLED},
    DeliveryOrder.COMPLETED: set(),
    DeliveryOrder.CANCELLED: set(),
}


@dataclass
class OrderFilters:
    """Optional filters for listing orders; each one present is ANDed in."""
    status: Optional[str] = None
    rider_id: Optional[int] = None
    store_id: Optional[int] = None
    limit: int = 50
    offset: int = 0

    def to_q(self) -> Q:
        q = Q()
        if self.status:
            q &= Q(status=self.status)
        if self.rider_id:
            q &= Q(rider_id=self.rider_id)
        if self.store_id:
            q &= Q(store_id=self.store_id)
        return q


def _first_present(*values):
    for value in values:
        if value is not None:
            return value
    return None


def _lock_order(order_id: int) -> DeliveryOrder:
    try:
        return DeliveryOrder.objects.select_for_update().get(id=order_id)
    except DeliveryOrder.DoesNotExist:
        raise OrderNotFoundError("Order not found")


def _get_rider(rider_id: int):
    try:
        return User.objects.select_related('rider_profile').get(id=rider_id, role=User.ROLE_RIDER)
    except User.DoesNotExist:
        raise RiderNotFoundError("Rider not found")


def commission_for(rider) -> Decimal:
    """Flat per-order payout by subscription tier."""
    return PREMIUM_COMMISSION if rider.is_premium else STANDARD_COMMISSION


# ===================== Store Operations =====================

@transaction.atomic
def create_order(data: Dict[str, Any]) -> DeliveryOrder:
    """
    Create a new pending delivery order for a partner store.

    Args:
        data: Validated order fields (see CreateDeliveryOrderSerializer).
            Store name, address and coordinates default to the partner's.

    Returns:
        The created DeliveryOrder, with placeholder commission and no rider

    Raises:
        PartnerNotFoundError: If the store does not exist
        PartnerBlockedError: If the store is blocked
    """
    try:
        partner = Partner.objects.get(id=data['store_id'])
    except Partner.DoesNotExist:
        raise PartnerNotFoundError("Partner not found")

    if partner.is_blocked:
        logger.warning("Blocked partner %s tried to create an order", partner.id)
        raise PartnerBlockedError("Partner is blocked and cannot create orders")

    order = DeliveryOrder.objects.create(
        store=partner,
        store_name=data.get('store_name') or partner.name,
        store_address=data.get('store_address') or partner.address,
        store_latitude=_first_present(data.get('store_latitude'), partner.latitude),
        store_longitude=_first_present(data.get('store_longitude'), partner.longitude),
        delivery_address=data['delivery_address'],
        delivery_latitude=data['delivery_latitude'],
        delivery_longitude=data['delivery_longitude'],
        recipient_name=data.get('recipient_name'),
        recipient_phone=data.get('recipient_phone'),
        notes=data.get('notes'),
        value=data['value'],
        delivery_fee=data['delivery_fee'],
        app_commission=DeliveryOrder.PLACEHOLDER_COMMISSION,
        status=DeliveryOrder.PENDING,
        priority=data.get('priority') or 'normal',
    )

    logger.info("Created delivery order %s for store %s", order.id, partner.id)
    schedule_order_event(order, 'order_created')
    return order


# ===================== Rider Operations =====================

@transaction.atomic
def accept_order(order_id: int, rider_id: int, rider_name: str) -> DeliveryOrder:
    """
    Assign a pending order to a rider and lock in commission, distance and ETA.

    At most one acceptance wins: the pending check and the write are a
    single conditional UPDATE on a locked row.

    Args:
        order_id: ID of the order to accept
        rider_id: ID of the accepting rider
        rider_name: Rider name shown to the store and recipient

    Returns:
        The accepted DeliveryOrder

    Raises:
        OrderNotFoundError, OrderNotAvailableError, RiderNotFoundError,
        RiderBlockedByMaintenanceError
    """
    order = _lock_order(order_id)

    if order.status != DeliveryOrder.PENDING:
        raise OrderNotAvailableError("Order is no longer available")

    rider = _get_rider(rider_id)

    if is_blocked_by_maintenance(rider):
        logger.warning("Rider %s blocked by maintenance tried to accept order %s", rider.id, order.id)
        raise RiderBlockedByMaintenanceError(
            "Rider has critical maintenance pending and cannot accept orders"
        )

    commission = commission_for(rider)
    distance = calculate_distance(
        order.store_latitude,
        order.store_longitude,
        order.delivery_latitude,
        order.delivery_longitude,
    )
    vehicle_type = get_current_vehicle_type(rider.id)
    estimated_time = estimate_minutes(distance, vehicle_type)

    updated = DeliveryOrder.objects.filter(pk=order.pk, status=DeliveryOrder.PENDING).update(
        status=DeliveryOrder.ACCEPTED,
        rider=rider,
        rider_name=rider_name,
        app_commission=commission,
        distance=round(distance, 2),
        estimated_time=estimated_time,
        accepted_at=timezone.now(),
    )
    if not updated:
        raise OrderNotAvailableError("Order is no longer available")

    order.refresh_from_db()

    logger.info(
        "Order %s accepted by rider %s (commission=%s, distance=%.2fkm, eta=%smin, vehicle=%s)",
        order.id, rider.id, commission, distance, estimated_time, vehicle_type
    )
    schedule_order_event(order, 'order_accepted')
    return order


@transaction.atomic
def update_order_status(order_id: int, status: str) -> DeliveryOrder:
    """
    Move an order along its lifecycle.

    Re-requesting the current status returns the order untouched, so
    retried completions never credit twice.

    Args:
        order_id: ID of the order
        status: Target status (inProgress, completed or cancelled)

    Returns:
        The updated DeliveryOrder

    Raises:
        OrderNotFoundError: If the order does not exist
        InvalidTransitionError: If the lifecycle does not allow the change
        WalletNotFoundError: If completion cannot credit the rider's wallet
    """
    order = _lock_order(order_id)

    if status == order.status:
        logger.info("Order %s already %s; nothing to do", order.id, status)
        return order

    if status not in ALLOWED_TRANSITIONS.get(order.status, set()):
        raise InvalidTransitionError(f"Cannot change order from {order.status} to {status}")

    now = timezone.now()
    order.status = status
    update_fields = ['status']

    if status == DeliveryOrder.IN_PROGRESS:
        order.in_progress_at = now
        update_fields.append('in_progress_at')

    elif status == DeliveryOrder.COMPLETED:
        order.completed_at = now
        update_fields.append('completed_at')

        if order.rider_id and order.app_commission:
            credit_commission(order.rider_id, order.app_commission, order.id)
            User.objects.filter(pk=order.rider_id).update(
                loyalty_points=F('loyalty_points') + LOYALTY_POINTS_PER_DELIVERY
            )

    elif status == DeliveryOrder.CANCELLED:
        order.cancelled_at = now
        update_fields.append('cancelled_at')

    order.save(update_fields=update_fields)

    logger.info("Order %s moved to %s", order.id, status)
    schedule_order_event(order, f'order_{status}')
    return order


# ===================== Queries =====================

def list_orders(filters: Optional[OrderFilters] = None) -> Tuple[List[DeliveryOrder], int]:
    """Return a page of orders (newest first) and the total matching count."""
    filters = filters or OrderFilters()
    queryset = DeliveryOrder.objects.select_related('store', 'rider').filter(filters.to_q())
    total = queryset.count()
    orders = list(queryset[filters.offset:filters.offset + filters.limit])
    return orders, total


def get_order_by_id(order_id: int) -> DeliveryOrder:
    try:
        return DeliveryOrder.objects.select_related('store', 'rider').get(id=order_id)
    except DeliveryOrder.DoesNotExist:
        raise OrderNotFoundError("Order not found")


def matching_criteria_for_order(order: DeliveryOrder, radius: Optional[float] = None) -> MatchingCriteria:
    """Matching criteria with full trip geometry taken from a stored order."""
    return MatchingCriteria(
        latitude=float(order.store_latitude),
        longitude=float(order.store_longitude),
        radius=radius if radius is not None else settings.DEFAULT_MATCHING_RADIUS_KM,
        store_latitude=float(order.store_latitude),
        store_longitude=float(order.store_longitude),
        delivery_latitude=float(order.delivery_latitude),
        delivery_longitude=float(order.delivery_longitude),
    )
