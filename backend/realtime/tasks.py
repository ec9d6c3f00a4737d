"""Celery tasks for order event publication."""

from celery import shared_task
import logging

logger = logging.getLogger(__name__)


@shared_task
def publish_order_event_task(order_id: int, event_type: str) -> bool:
    """
    Publish a lifecycle event for an order.

    Scheduled after the transition commits; loads the order fresh so the
    payload reflects committed state.
    """
    from deliveries.models import DeliveryOrder
    from realtime.notifications import notify_order_event

    try:
        order = DeliveryOrder.objects.get(id=order_id)
    except DeliveryOrder.DoesNotExist:
        logger.warning("Order %s not found for %s event", order_id, event_type)
        return False

    return notify_order_event(event_type, order)
