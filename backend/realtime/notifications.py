"""
Order event publication over the channel layer.

Lifecycle operations call `schedule_order_event`, which defers publication
until the surrounding transaction commits, so a rolled back transition is
never announced.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

logger = logging.getLogger(__name__)


def build_order_payload(event_type: str, order) -> Dict[str, Any]:
    return {
        "type": "order_event",
        "event": event_type,
        "order_id": order.id,
        "status": order.status,
        "rider_id": order.rider_id,
        "store_id": order.store_id,
        "estimated_time": order.estimated_time,
    }


def notify_order_event(event_type: str, order) -> bool:
    """
    Send an order event to the order group and, when assigned, the rider group.

    Returns:
        True if the event was handed to the channel layer
    """
    channel_layer = get_channel_layer()
    if channel_layer is None:
        logger.warning("No channel layer available for %s on order %s", event_type, order.id)
        return False

    payload = build_order_payload(event_type, order)
    groups = [f"order_{order.id}"]
    if order.rider_id:
        groups.append(f"rider_{order.rider_id}")

    try:
        for group in groups:
            async_to_sync(channel_layer.group_send)(group, payload)
    except Exception:
        logger.exception("Failed to publish %s for order %s", event_type, order.id)
        return False

    logger.debug("Published %s for order %s to %s", event_type, order.id, groups)
    return True


def schedule_order_event(order, event_type: str) -> None:
    """Queue publication of an order event once the current transaction commits."""
    from realtime.tasks import publish_order_event_task

    order_id = order.id

    def publish():
        # The transition is already committed; a broker outage must not fail the caller
        try:
            publish_order_event_task.delay(order_id, event_type)
        except Exception:
            logger.exception("Failed to queue %s for order %s", event_type, order_id)

    transaction.on_commit(publish)
