"""
Realtime app: publishes delivery order events to the channel layer.

Key Components:
    - notifications.py: Order event payloads and channel-layer group sends
    - tasks.py: Celery task that publishes an event after the transition commits

Usage:
    from realtime.notifications import schedule_order_event, notify_order_event
"""
