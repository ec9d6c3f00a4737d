import os

import redis
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import connection
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from realtime.tasks import publish_order_event_task


def check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")


def check_redis():
    redis.Redis(
        host=os.getenv("REDIS_HOST", "localhost"),
        port=int(os.getenv("REDIS_PORT", 6379)),
        db=0,
        socket_timeout=3,
    ).ping()


def check_channel_layer():
    if get_channel_layer() is None:
        raise RuntimeError("no channel layer")


def check_celery():
    # Order events cannot be published without the task registered on the app
    if publish_order_event_task.name not in publish_order_event_task.app.tasks:
        raise RuntimeError("task not registered")


def health_checks():
    return (
        ("database", check_database),
        ("redis", check_redis),
        ("channels", check_channel_layer),
        ("celery", check_celery),
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """Report database, Redis, channel layer and Celery status; 503 if any is down"""
    services = {}
    healthy = True

    for name, check in health_checks():
        try:
            check()
            services[name] = "healthy"
        except Exception as e:
            services[name] = f"unhealthy: {e}"
            healthy = False

    return Response(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "debug": settings.DEBUG,
            "services": services,
        },
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
