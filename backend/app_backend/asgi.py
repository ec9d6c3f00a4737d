"""
ASGI config for app_backend project.

HTTP only; order events are published to the channel layer from Celery
workers, not served over websockets here.
"""

import os

from channels.routing import ProtocolTypeRouter
from django.core.asgi import get_asgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'app_backend.settings')

application = ProtocolTypeRouter({
    "http": get_asgi_application(),
})
