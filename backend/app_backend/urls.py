from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint

    # Authentication endpoints (at /api/auth/)
    path('api/auth/', include('accounts.urls')),  # accounts.urls have register, login, refresh endpoints

    # Rider APIs (availability, location)
    path('api/rider/', include('riders.urls')),

    # Delivery order endpoints (at /api/deliveries/)
    path('api/deliveries/', include('deliveries.urls')),  # create, list, matching, accept, status

    # Rider wallet (at /api/wallet/)
    path('api/wallet/', include('wallets.urls')),
]
