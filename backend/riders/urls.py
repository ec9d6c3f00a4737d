from django.urls import path
from .views import (
    RiderStatusView,
    RiderLocationView,
)

urlpatterns = [
    path("status/", RiderStatusView.as_view(), name="rider-status"),
    path("location/", RiderLocationView.as_view(), name="rider-location"),
]
