from django.urls import path
from . import views

app_name = 'deliveries'

urlpatterns = [
    # Store APIs
    path('', views.orders, name='orders'),
    path('<int:order_id>/', views.order_detail, name='order-detail'),

    # Matching
    path('matching/', views.matching_riders, name='matching'),
    path('<int:order_id>/matching/', views.order_matching_riders, name='order-matching'),

    # Rider Order Actions
    path('<int:order_id>/accept/', views.accept, name='accept'),
    path('<int:order_id>/status/', views.update_status, name='status'),
]
