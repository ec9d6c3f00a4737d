from django.urls import path
from . import views

app_name = 'wallets'

urlpatterns = [
    path('me/', views.my_wallet, name='my-wallet'),
    path('me/transactions/', views.my_transactions, name='my-transactions'),
    path('withdraw/', views.withdraw, name='withdraw'),
]
