from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # Split allocation
    path('split/', views.split_expense, name='split'),

    # Settlement
    path('settle/', views.settle_balances, name='settle'),
    path('balances/', views.group_balances, name='balances'),
]
