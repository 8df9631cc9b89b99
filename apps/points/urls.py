from django.urls import path
from . import views

app_name = 'points'

urlpatterns = [
    path('balance/', views.get_points_balance, name='balance'),
    path('history/', views.get_points_history, name='history'),
    path('expiring/', views.get_expiring_points, name='expiring'),
]
