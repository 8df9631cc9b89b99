from django.urls import path
from . import views

app_name = 'points_admin'

urlpatterns = [
    path('add/', views.AdminAddPointsView.as_view(), name='add'),
    path('deduct/', views.AdminDeductPointsView.as_view(), name='deduct'),
    path('adjust/', views.AdminAdjustPointsView.as_view(), name='adjust'),
    path('balance/<int:member_id>/', views.AdminMemberBalanceView.as_view(), name='member_balance'),
    path('history/<int:member_id>/', views.AdminMemberHistoryView.as_view(), name='member_history'),
    path('expiring/', views.AdminExpiringPointsView.as_view(), name='expiring'),
]
