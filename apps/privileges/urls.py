from django.urls import path
from . import views

app_name = 'privileges'

urlpatterns = [
    path('', views.PrivilegeListView.as_view(), name='list'),
    path('mine/', views.MyPrivilegesView.as_view(), name='mine'),
    path('<int:privilege_id>/exchange/', views.ExchangePrivilegeView.as_view(), name='exchange'),
    path('grants/<int:grant_id>/use/', views.UseGrantView.as_view(), name='use_grant'),
]
