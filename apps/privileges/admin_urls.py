from django.urls import path
from . import views

app_name = 'privileges_admin'

urlpatterns = [
    path('', views.AdminPrivilegeListView.as_view(), name='list'),
    path('<int:privilege_id>/', views.AdminPrivilegeDetailView.as_view(), name='detail'),
    path('<int:privilege_id>/activate/',
         views.AdminPrivilegeActivationView.as_view(activate=True), name='activate'),
    path('<int:privilege_id>/deactivate/',
         views.AdminPrivilegeActivationView.as_view(activate=False), name='deactivate'),
    path('members/<int:member_id>/', views.AdminMemberPrivilegesView.as_view(), name='member_grants'),
    path('grants/<int:grant_id>/revoke/', views.AdminRevokeGrantView.as_view(), name='revoke_grant'),
]
