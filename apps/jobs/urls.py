from django.urls import path
from . import views

app_name = 'jobs'

urlpatterns = [
    path('', views.JobListView.as_view(), name='list'),
    path('<str:job_name>/', views.JobStatusView.as_view(), name='status'),
    path('<str:job_name>/trigger/', views.TriggerJobView.as_view(), name='trigger'),
]
