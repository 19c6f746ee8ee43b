"""
URL configuration for tasks app.

Includes:
- Task list with filters
- Status changes
- Daily task rollover jobs
"""

from django.urls import path
from . import views

app_name = 'tasks'

urlpatterns = [
    # Task list (filtered)
    path('', views.task_list, name='task_list'),

    # Status changes
    path('<int:pk>/status/', views.task_status_change, name='task_status_change'),

    # Rollover jobs
    path('jobs/reset-daily/', views.reset_daily_tasks_view, name='reset_daily_tasks'),
    path('jobs/duplicate-daily/', views.duplicate_daily_tasks_view, name='duplicate_daily_tasks'),
]
