"""
URL configuration for timetracking app.
"""

from django.urls import path
from . import views

app_name = 'timetracking'

urlpatterns = [
    path('today/', views.worked_today, name='worked_today'),
]
