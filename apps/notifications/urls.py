"""
URL configuration for notifications app.
"""

from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('active/', views.active_notices, name='active_notices'),
    path('cue.wav', views.notification_cue, name='cue'),
]
