"""
URL configuration for chat app.
"""

from django.urls import path
from . import views

app_name = 'chat'

urlpatterns = [
    path('', views.chat_list, name='chat_list'),
    path('unread/', views.unread_count, name='unread_count'),
    path('<int:pk>/messages/', views.message_create, name='message_create'),
    path('<int:pk>/read/', views.mark_read, name='mark_read'),
]
