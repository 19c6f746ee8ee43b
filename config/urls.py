"""
URL configuration for task_tracker project.
"""

from django.contrib import admin
from django.urls import path, include
from django.conf import settings

urlpatterns = [
    path('admin/', admin.site.urls),

    # App URLs
    path('tasks/', include('apps.tasks.urls', namespace='tasks')),
    path('chat/', include('apps.chat.urls', namespace='chat')),
    path('notifications/', include('apps.notifications.urls', namespace='notifications')),
    path('time/', include('apps.timetracking.urls', namespace='timetracking')),
]

if settings.DEBUG:
    # Debug toolbar
    import debug_toolbar
    urlpatterns = [
        path('__debug__/', include(debug_toolbar.urls)),
    ] + urlpatterns

# Admin site customization
admin.site.site_header = 'Task Tracker Administration'
admin.site.site_title = 'Task Tracker Admin'
admin.site.index_title = 'Welcome to Task Tracker Admin'
