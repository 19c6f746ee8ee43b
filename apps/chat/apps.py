from django.apps import AppConfig


class ChatConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.chat'
    verbose_name = 'Chat'

    def ready(self):
        from django.contrib.auth.signals import user_logged_in, user_logged_out
        from .registry import mount_on_login, unmount_on_logout

        user_logged_in.connect(mount_on_login, dispatch_uid='chat-listener-login')
        user_logged_out.connect(unmount_on_logout, dispatch_uid='chat-listener-logout')
