from django.apps import AppConfig


class RealtimeConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "realtime"
    live_channel = None

    def ready(self):
        from .broadcast import LiveChannel

        self.live_channel = LiveChannel()
