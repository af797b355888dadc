from django.apps import apps


class LiveChannelMixin:
    """뷰에서 서비스 함수로 넘겨줄 LiveChannel 핸들. 클래스 속성으로 덮어쓸 수 있다."""

    live_channel = None

    def get_live_channel(self):
        if self.live_channel is not None:
            return self.live_channel
        return apps.get_app_config("realtime").live_channel
