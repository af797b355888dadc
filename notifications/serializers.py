from rest_framework import serializers

from core.serializers import UserSummaryOut
from .models import Notification


class NotificationOut(serializers.ModelSerializer):
    sender = UserSummaryOut(read_only=True)
    content = serializers.SerializerMethodField()
    comment_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Notification
        fields = ("id", "type", "sender", "content", "comment_id", "is_read", "created_at")

    def get_content(self, obj):
        ref = obj.content_ref
        return ref.as_payload() if ref else None


class MarkReadIn(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
