from rest_framework import serializers

from contents.serializers import serialize_content
from .models import Bookmark


class BookmarkOut(serializers.ModelSerializer):
    kind = serializers.CharField(source="content_kind", read_only=True)
    content_id = serializers.UUIDField(read_only=True)
    content = serializers.SerializerMethodField()

    class Meta:
        model = Bookmark
        fields = ("id", "kind", "content_id", "content", "created_at")

    def get_content(self, obj) -> dict:
        # context["resolved"]: resolve_bookmarked() 결과
        item = self.context.get("resolved", {}).get((obj.content_kind, obj.content_id))
        return serialize_content(item) if item is not None else None
