from rest_framework import serializers

from common.serializers import ContentTargetIn
from core.serializers import UserSummaryOut
from .models import MAX_COMMENT_LENGTH, Comment

CONTENT_ERRORS = {
    "blank": "Content must not be empty.",
    "required": "Content must not be empty.",
    "max_length": f"Content must be at most {MAX_COMMENT_LENGTH} characters.",
}


class CommentCreateIn(ContentTargetIn):
    content = serializers.CharField(max_length=MAX_COMMENT_LENGTH, trim_whitespace=True, error_messages=CONTENT_ERRORS)
    parent_id = serializers.UUIDField(required=False, allow_null=True)


class CommentUpdateIn(serializers.Serializer):
    content = serializers.CharField(max_length=MAX_COMMENT_LENGTH, trim_whitespace=True, error_messages=CONTENT_ERRORS)


class CommentOut(serializers.ModelSerializer):
    author = UserSummaryOut(read_only=True)
    content_kind = serializers.CharField(read_only=True)
    content_id = serializers.UUIDField(read_only=True)
    parent_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Comment
        fields = ["id", "author", "content_kind", "content_id", "parent_id", "content", "created_at", "updated_at"]


class CommentThreadOut(CommentOut):
    # replies 는 뷰에서 created_at 오름차순으로 prefetch
    replies = CommentOut(many=True, read_only=True, source="replies.all")

    class Meta(CommentOut.Meta):
        fields = CommentOut.Meta.fields + ["replies"]
