from rest_framework import serializers

from core.serializers import UserSummaryOut
from .models import Bug, Doc, Snippet


class TagsField(serializers.ListField):
    # 소문자/공백 제거/중복 제거, 최대 10개
    child = serializers.CharField(max_length=30)

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("max_length", 10)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        tags = super().to_internal_value(data)
        out = []
        for t in tags:
            t = t.strip().lower()
            if t and t not in out:
                out.append(t)
        return out


class SnippetIn(serializers.ModelSerializer):
    tags = TagsField()

    class Meta:
        model = Snippet
        fields = ("title", "description", "code", "language", "tags", "is_public")


class DocIn(serializers.ModelSerializer):
    tags = TagsField()

    class Meta:
        model = Doc
        fields = ("title", "content", "tags", "is_public")


class BugIn(serializers.ModelSerializer):
    tags = TagsField()

    class Meta:
        model = Bug
        fields = ("title", "description", "code", "language", "severity", "status", "tags")


class ContentOut(serializers.ModelSerializer):
    # annotate_for() 가 붙인 값. 생성 직후처럼 주석이 없으면 0/False
    kind = serializers.SerializerMethodField()
    author = UserSummaryOut(read_only=True)
    likes_count = serializers.SerializerMethodField()
    comments_count = serializers.SerializerMethodField()
    bookmarks_count = serializers.SerializerMethodField()
    is_liked = serializers.SerializerMethodField()
    is_bookmarked = serializers.SerializerMethodField()

    common_fields = ("id", "kind", "author", "title", "tags", "created_at", "updated_at", "likes_count", "comments_count", "bookmarks_count", "is_liked", "is_bookmarked")

    def get_kind(self, obj) -> str:
        return obj.kind.value

    def get_likes_count(self, obj) -> int:
        return getattr(obj, "likes_count", 0)

    def get_comments_count(self, obj) -> int:
        return getattr(obj, "comments_count", 0)

    def get_bookmarks_count(self, obj) -> int:
        return getattr(obj, "bookmarks_count", 0)

    def get_is_liked(self, obj) -> bool:
        return bool(getattr(obj, "is_liked", False))

    def get_is_bookmarked(self, obj) -> bool:
        return bool(getattr(obj, "is_bookmarked", False))


class SnippetOut(ContentOut):
    class Meta:
        model = Snippet
        fields = ContentOut.common_fields + ("description", "code", "language", "is_public")


class DocOut(ContentOut):
    class Meta:
        model = Doc
        fields = ContentOut.common_fields + ("content", "is_public")


class BugOut(ContentOut):
    class Meta:
        model = Bug
        fields = ContentOut.common_fields + ("description", "code", "language", "severity", "status", "expires_at")


OUTPUT_SERIALIZERS = {
    Snippet: SnippetOut,
    Doc: DocOut,
    Bug: BugOut,
}


def serialize_content(item, **kwargs):
    return OUTPUT_SERIALIZERS[type(item)](item, **kwargs).data
