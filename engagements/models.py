import uuid

from django.conf import settings
from django.db import models

from common.content import ContentTarget


class Like(ContentTarget):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="likes")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "likes"
        constraints = [
            models.UniqueConstraint(fields=["user", "content_kind", "content_id"], name="uniq_like_user_content"),
        ]
        indexes = [
            models.Index(fields=["content_kind", "content_id", "created_at"]),
        ]


class Bookmark(ContentTarget):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookmarks")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bookmarks"
        constraints = [
            models.UniqueConstraint(fields=["user", "content_kind", "content_id"], name="uniq_bookmark_user_content"),
        ]
        indexes = [
            models.Index(fields=["user", "-created_at"]),
            models.Index(fields=["content_kind", "content_id"]),
        ]
