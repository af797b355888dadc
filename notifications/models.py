import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.content import ContentKind, ContentRef


class Notification(models.Model):
    class Type(models.TextChoices):
        FOLLOW = "FOLLOW", "Follow"
        LIKE = "LIKE", "Like"
        COMMENT = "COMMENT", "Comment"
        REPLY = "REPLY", "Reply"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    recipient = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="sent_notifications")
    type = models.CharField(max_length=16, choices=Type.choices)
    # FOLLOW 는 콘텐츠 없음
    content_kind = models.CharField(max_length=16, choices=ContentKind.choices, null=True, blank=True)
    content_id = models.UUIDField(null=True, blank=True)
    comment = models.ForeignKey("comments.Comment", on_delete=models.CASCADE, null=True, blank=True, related_name="notifications")
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "notifications"
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["recipient", "is_read", "-created_at"]),
            models.Index(fields=["content_kind", "content_id"]),
        ]

    @property
    def content_ref(self):
        if not self.content_kind or not self.content_id:
            return None
        return ContentRef(self.content_kind, self.content_id)
