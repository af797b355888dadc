import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from common.content import ContentKind, ContentRef


def default_bug_expiry():
    return timezone.now() + timedelta(hours=getattr(settings, "BUG_TTL_HOURS", 24))


class ContentItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    author = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="%(class)ss")
    title = models.CharField(max_length=200)
    tags = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    kind: ContentKind = None

    class Meta:
        abstract = True
        ordering = ("-created_at",)

    def __str__(self):
        return f"{self.__class__.__name__}<{self.id}> by {self.author_id}"

    @property
    def ref(self) -> ContentRef:
        return ContentRef.of(self)

    @property
    def is_public(self) -> bool:
        return True

    @property
    def is_expired(self) -> bool:
        return False

    def is_owned_by(self, user) -> bool:
        return bool(user and user.is_authenticated and self.author_id == user.id)


class Snippet(ContentItem):
    kind = ContentKind.SNIPPET

    description = models.TextField(blank=True, default="")
    code = models.TextField()
    language = models.CharField(max_length=50)
    is_public = models.BooleanField(default=True)

    class Meta(ContentItem.Meta):
        db_table = "snippets"
        indexes = [
            models.Index(fields=["author", "-created_at"], name="idx_snippet_author_created"),
            models.Index(fields=["is_public", "-created_at"], name="idx_snippet_public_created"),
        ]


class Doc(ContentItem):
    kind = ContentKind.DOC

    content = models.TextField()
    is_public = models.BooleanField(default=True)

    class Meta(ContentItem.Meta):
        db_table = "docs"
        indexes = [
            models.Index(fields=["author", "-created_at"], name="idx_doc_author_created"),
            models.Index(fields=["is_public", "-created_at"], name="idx_doc_public_created"),
        ]


class Bug(ContentItem):
    class Severity(models.TextChoices):
        LOW = "LOW", "Low"
        MEDIUM = "MEDIUM", "Medium"
        HIGH = "HIGH", "High"
        CRITICAL = "CRITICAL", "Critical"

    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        IN_PROGRESS = "IN_PROGRESS", "In progress"
        RESOLVED = "RESOLVED", "Resolved"
        CLOSED = "CLOSED", "Closed"

    kind = ContentKind.BUG

    description = models.TextField()
    code = models.TextField(blank=True, default="")
    language = models.CharField(max_length=50, blank=True, default="")
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.MEDIUM)
    status = models.CharField(max_length=12, choices=Status.choices, default=Status.OPEN)
    # 만료 후에는 410, 정기 정리 작업이 삭제
    expires_at = models.DateTimeField(default=default_bug_expiry, db_index=True)

    class Meta(ContentItem.Meta):
        db_table = "bugs"
        indexes = [
            models.Index(fields=["author", "-created_at"], name="idx_bug_author_created"),
        ]

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()


CONTENT_MODELS = {
    ContentKind.SNIPPET: Snippet,
    ContentKind.DOC: Doc,
    ContentKind.BUG: Bug,
}
