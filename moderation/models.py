import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q

MAX_REPORT_DESCRIPTION = 500


class BlockedUser(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    blocker = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="blocking", on_delete=models.CASCADE, db_index=True)
    blocked = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="blocked_by", on_delete=models.CASCADE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "blocked_users"
        constraints = [
            models.UniqueConstraint(fields=["blocker", "blocked"], name="uq_blocked_users_pair"),
            models.CheckConstraint(condition=~Q(blocker=F("blocked")), name="ck_blocked_users_not_self"),
        ]
        indexes = [models.Index(fields=["blocker", "-created_at"], name="idx_blocked_users_blocker")]


class Report(models.Model):
    class Reason(models.TextChoices):
        SPAM = "SPAM", "Spam"
        HARASSMENT = "HARASSMENT", "Harassment"
        INAPPROPRIATE_CONTENT = "INAPPROPRIATE_CONTENT", "Inappropriate content"
        COPYRIGHT_VIOLATION = "COPYRIGHT_VIOLATION", "Copyright violation"
        FAKE_ACCOUNT = "FAKE_ACCOUNT", "Fake account"
        OTHER = "OTHER", "Other"

    class TargetKind(models.TextChoices):
        SNIPPET = "snippet", "Snippet"
        DOC = "doc", "Doc"
        BUG = "bug", "Bug"
        COMMENT = "comment", "Comment"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        REVIEWED = "REVIEWED", "Reviewed"
        RESOLVED = "RESOLVED", "Resolved"
        DISMISSED = "DISMISSED", "Dismissed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reporter = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reports_filed", on_delete=models.CASCADE)
    reported = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="reports_received", on_delete=models.CASCADE)
    reason = models.CharField(max_length=32, choices=Reason.choices)
    description = models.CharField(max_length=MAX_REPORT_DESCRIPTION, blank=True, default="")
    # 사용자 신고면 둘 다 NULL
    target_kind = models.CharField(max_length=16, choices=TargetKind.choices, null=True, blank=True)
    target_id = models.UUIDField(null=True, blank=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reports"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "-created_at"], name="idx_reports_status"),
            models.Index(fields=["target_kind", "target_id"], name="idx_reports_target"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(Q(target_kind__isnull=True) & Q(target_id__isnull=True)) | (Q(target_kind__isnull=False) & Q(target_id__isnull=False)),
                name="ck_reports_target_pair",
            ),
        ]

    def __str__(self):
        return f"Report({self.reason}) {self.reporter_id} -> {self.reported_id}"
