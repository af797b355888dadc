import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q


class Follow(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    follower = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="following", on_delete=models.CASCADE, db_index=True)
    following = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="followers", on_delete=models.CASCADE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "follows"
        constraints = [
            models.UniqueConstraint(fields=["follower", "following"], name="uq_follows_pair"),
            models.CheckConstraint(condition=~Q(follower=F("following")), name="ck_follows_not_self"),
        ]
        indexes = [
            models.Index(fields=["follower", "-created_at"], name="idx_follows_follower"),
            models.Index(fields=["following", "-created_at"], name="idx_follows_following"),
        ]
