import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from common.content import ContentKind, ContentRef
from relations.services import get_user_or_404
from .models import BlockedUser, Report

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockResult:
    is_blocked: bool


@transaction.atomic
def toggle_block(*, actor, target_id) -> BlockResult:
    if str(actor.id) == str(target_id):
        raise ValidationError({"detail": "You cannot block yourself."})
    target = get_user_or_404(target_id)

    deleted, _ = BlockedUser.objects.filter(blocker=actor, blocked=target).delete()
    if deleted:
        log.info("User %s unblocked %s", actor.id, target.id)
        return BlockResult(is_blocked=False)

    try:
        with transaction.atomic():
            BlockedUser.objects.create(blocker=actor, blocked=target)
    except IntegrityError:
        pass
    log.info("User %s blocked %s", actor.id, target.id)
    return BlockResult(is_blocked=True)


def is_blocked(actor, target_id) -> bool:
    return BlockedUser.objects.filter(blocker=actor, blocked_id=target_id).exists()


def blocked_users(actor):
    return BlockedUser.objects.filter(blocker=actor).select_related("blocked").order_by("-created_at")


def _target_author(target_kind: str, target_id):
    """신고 대상 콘텐츠/댓글의 작성자 ID. 없으면 404."""
    if target_kind == Report.TargetKind.COMMENT:
        from comments.models import Comment

        author_id = Comment.objects.filter(pk=target_id).values_list("author_id", flat=True).first()
        if author_id is None:
            raise NotFound({"detail": "Comment not found."})
        return author_id

    item = ContentRef(ContentKind(target_kind), target_id).resolve()
    if item is None:
        raise NotFound({"detail": "Content not found."})
    return item.author_id


@transaction.atomic
def create_report(
    *,
    reporter,
    reason: str,
    description: str = "",
    reported_user_id=None,
    target_kind: Optional[str] = None,
    target_id=None,
) -> Report:
    if reported_user_id is not None:
        if str(reporter.id) == str(reported_user_id):
            raise ValidationError({"detail": "You cannot report yourself."})
        reported = get_user_or_404(reported_user_id)
        report = Report.objects.create(reporter=reporter, reported=reported, reason=reason, description=description)
    else:
        author_id = _target_author(target_kind, target_id)
        if author_id == reporter.id:
            raise ValidationError({"detail": "You cannot report your own content."})
        report = Report.objects.create(
            reporter=reporter,
            reported_id=author_id,
            reason=reason,
            description=description,
            target_kind=target_kind,
            target_id=target_id,
        )

    log.info("Report %s filed by %s against %s (%s)", report.id, reporter.id, report.reported_id, reason)
    return report


def list_reports(status: Optional[str] = None):
    qs = Report.objects.select_related("reporter", "reported").order_by("-created_at")
    if status:
        qs = qs.filter(status=status)
    return qs


def update_report_status(*, report_id, status: str) -> Report:
    report = Report.objects.filter(pk=report_id).first()
    if report is None:
        raise NotFound({"detail": "Report not found."})
    report.status = status
    report.save(update_fields=["status", "updated_at"])
    log.info("Report %s moved to %s", report.id, status)
    return report
