from rest_framework import serializers

from core.serializers import UserSummaryOut
from .models import MAX_REPORT_DESCRIPTION, BlockedUser, Report


class BlockIn(serializers.Serializer):
    user_id = serializers.UUIDField()


class BlockedUserOut(serializers.ModelSerializer):
    user = UserSummaryOut(source="blocked", read_only=True)
    blocked_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = BlockedUser
        fields = ("user", "blocked_at")


class ReportIn(serializers.Serializer):
    """
    대상은 정확히 하나: reported_user_id 또는 (content_type + content_id).
    """

    reason = serializers.ChoiceField(choices=Report.Reason.choices)
    description = serializers.CharField(max_length=MAX_REPORT_DESCRIPTION, required=False, allow_blank=True, default="")
    reported_user_id = serializers.UUIDField(required=False, allow_null=True)
    content_type = serializers.ChoiceField(choices=Report.TargetKind.choices, required=False, allow_null=True)
    content_id = serializers.UUIDField(required=False, allow_null=True)

    def validate(self, attrs):
        has_user = attrs.get("reported_user_id") is not None
        has_type = attrs.get("content_type") is not None
        has_id = attrs.get("content_id") is not None
        if has_type != has_id:
            raise serializers.ValidationError("content_type and content_id must be provided together.")
        if has_user == has_type:
            raise serializers.ValidationError("Provide exactly one target: reported_user_id or content_type with content_id.")
        return attrs


class ReportOut(serializers.ModelSerializer):
    reporter = UserSummaryOut(read_only=True)
    reported = UserSummaryOut(read_only=True)
    content_type = serializers.CharField(source="target_kind", allow_null=True, read_only=True)
    content_id = serializers.UUIDField(source="target_id", allow_null=True, read_only=True)

    class Meta:
        model = Report
        fields = ("id", "reporter", "reported", "reason", "description", "content_type", "content_id", "status", "created_at", "updated_at")


class ReportStatusIn(serializers.Serializer):
    status = serializers.ChoiceField(choices=Report.Status.choices)
