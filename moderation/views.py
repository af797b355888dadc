from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse, OpenApiTypes
from rest_framework import serializers, status, viewsets
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.pagination import PagePagination
from common.permissions import IsAdminRole
from common.schema import BlockStateOut, ErrorOut
from . import services
from .models import Report
from .serializers import BlockedUserOut, BlockIn, ReportIn, ReportOut, ReportStatusIn

USER_ID = OpenApiParameter(name="user_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="대상 사용자 ID (UUID)")
REPORT_ID = OpenApiParameter(name="report_id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="신고 ID (UUID)")


class ModerationViewSet(viewsets.GenericViewSet):
    """
    POST /api/v1/moderation/block              차단 토글
    GET  /api/v1/moderation/block/{user_id}    차단 여부
    GET  /api/v1/moderation/blocked            내가 차단한 사용자
    POST /api/v1/moderation/report             신고 접수
    """

    permission_classes = [IsAuthenticated]
    pagination_class = PagePagination
    serializer_class = serializers.Serializer

    @extend_schema(
        tags=["Moderation"],
        summary="차단 토글",
        description="차단 중이면 해제, 아니면 차단합니다.",
        operation_id="moderation_block_toggle",
        request=BlockIn,
        responses={
            200: OpenApiResponse(response=BlockStateOut),
            400: OpenApiResponse(response=ErrorOut, description="자기 자신 차단"),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut, description="대상 사용자 없음"),
        },
    )
    def block(self, request):
        s = BlockIn(data=request.data)
        s.is_valid(raise_exception=True)
        result = services.toggle_block(actor=request.user, target_id=s.validated_data["user_id"])
        return Response({"is_blocked": result.is_blocked})

    @extend_schema(
        tags=["Moderation"],
        summary="차단 여부 확인",
        operation_id="moderation_block_check",
        parameters=[USER_ID],
        responses={200: OpenApiResponse(response=BlockStateOut), 401: OpenApiResponse(response=ErrorOut)},
    )
    def check(self, request, user_id=None):
        return Response({"is_blocked": services.is_blocked(request.user, user_id)})

    @extend_schema(
        tags=["Moderation"],
        summary="차단한 사용자 목록",
        operation_id="moderation_blocked_list",
        responses={200: BlockedUserOut(many=True), 401: OpenApiResponse(response=ErrorOut)},
    )
    def blocked(self, request):
        page = self.paginate_queryset(services.blocked_users(request.user))
        return self.get_paginated_response(BlockedUserOut(page, many=True).data)

    @extend_schema(
        tags=["Moderation"],
        summary="신고 접수",
        description="사용자(`reported_user_id`) 또는 콘텐츠(`content_type` + `content_id`) 중 하나를 신고합니다. 콘텐츠 신고는 작성자가 신고 대상자가 됩니다.",
        operation_id="moderation_report_create",
        request=ReportIn,
        responses={
            201: OpenApiResponse(response=ReportOut),
            400: OpenApiResponse(response=ErrorOut, description="대상 누락/중복 또는 자기 자신 신고"),
            401: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut, description="대상 없음"),
        },
    )
    def report(self, request):
        s = ReportIn(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data
        report = services.create_report(
            reporter=request.user,
            reason=data["reason"],
            description=data.get("description", ""),
            reported_user_id=data.get("reported_user_id"),
            target_kind=data.get("content_type"),
            target_id=data.get("content_id"),
        )
        return Response(ReportOut(report).data, status=status.HTTP_201_CREATED)


class ReportAdminViewSet(viewsets.GenericViewSet):
    """
    관리자 전용 신고 검토 큐.
    GET   /api/v1/moderation/reports?status=
    PATCH /api/v1/moderation/reports/{report_id}
    """

    permission_classes = [IsAuthenticated, IsAdminRole]
    pagination_class = PagePagination
    serializer_class = ReportOut

    @extend_schema(
        tags=["Moderation"],
        summary="신고 목록 (관리자)",
        operation_id="moderation_reports_list",
        parameters=[OpenApiParameter(name="status", type=OpenApiTypes.STR, required=False, enum=list(Report.Status.values))],
        responses={200: ReportOut(many=True), 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut), 403: OpenApiResponse(response=ErrorOut)},
    )
    def list(self, request):
        status_filter = request.query_params.get("status") or None
        if status_filter is not None and status_filter not in Report.Status.values:
            raise ValidationError({"status": f"Must be one of {', '.join(Report.Status.values)}."})
        page = self.paginate_queryset(services.list_reports(status_filter))
        return self.get_paginated_response(ReportOut(page, many=True).data)

    @extend_schema(
        tags=["Moderation"],
        summary="신고 상태 변경 (관리자)",
        operation_id="moderation_reports_update",
        parameters=[REPORT_ID],
        request=ReportStatusIn,
        responses={
            200: OpenApiResponse(response=ReportOut),
            400: OpenApiResponse(response=ErrorOut),
            401: OpenApiResponse(response=ErrorOut),
            403: OpenApiResponse(response=ErrorOut),
            404: OpenApiResponse(response=ErrorOut),
        },
    )
    def partial_update(self, request, report_id=None):
        s = ReportStatusIn(data=request.data)
        s.is_valid(raise_exception=True)
        report = services.update_report_status(report_id=report_id, status=s.validated_data["status"])
        return Response(ReportOut(report).data)
