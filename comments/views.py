from drf_spectacular.utils import extend_schema_view, extend_schema, OpenApiParameter, OpenApiResponse, OpenApiTypes, OpenApiExample
from rest_framework import viewsets, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.content import ContentRef
from common.pagination import PagePagination
from common.schema import ErrorOut
from common.serializers import ContentTargetIn
from contents.services import get_readable
from realtime.mixins import LiveChannelMixin
from . import services
from .models import Comment
from .permissions import IsAuthorOrReadOnly
from .serializers import CommentCreateIn, CommentOut, CommentThreadOut, CommentUpdateIn

TARGET_PARAMS = [
    OpenApiParameter(name=name, location=OpenApiParameter.QUERY, type=OpenApiTypes.UUID, required=False, description="셋 중 정확히 하나")
    for name in ("snippet_id", "doc_id", "bug_id")
]
COMMENT_ID = OpenApiParameter(name="id", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description="댓글 ID (UUID)")


@extend_schema_view(
    list=extend_schema(
        tags=["Comments"],
        summary="콘텐츠의 댓글 스레드 목록",
        description="최상위 댓글은 최신순, 각 댓글의 대댓글(replies)은 작성순으로 반환합니다.",
        operation_id="comments_list",
        parameters=TARGET_PARAMS,
        responses={200: CommentThreadOut(many=True), 400: ErrorOut, 403: ErrorOut, 404: ErrorOut, 410: ErrorOut},
    ),
    create=extend_schema(
        tags=["Comments"],
        summary="댓글/대댓글 작성",
        description=(
            "`snippet_id`, `doc_id`, `bug_id` 중 정확히 하나를 지정합니다.\n"
            "`parent_id` 를 주면 대댓글(REPLY 알림), 없으면 최상위 댓글(COMMENT 알림).\n"
            "작성된 댓글은 콘텐츠 room 으로 `new_comment` 이벤트가 전송됩니다."
        ),
        operation_id="comments_create",
        request=CommentCreateIn,
        responses={
            201: OpenApiResponse(response=CommentOut, description="생성된 댓글"),
            400: ErrorOut,
            401: ErrorOut,
            403: OpenApiResponse(response=ErrorOut, description="비공개 콘텐츠"),
            404: ErrorOut,
            410: OpenApiResponse(response=ErrorOut, description="만료된 버그 리포트"),
        },
        examples=[OpenApiExample("요청 예시", value={"snippet_id": "11111111-1111-1111-1111-111111111111", "content": "좋은 코드네요!"}, request_only=True)],
    ),
    retrieve=extend_schema(tags=["Comments"], summary="댓글 단건 조회", operation_id="comments_retrieve", parameters=[COMMENT_ID], responses={200: CommentOut, 403: ErrorOut, 404: ErrorOut, 410: ErrorOut}),
    partial_update=extend_schema(
        tags=["Comments"],
        summary="댓글 수정",
        operation_id="comments_partial_update",
        parameters=[COMMENT_ID],
        request=CommentUpdateIn,
        responses={200: CommentOut, 400: ErrorOut, 401: ErrorOut, 403: ErrorOut, 404: ErrorOut},
    ),
    destroy=extend_schema(
        tags=["Comments"],
        summary="댓글 삭제",
        description="대댓글과 그에 대한 신고도 함께 삭제됩니다.",
        operation_id="comments_destroy",
        parameters=[COMMENT_ID],
        responses={204: OpenApiResponse(description="삭제 성공"), 401: ErrorOut, 403: ErrorOut, 404: ErrorOut},
    ),
)
class CommentViewSet(LiveChannelMixin, viewsets.GenericViewSet):
    """
    /api/v1/comments?snippet_id=...  GET: 스레드 목록, POST: 작성
    /api/v1/comments/{id}            GET / PATCH / DELETE (수정·삭제는 작성자만)
    """

    serializer_class = CommentOut
    pagination_class = PagePagination
    queryset = Comment.objects.select_related("author").all()
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated(), IsAuthorOrReadOnly()]

    def list(self, request):
        s = ContentTargetIn(data=request.query_params)
        s.is_valid(raise_exception=True)
        ref: ContentRef = s.validated_data["ref"]
        get_readable(ref, request.user)

        page = self.paginate_queryset(services.threads_for(ref))
        return self.get_paginated_response(CommentThreadOut(page, many=True).data)

    def retrieve(self, request, pk=None):
        comment = self.get_object()
        get_readable(comment.content_ref, request.user)
        return Response(CommentOut(comment).data)

    def create(self, request):
        s = CommentCreateIn(data=request.data)
        s.is_valid(raise_exception=True)
        v = s.validated_data
        comment = services.create_comment(actor=request.user, ref=v["ref"], content=v["content"], parent_id=v.get("parent_id"), live=self.get_live_channel())
        return Response(CommentOut(comment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        comment = self.get_object()
        s = CommentUpdateIn(data=request.data)
        s.is_valid(raise_exception=True)
        services.update_comment(comment, s.validated_data["content"])
        return Response(CommentOut(comment).data)

    def destroy(self, request, pk=None):
        comment = self.get_object()
        services.delete_comment(comment)
        return Response(status=status.HTTP_204_NO_CONTENT)
