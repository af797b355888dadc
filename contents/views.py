from django.contrib.auth import get_user_model
from django.db import transaction
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, OpenApiTypes, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from common.content import ContentRef
from common.pagination import PagePagination
from common.schema import ErrorOut
from notifications.services import emit_to_followers
from realtime.mixins import LiveChannelMixin
from . import services
from .models import Bug, Doc, Snippet
from .serializers import BugIn, BugOut, DocIn, DocOut, SnippetIn, SnippetOut

User = get_user_model()


def _content_schema(tag: str, label: str, in_serializer, out_serializer, filters):
    pk = OpenApiParameter(name="pk", location=OpenApiParameter.PATH, type=OpenApiTypes.UUID, description=f"{label} ID (UUID)")
    return extend_schema_view(
        list=extend_schema(
            tags=[tag],
            summary=f"{label} 목록",
            description="공개 항목만 최신순으로 반환합니다. `author` 가 본인이면 비공개 항목도 포함됩니다.",
            parameters=[OpenApiParameter(name="author", type=OpenApiTypes.STR, required=False, description="작성자 username")] + filters,
            responses={200: out_serializer(many=True), 400: OpenApiResponse(response=ErrorOut)},
        ),
        retrieve=extend_schema(
            tags=[tag],
            summary=f"{label} 단건 조회",
            parameters=[pk],
            responses={200: out_serializer, 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut), 410: OpenApiResponse(response=ErrorOut)},
        ),
        create=extend_schema(
            tags=[tag],
            summary=f"{label} 작성",
            description="공개 항목이면 커밋 후 팔로워들에게 실시간 이벤트를 보냅니다.",
            request=in_serializer,
            responses={201: out_serializer, 400: OpenApiResponse(response=ErrorOut), 401: OpenApiResponse(response=ErrorOut)},
        ),
        partial_update=extend_schema(
            tags=[tag],
            summary=f"{label} 수정",
            parameters=[pk],
            request=in_serializer,
            responses={
                200: out_serializer,
                400: OpenApiResponse(response=ErrorOut),
                403: OpenApiResponse(response=ErrorOut),
                404: OpenApiResponse(response=ErrorOut),
                410: OpenApiResponse(response=ErrorOut),
            },
        ),
        destroy=extend_schema(
            tags=[tag],
            summary=f"{label} 삭제",
            description="좋아요/북마크/댓글/알림/신고를 한 트랜잭션에서 함께 삭제합니다.",
            parameters=[pk],
            responses={204: OpenApiResponse(description="삭제 완료"), 403: OpenApiResponse(response=ErrorOut), 404: OpenApiResponse(response=ErrorOut)},
        ),
    )


class ContentViewSet(LiveChannelMixin, viewsets.GenericViewSet):
    model = None
    input_serializer_class = None
    output_serializer_class = None
    pagination_class = PagePagination
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"
    # ?<param>=값 -> 모델 필드 필터
    filter_params = {}

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action in ("create", "partial_update"):
            return self.input_serializer_class
        return self.output_serializer_class

    def get_queryset(self):
        return self.model.objects.all()

    def _author(self):
        username = self.request.query_params.get("author")
        if not username:
            return None
        author = User.objects.filter(username=username).first()
        if author is None:
            raise NotFound("User not found.")
        return author

    def _apply_filters(self, qs):
        params = self.request.query_params
        tag = params.get("tag")
        if tag:
            # tags 는 JSON 배열: 따옴표까지 포함해 매칭해야 부분 문자열이 걸리지 않는다
            qs = qs.filter(tags__icontains=f'"{tag.strip().lower()}"')
        for param, field in self.filter_params.items():
            value = params.get(param)
            if value:
                qs = qs.filter(**{field: value})
        return qs

    def _output(self, item):
        return self.output_serializer_class(item).data

    def list(self, request):
        qs = services.visible_queryset(self.model, user=request.user, author=self._author())
        qs = services.annotate_for(self._apply_filters(qs), request.user).order_by("-created_at")
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(self.output_serializer_class(page, many=True).data)

    def retrieve(self, request, pk=None):
        item = services.get_readable(ContentRef(self.model.kind, pk), request.user, annotate=True)
        return Response(self._output(item))

    def create(self, request):
        s = self.input_serializer_class(data=request.data)
        s.is_valid(raise_exception=True)
        item = services.create_content(model=self.model, actor=request.user, data=s.validated_data)
        data = self._output(item)
        if item.is_public:
            live = self.get_live_channel()
            event = f"new-{self.model.kind.value}"
            transaction.on_commit(lambda: emit_to_followers(live, request.user.id, event, data))
        return Response(data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        item = services.get_owned(self.model, pk, request.user)
        s = self.input_serializer_class(item, data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        services.update_content(item, s.validated_data)
        item = services.get_readable(item.ref, request.user, annotate=True)
        return Response(self._output(item))

    def destroy(self, request, pk=None):
        # 만료된 버그도 작성자는 삭제할 수 있다
        item = services.get_owned(self.model, pk, request.user, allow_expired=True)
        services.delete_content(item)
        return Response(status=status.HTTP_204_NO_CONTENT)


@_content_schema(
    "Snippets",
    "스니펫",
    SnippetIn,
    SnippetOut,
    [OpenApiParameter(name="tag", type=OpenApiTypes.STR, required=False), OpenApiParameter(name="language", type=OpenApiTypes.STR, required=False)],
)
class SnippetViewSet(ContentViewSet):
    model = Snippet
    input_serializer_class = SnippetIn
    output_serializer_class = SnippetOut
    filter_params = {"language": "language__iexact"}


@_content_schema("Docs", "문서", DocIn, DocOut, [OpenApiParameter(name="tag", type=OpenApiTypes.STR, required=False)])
class DocViewSet(ContentViewSet):
    model = Doc
    input_serializer_class = DocIn
    output_serializer_class = DocOut


@_content_schema(
    "Bugs",
    "버그 리포트",
    BugIn,
    BugOut,
    [
        OpenApiParameter(name="tag", type=OpenApiTypes.STR, required=False),
        OpenApiParameter(name="severity", type=OpenApiTypes.STR, required=False, enum=Bug.Severity.values),
        OpenApiParameter(name="status", type=OpenApiTypes.STR, required=False, enum=Bug.Status.values),
    ],
)
class BugViewSet(ContentViewSet):
    model = Bug
    input_serializer_class = BugIn
    output_serializer_class = BugOut
    filter_params = {"severity": "severity", "status": "status", "language": "language__iexact"}
