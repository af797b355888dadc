import math

from rest_framework.exceptions import ValidationError
from rest_framework.pagination import BasePagination
from rest_framework.response import Response


class PagePagination(BasePagination):
    """
    ?page=1&limit=20 페이지네이션. limit 은 최대 50 으로 잘라낸다.
    응답: {"items": [...], "total": N, "pages": P, "current_page": page, "has_more": bool}
    """

    default_limit = 20
    max_limit = 50

    def _param(self, request, name: str, default: int) -> int:
        raw = request.query_params.get(name)
        if raw in (None, ""):
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            raise ValidationError({name: "Must be a positive integer."})
        if value < 1:
            raise ValidationError({name: "Must be a positive integer."})
        return value

    def paginate_queryset(self, queryset, request, view=None):
        self.page = self._param(request, "page", 1)
        self.limit = min(self._param(request, "limit", self.default_limit), self.max_limit)
        self.total = len(queryset) if isinstance(queryset, (list, tuple)) else queryset.count()
        offset = (self.page - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    def envelope(self, items) -> dict:
        return {
            "items": items,
            "total": self.total,
            "pages": math.ceil(self.total / self.limit) if self.total else 0,
            "current_page": self.page,
            "has_more": self.page * self.limit < self.total,
        }

    def get_paginated_response(self, data):
        return Response(self.envelope(data))

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "required": ["items", "total", "pages", "current_page", "has_more"],
            "properties": {
                "items": schema,
                "total": {"type": "integer", "example": 42},
                "pages": {"type": "integer", "example": 3},
                "current_page": {"type": "integer", "example": 1},
                "has_more": {"type": "boolean"},
            },
        }

    def get_schema_operation_parameters(self, view):
        return [
            {"name": "page", "required": False, "in": "query", "schema": {"type": "integer", "minimum": 1}},
            {"name": "limit", "required": False, "in": "query", "schema": {"type": "integer", "minimum": 1, "maximum": self.max_limit}},
        ]
