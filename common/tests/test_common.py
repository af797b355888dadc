import uuid

import pytest
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from common.content import ContentKind, ContentRef
from common.pagination import PagePagination

factory = APIRequestFactory()


def _paginate(items, **params):
    paginator = PagePagination()
    page = paginator.paginate_queryset(items, Request(factory.get("/x", params)))
    return page, paginator.envelope(page)


class TestPagePagination:
    def test_defaults(self):
        page, body = _paginate(list(range(45)))
        assert page == list(range(20))
        assert body["total"] == 45
        assert body["pages"] == 3
        assert body["current_page"] == 1
        assert body["has_more"] is True

    def test_last_page(self):
        page, body = _paginate(list(range(45)), page=3)
        assert page == list(range(40, 45))
        assert body["has_more"] is False

    def test_limit_is_capped(self):
        page, body = _paginate(list(range(120)), limit=500)
        assert len(page) == 50
        assert body["pages"] == 3

    def test_empty(self):
        page, body = _paginate([])
        assert page == []
        assert body == {"items": [], "total": 0, "pages": 0, "current_page": 1, "has_more": False}

    @pytest.mark.parametrize("params", [{"page": "0"}, {"page": "abc"}, {"limit": "-1"}])
    def test_invalid_params(self, params):
        with pytest.raises(ValidationError):
            _paginate([1, 2, 3], **params)


class TestContentRef:
    def test_from_single_field(self):
        pk = uuid.uuid4()
        ref = ContentRef.from_fields({"doc_id": str(pk)})
        assert ref.kind == ContentKind.DOC
        assert ref.id == pk
        assert ref.as_fields() == {"content_kind": "doc", "content_id": pk}
        assert ref.as_payload() == {"kind": "doc", "id": str(pk)}

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"snippet_id": str(uuid.uuid4()), "bug_id": str(uuid.uuid4())},
            {"snippet_id": None, "doc_id": "", "bug_id": None},
        ],
    )
    def test_exactly_one_target(self, data):
        with pytest.raises(ValidationError):
            ContentRef.from_fields(data)

    def test_malformed_uuid(self):
        with pytest.raises(ValidationError) as exc:
            ContentRef.from_fields({"bug_id": "not-a-uuid"})
        assert "bug_id" in exc.value.detail

    def test_equal_refs_hash_alike(self):
        pk = uuid.uuid4()
        assert ContentRef("snippet", str(pk)) == ContentRef(ContentKind.SNIPPET, pk)
        assert len({ContentRef("snippet", pk), ContentRef("snippet", str(pk))}) == 1
