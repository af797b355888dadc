import uuid

import pytest
from rest_framework import status

from comments.models import Comment
from core.models import Role
from contents.models import Doc
from moderation.models import BlockedUser, Report

pytestmark = pytest.mark.django_db

BASE = "/api/v1/moderation"


class TestBlocking:
    def test_toggle(self, api, make_user):
        a, b = make_user(), make_user()
        api.force_authenticate(a)

        assert api.post(f"{BASE}/block", {"user_id": str(b.id)}, format="json").json() == {"is_blocked": True}
        assert api.get(f"{BASE}/block/{b.id}").json() == {"is_blocked": True}
        assert api.post(f"{BASE}/block", {"user_id": str(b.id)}, format="json").json() == {"is_blocked": False}
        assert not BlockedUser.objects.exists()

    def test_block_is_directional(self, api, make_user):
        a, b = make_user(), make_user()
        BlockedUser.objects.create(blocker=a, blocked=b)
        api.force_authenticate(b)
        assert api.get(f"{BASE}/block/{a.id}").json() == {"is_blocked": False}

    def test_self_and_unknown(self, api, make_user):
        a = make_user()
        api.force_authenticate(a)
        assert api.post(f"{BASE}/block", {"user_id": str(a.id)}, format="json").status_code == status.HTTP_400_BAD_REQUEST
        assert api.post(f"{BASE}/block", {"user_id": str(uuid.uuid4())}, format="json").status_code == status.HTTP_404_NOT_FOUND
        assert api.post(f"{BASE}/block", {"user_id": "nope"}, format="json").status_code == status.HTTP_400_BAD_REQUEST

    def test_blocked_list(self, api, make_user):
        a, b, c = make_user(), make_user(), make_user()
        BlockedUser.objects.create(blocker=a, blocked=b)
        BlockedUser.objects.create(blocker=c, blocked=a)
        api.force_authenticate(a)
        body = api.get(f"{BASE}/blocked").json()
        assert body["total"] == 1
        assert body["items"][0]["user"]["id"] == str(b.id)


class TestReports:
    def _report(self, api, user, **payload):
        api.force_authenticate(user)
        return api.post(f"{BASE}/report", {"reason": "SPAM", **payload}, format="json")

    def test_report_user(self, api, make_user):
        a, b = make_user(), make_user()
        res = self._report(api, a, reported_user_id=str(b.id), description="bot account")
        assert res.status_code == status.HTTP_201_CREATED
        body = res.json()
        assert body["reported"]["id"] == str(b.id)
        assert body["status"] == "PENDING"
        assert body["content_type"] is None

    def test_report_content_targets_its_author(self, api, make_user):
        a, b = make_user(), make_user()
        doc = Doc.objects.create(author=b, title="t", content="c")
        res = self._report(api, a, content_type="doc", content_id=str(doc.id))
        assert res.status_code == status.HTTP_201_CREATED
        report = Report.objects.get()
        assert report.reported_id == b.id
        assert (report.target_kind, report.target_id) == ("doc", doc.id)

    def test_report_comment(self, api, make_user):
        a, b = make_user(), make_user()
        doc = Doc.objects.create(author=a, title="t", content="c")
        comment = Comment.objects.create(author=b, content="rude", **doc.ref.as_fields())
        res = self._report(api, a, content_type="comment", content_id=str(comment.id), reason="HARASSMENT")
        assert res.status_code == status.HTTP_201_CREATED
        assert Report.objects.get().reported_id == b.id

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"content_type": "doc"},
            {"content_id": "11111111-1111-1111-1111-111111111111"},
        ],
    )
    def test_exactly_one_target(self, api, make_user, payload):
        assert self._report(api, make_user(), **payload).status_code == status.HTTP_400_BAD_REQUEST

    def test_both_targets_rejected(self, api, make_user):
        a, b = make_user(), make_user()
        doc = Doc.objects.create(author=b, title="t", content="c")
        res = self._report(api, a, reported_user_id=str(b.id), content_type="doc", content_id=str(doc.id))
        assert res.status_code == status.HTTP_400_BAD_REQUEST

    def test_self_and_own_content(self, api, make_user):
        a = make_user()
        doc = Doc.objects.create(author=a, title="t", content="c")
        assert self._report(api, a, reported_user_id=str(a.id)).status_code == status.HTTP_400_BAD_REQUEST
        assert self._report(api, a, content_type="doc", content_id=str(doc.id)).status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_targets(self, api, make_user):
        a = make_user()
        assert self._report(api, a, reported_user_id=str(uuid.uuid4())).status_code == status.HTTP_404_NOT_FOUND
        assert self._report(api, a, content_type="bug", content_id=str(uuid.uuid4())).status_code == status.HTTP_404_NOT_FOUND
        assert self._report(api, a, content_type="comment", content_id=str(uuid.uuid4())).status_code == status.HTTP_404_NOT_FOUND

    def test_invalid_reason_and_long_description(self, api, make_user):
        a, b = make_user(), make_user()
        assert self._report(api, a, reported_user_id=str(b.id), reason="BORED").status_code == status.HTTP_400_BAD_REQUEST
        assert self._report(api, a, reported_user_id=str(b.id), description="x" * 501).status_code == status.HTTP_400_BAD_REQUEST


class TestAdminQueue:
    @pytest.fixture
    def seeded(self, make_user):
        a, b = make_user(), make_user()
        pending = Report.objects.create(reporter=a, reported=b, reason=Report.Reason.SPAM)
        resolved = Report.objects.create(reporter=b, reported=a, reason=Report.Reason.OTHER, status=Report.Status.RESOLVED)
        return pending, resolved

    def test_non_admin_forbidden_before_anything_else(self, api, make_user, seeded):
        api.force_authenticate(make_user())
        assert api.get(f"{BASE}/reports").status_code == status.HTTP_403_FORBIDDEN
        res = api.patch(f"{BASE}/reports/{uuid.uuid4()}", {"status": "garbage"}, format="json")
        assert res.status_code == status.HTTP_403_FORBIDDEN

    def test_list_and_filter(self, api, make_user, seeded):
        pending, _ = seeded
        api.force_authenticate(make_user(role=Role.ADMIN))
        assert api.get(f"{BASE}/reports").json()["total"] == 2
        body = api.get(f"{BASE}/reports", {"status": "PENDING"}).json()
        assert [r["id"] for r in body["items"]] == [str(pending.id)]
        assert api.get(f"{BASE}/reports", {"status": "LOST"}).status_code == status.HTTP_400_BAD_REQUEST

    def test_update_status(self, api, make_user, seeded):
        pending, _ = seeded
        api.force_authenticate(make_user(role=Role.ADMIN))
        res = api.patch(f"{BASE}/reports/{pending.id}", {"status": "DISMISSED"}, format="json")
        assert res.status_code == status.HTTP_200_OK
        pending.refresh_from_db()
        assert pending.status == Report.Status.DISMISSED

        assert api.patch(f"{BASE}/reports/{uuid.uuid4()}", {"status": "REVIEWED"}, format="json").status_code == status.HTTP_404_NOT_FOUND
        assert api.patch(f"{BASE}/reports/{pending.id}", {"status": "DONE"}, format="json").status_code == status.HTTP_400_BAD_REQUEST
