import pytest
from rest_framework import status

from contents.models import Doc, Snippet
from core.models import Role, UserPreferences
from relations.models import Follow

pytestmark = pytest.mark.django_db


class TestPublicProfile:
    def test_counts_and_follow_flag(self, api, make_user):
        alice, bob = make_user("alice"), make_user("bob")
        Snippet.objects.create(author=alice, title="a", code="x", language="go")
        Snippet.objects.create(author=alice, title="hidden", code="x", language="go", is_public=False)
        Doc.objects.create(author=alice, title="d", content="c")
        Follow.objects.create(follower=bob, following=alice)

        api.force_authenticate(bob)
        body = api.get("/api/v1/users/Alice").json()
        assert body["username"] == "alice"
        assert (body["snippets_count"], body["docs_count"], body["bugs_count"]) == (1, 1, 0)
        assert (body["followers_count"], body["following_count"]) == (1, 0)
        assert body["is_following"] is True

    def test_owner_counts_include_private(self, api, make_user):
        alice = make_user("alice")
        Snippet.objects.create(author=alice, title="hidden", code="x", language="go", is_public=False)
        api.force_authenticate(alice)
        body = api.get("/api/v1/users/alice").json()
        assert body["snippets_count"] == 1
        assert body["is_following"] is False

    def test_anonymous_can_view(self, api, make_user):
        make_user("alice")
        res = api.get("/api/v1/users/alice")
        assert res.status_code == status.HTTP_200_OK
        assert res.json()["is_following"] is False

    def test_reading_profile_does_not_create_preferences(self, api, make_user):
        alice = make_user("alice")
        assert api.get("/api/v1/users/alice").status_code == status.HTTP_200_OK
        assert not UserPreferences.objects.filter(user=alice).exists()

    def test_hidden_profiles(self, api, make_user):
        make_user("ghost", role=Role.BLOCKED)
        private = make_user("shy")
        UserPreferences.objects.create(user=private, profile_public=False)

        assert api.get("/api/v1/users/nobody").status_code == status.HTTP_404_NOT_FOUND
        assert api.get("/api/v1/users/ghost").status_code == status.HTTP_404_NOT_FOUND
        assert api.get("/api/v1/users/shy").status_code == status.HTTP_404_NOT_FOUND

        api.force_authenticate(private)
        assert api.get("/api/v1/users/shy").status_code == status.HTTP_200_OK


class TestMyProfile:
    def test_requires_auth(self, api):
        assert api.get("/api/v1/users/me").status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_editable_fields(self, api, make_user):
        me = make_user("me")
        api.force_authenticate(me)
        res = api.patch(
            "/api/v1/users/me",
            {"bio": "backend dev", "location": "Busan", "tech_stack": ["Django", " Django", "Go"], "username": "root", "role": "ADMIN"},
            format="json",
        )
        assert res.status_code == status.HTTP_200_OK
        body = res.json()
        assert body["bio"] == "backend dev"
        assert body["tech_stack"] == ["Django", "Go"]

        me.refresh_from_db()
        assert me.username == "me"
        assert me.role == Role.USER

    def test_bio_length(self, api, make_user):
        api.force_authenticate(make_user())
        assert api.patch("/api/v1/users/me", {"bio": "x" * 501}, format="json").status_code == status.HTTP_400_BAD_REQUEST


class TestSettings:
    def test_created_with_defaults_on_first_read(self, api, make_user):
        me = make_user()
        api.force_authenticate(me)
        body = api.get("/api/v1/settings").json()
        assert body["theme"] == "system"
        assert body["profile_public"] is True
        assert UserPreferences.objects.filter(user=me).count() == 1

    def test_put(self, api, make_user):
        api.force_authenticate(make_user())
        res = api.put("/api/v1/settings", {"theme": "dark", "email_notifications": False}, format="json")
        assert res.status_code == status.HTTP_200_OK
        assert res.json()["theme"] == "dark"
        assert res.json()["email_notifications"] is False
        assert api.put("/api/v1/settings", {"theme": "neon"}, format="json").status_code == status.HTTP_400_BAD_REQUEST
